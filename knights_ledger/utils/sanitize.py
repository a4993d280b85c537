"""String sanitization for values written to the store."""

import re
from typing import Any

_NON_PRINTABLE_ASCII = re.compile(r"[^\x20-\x7E]")


def sanitize_string(value: Any) -> Any:
    """
    Keep only printable ASCII (space through tilde).

    Falsy values (None, empty string) are returned unchanged. Anything else
    is converted with str() before stripping.
    """
    if not value:
        return value
    return _NON_PRINTABLE_ASCII.sub("", str(value))
