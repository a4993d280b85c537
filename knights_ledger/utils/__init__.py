from .sanitize import sanitize_string
from .time import utcnow, utcfromtimestamp, to_naive_utc

__all__ = ["sanitize_string", "utcnow", "utcfromtimestamp", "to_naive_utc"]
