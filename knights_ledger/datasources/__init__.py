from .base import DataSource, UpstreamFetchError
from .magiceden import MagicEdenDataSource

__all__ = ["DataSource", "UpstreamFetchError", "MagicEdenDataSource"]
