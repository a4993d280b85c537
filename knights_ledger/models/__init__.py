from .activity import ActivityType, RawActivity, REALIZED_TRADE_TYPES
from .sale import SaleRecord, SOURCE_MAGICEDEN
from .leaderboard import LeaderboardEntry, WalletVolume
from .sync import SyncResult, SyncState

__all__ = [
    "ActivityType",
    "RawActivity",
    "REALIZED_TRADE_TYPES",
    "SaleRecord",
    "SOURCE_MAGICEDEN",
    "LeaderboardEntry",
    "WalletVolume",
    "SyncResult",
    "SyncState",
]
