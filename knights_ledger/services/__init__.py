from .transform_service import process_activities_for_db
from .leaderboard_service import (
    LeaderboardService,
    Timeframe,
    CreditPolicy,
    aggregate,
)
from .sync_service import SyncService, AuthorizationError, verify_sync_secret
from .volume_service import VolumeService

__all__ = [
    "process_activities_for_db",
    "LeaderboardService",
    "Timeframe",
    "CreditPolicy",
    "aggregate",
    "SyncService",
    "AuthorizationError",
    "verify_sync_secret",
    "VolumeService",
]
