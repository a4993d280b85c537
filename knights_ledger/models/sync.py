"""Sync run result model."""

from enum import Enum
from pydantic import BaseModel


class SyncState(str, Enum):
    """States of a single sync run."""
    IDLE = "idle"
    AUTHORIZING = "authorizing"
    FETCHING = "fetching"
    TRANSFORMING = "transforming"
    UPSERTING = "upserting"
    DONE = "done"
    FAILED = "failed"


class SyncResult(BaseModel):
    """Terminal report of a sync run."""
    success: bool
    message: str
    count: int = 0
    state: SyncState = SyncState.DONE
