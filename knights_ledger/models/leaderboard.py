"""Leaderboard entry model for API responses."""

from typing import Optional
from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    """
    A single entry in the leaderboard.
    """
    rank: int
    address: str
    volume: float = Field(description="Credited volume in SOL")
    avatar: str = Field(description="Display token derived from the address")
    donated: Optional[float] = Field(default=None, description="Royalty share donated (even-split only)")
    burned: Optional[float] = Field(default=None, description="Royalty share burned (even-split only)")


class WalletVolume(BaseModel):
    """Realized trade volume for a single wallet."""
    address: str
    volume: float
