"""Leaderboard service for ranking wallets by traded volume."""

from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, Optional

from knights_ledger.models import LeaderboardEntry, SaleRecord
from knights_ledger.store import SalesStore
from knights_ledger.utils import to_naive_utc, utcnow

LEADERBOARD_SIZE = 50

# Royalty carve-out reported per entry under the even-split policy
DONATED_RATE = 0.00345
BURNED_RATE = 0.00345

VOLUME_PLACES = 4
ROYALTY_PLACES = 5


class Timeframe(str, Enum):
    """Available leaderboard windows."""
    DAILY = "daily"
    MONTHLY = "monthly"
    ALL_TIME = "allTime"


class CreditPolicy(str, Enum):
    """How a trade's price is credited to its buyer and seller."""
    FULL_CREDIT = "full_credit"
    EVEN_SPLIT = "even_split"


_WINDOWS = {
    Timeframe.DAILY: timedelta(hours=24),
    Timeframe.MONTHLY: timedelta(days=30),
}


def window_start(timeframe: Timeframe, now: Optional[datetime] = None) -> Optional[datetime]:
    """Lower bound on block_time for a timeframe, None for all time."""
    window = _WINDOWS.get(timeframe)
    if window is None:
        return None
    return (now or utcnow()) - window


def _round(value: float, places: int) -> float:
    """Round half away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def aggregate(
    records: Iterable[SaleRecord],
    timeframe: Timeframe = Timeframe.ALL_TIME,
    policy: CreditPolicy = CreditPolicy.EVEN_SPLIT,
    now: Optional[datetime] = None,
    limit: int = LEADERBOARD_SIZE,
) -> list[LeaderboardEntry]:
    """
    Rank addresses by credited volume.

    Args:
        records: Sale records to aggregate
        timeframe: Window applied to block_time
        policy: Credit policy for buyer and seller
        now: Reference time for the window (defaults to current UTC)
        limit: Number of entries to keep

    Returns:
        List of LeaderboardEntry ordered by rank (1 = highest volume)
    """
    since = window_start(timeframe, now)
    share = 0.5 if policy == CreditPolicy.EVEN_SPLIT else 1.0

    volumes: dict[str, float] = {}
    for record in records:
        if since is not None and to_naive_utc(record.block_time) < since:
            continue
        credit = (record.price or 0) * share
        for address in (record.buyer, record.seller):
            if address:
                volumes[address] = volumes.get(address, 0.0) + credit

    # sorted() is stable, so equal volumes keep first-seen order
    ranked = sorted(volumes.items(), key=lambda item: item[1], reverse=True)

    leaderboard = []
    for i, (address, volume) in enumerate(ranked[:limit]):
        entry = LeaderboardEntry(
            rank=i + 1,
            address=address,
            volume=_round(volume, VOLUME_PLACES),
            avatar=address[:2].upper(),
        )
        if policy == CreditPolicy.EVEN_SPLIT:
            entry.donated = _round(volume * DONATED_RATE, ROYALTY_PLACES)
            entry.burned = _round(volume * BURNED_RATE, ROYALTY_PLACES)
        leaderboard.append(entry)

    return leaderboard


class LeaderboardService:
    """Service for generating volume leaderboards from stored sales."""

    def __init__(self, store: SalesStore, collection_symbol: Optional[str] = None):
        self.store = store
        self.collection_symbol = collection_symbol

    async def get_leaderboard(
        self,
        timeframe: Timeframe = Timeframe.ALL_TIME,
        policy: CreditPolicy = CreditPolicy.EVEN_SPLIT,
    ) -> list[LeaderboardEntry]:
        """
        Generate the leaderboard for a timeframe.

        Args:
            timeframe: daily, monthly or allTime
            policy: Credit policy for buyer and seller

        Returns:
            Top LEADERBOARD_SIZE entries sorted by rank
        """
        now = utcnow()
        records = await self.store.get_sales(
            since=window_start(timeframe, now),
            collection_symbol=self.collection_symbol,
        )
        return aggregate(records, timeframe=timeframe, policy=policy, now=now)
