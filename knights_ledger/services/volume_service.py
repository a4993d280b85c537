"""Wallet volume from recent marketplace activity."""

from knights_ledger.datasources import DataSource
from knights_ledger.models import REALIZED_TRADE_TYPES, WalletVolume

WALLET_ACTIVITY_LIMIT = 500


class VolumeService:
    """Sums realized trade prices across a wallet's recent activity."""

    def __init__(self, datasource: DataSource):
        self.datasource = datasource

    async def get_volume(self, address: str) -> WalletVolume:
        """
        Get realized trade volume for a wallet.

        Both buyNow and acceptBid count, matching the trades the sync stores;
        listings and bids are intent, not volume. Looks at the most recent
        WALLET_ACTIVITY_LIMIT activities.
        """
        activities = await self.datasource.get_wallet_activities(
            address,
            limit=WALLET_ACTIVITY_LIMIT,
        )
        total = sum(a.price or 0 for a in activities if a.type in REALIZED_TRADE_TYPES)
        return WalletVolume(address=address, volume=total)
