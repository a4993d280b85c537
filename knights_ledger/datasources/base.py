"""Abstract base class for data sources."""

from abc import ABC, abstractmethod

from knights_ledger.models import RawActivity


class UpstreamFetchError(RuntimeError):
    """Raised when the marketplace API could not return any usable data."""


class DataSource(ABC):
    """
    Abstract interface for marketplace activity sources.

    Lets the sync job and the volume endpoint run against Magic Eden in
    production and against in-memory fakes in tests.
    """

    @abstractmethod
    async def get_collection_activities(
        self,
        symbol: str,
        limit: int = 10000,
    ) -> list[RawActivity]:
        """
        Retrieve recent activities for a collection.

        Args:
            symbol: Collection symbol (e.g. 'vibe_knights')
            limit: Maximum number of activities to return

        Returns:
            List of RawActivity, most recent first, at most `limit` long

        Raises:
            UpstreamFetchError: If no page could be fetched at all.

        Note:
            Implementations handle pagination internally. A failure after
            at least one successful page returns what was collected so far.
        """
        pass

    @abstractmethod
    async def get_wallet_activities(
        self,
        address: str,
        limit: int = 500,
    ) -> list[RawActivity]:
        """
        Retrieve recent activities for a wallet across all collections.

        Args:
            address: Wallet address
            limit: Maximum number of activities to return

        Returns:
            List of RawActivity, most recent first
        """
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).

        Override this if the data source holds resources that need cleanup.
        """
        pass
