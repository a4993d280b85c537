"""Sync service: marketplace activities into the sales store."""

import hmac
import logging
from typing import Optional

from knights_ledger.datasources import DataSource, UpstreamFetchError
from knights_ledger.models import SyncResult, SyncState
from knights_ledger.store import SalesStore, StoreWriteError
from .transform_service import process_activities_for_db

logger = logging.getLogger(__name__)

SYNC_FETCH_LIMIT = 10000


class AuthorizationError(Exception):
    """Raised when a sync trigger does not carry the shared secret."""


def verify_sync_secret(authorization: Optional[str], secret: Optional[str]) -> None:
    """
    Check an Authorization header against the configured sync secret.

    An unset secret rejects every request.

    Raises:
        AuthorizationError: If the header is missing or does not match
            'Bearer <secret>' exactly.
    """
    if not secret or authorization is None:
        raise AuthorizationError("Unauthorized")
    if not hmac.compare_digest(authorization.encode(), f"Bearer {secret}".encode()):
        raise AuthorizationError("Unauthorized")


class SyncService:
    """
    Runs one fetch -> transform -> upsert pass for a collection.

    The service holds no state between runs; re-running over an overlapping
    range is safe because the store ignores known signatures. Authorization
    happens before the service is built.
    """

    def __init__(
        self,
        datasource: DataSource,
        store: SalesStore,
        collection_symbol: str,
        fetch_limit: int = SYNC_FETCH_LIMIT,
    ):
        self.datasource = datasource
        self.store = store
        self.collection_symbol = collection_symbol
        self.fetch_limit = fetch_limit
        self.state = SyncState.IDLE

    def _transition(self, state: SyncState) -> None:
        logger.debug(f"Sync {self.collection_symbol}: {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, message: str) -> SyncResult:
        self._transition(SyncState.FAILED)
        return SyncResult(success=False, message=message, state=self.state)

    async def run(self) -> SyncResult:
        """
        Execute the pipeline once.

        Returns:
            SyncResult with the number of records submitted, or a failure
            message. Fetch and store errors are reported, not raised.
        """
        self._transition(SyncState.FETCHING)
        try:
            activities = await self.datasource.get_collection_activities(
                self.collection_symbol,
                limit=self.fetch_limit,
            )
        except UpstreamFetchError as e:
            logger.error(f"[Sync] Fetching failed: {e}")
            return self._fail(f"Failed to fetch data from Magic Eden: {e}")

        self._transition(SyncState.TRANSFORMING)
        sales = process_activities_for_db(activities, self.collection_symbol)
        logger.info(f"[Sync] Prepare to upsert {len(sales)} sales events")

        if not sales:
            self._transition(SyncState.DONE)
            return SyncResult(success=True, message="No new sales found", count=0, state=self.state)

        self._transition(SyncState.UPSERTING)
        try:
            count = await self.store.upsert(sales)
        except StoreWriteError as e:
            logger.error(f"[Sync] Store error: {e}")
            return self._fail(f"Store error: {e}")

        self._transition(SyncState.DONE)
        return SyncResult(
            success=True,
            message=f"Synced {count} sales events",
            count=count,
            state=self.state,
        )
