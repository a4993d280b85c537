"""Magic Eden public API data source implementation."""

import asyncio
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from knights_ledger.models import RawActivity
from .base import DataSource, UpstreamFetchError

logger = logging.getLogger(__name__)

# API constants
MAINNET_API_URL = "https://api-mainnet.magiceden.dev/v2"
PAGE_SIZE = 500
MAX_PAGES = 50
PAGE_DELAY = 0.2
REQUEST_TIMEOUT = 30.0


class MagicEdenDataSource(DataSource):
    """
    Data source implementation using the Magic Eden v2 public API.

    Limitations:
    - Maximum 500 activities per request
    - At most 50 pages (25,000 activities) are read per collection fetch
    - The API is rate limited, so full pages are spaced out by a short delay
    """

    def __init__(
        self,
        api_url: str = MAINNET_API_URL,
        client: Optional[httpx.AsyncClient] = None,
        page_delay: float = PAGE_DELAY,
    ):
        """
        Initialize Magic Eden data source.

        Args:
            api_url: Base URL for the Magic Eden API
            client: Optional pre-built HTTP client (used by tests)
            page_delay: Seconds to wait between full pages
        """
        self.api_url = api_url
        self.page_delay = page_delay
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={"Accept": "application/json"},
                timeout=REQUEST_TIMEOUT,
            )
        return self._client

    async def _get_page(self, path: str, offset: int, limit: int) -> list[Any]:
        """
        Fetch one page of activities.

        Any transport error, HTTP status >= 400 or body that is not a JSON
        array is turned into an UpstreamFetchError.
        """
        client = await self._get_client()

        try:
            response = await client.get(path, params={"offset": offset, "limit": limit})
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"API Error {response.status_code} for {path}")
            raise UpstreamFetchError(f"API Error {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Parse error for {path}: {e}")
            raise UpstreamFetchError("Invalid JSON") from e

        if not isinstance(data, list):
            raise UpstreamFetchError(f"Unexpected response body for {path}")

        return data

    @staticmethod
    def _parse_activities(items: list[Any]) -> list[RawActivity]:
        """Parse raw items, dropping anything that is not a usable object."""
        activities = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                activities.append(RawActivity.model_validate(item))
            except ValidationError:
                logger.debug(f"Skipping malformed activity {item.get('signature')}")
        return activities

    async def get_collection_activities(
        self,
        symbol: str,
        limit: int = 10000,
    ) -> list[RawActivity]:
        """
        Retrieve recent activities for a collection.

        Walks offset pages of PAGE_SIZE until a short page, `limit` reached,
        or MAX_PAGES pages read.
        """
        path = f"/collections/{symbol}/activities"
        all_activities: list[RawActivity] = []
        offset = 0
        pages = 0

        logger.info(f"Starting fetch for {symbol}...")

        while pages < MAX_PAGES:
            logger.info(f"Fetching batch at offset {offset}...")
            try:
                data = await self._get_page(path, offset, PAGE_SIZE)
            except UpstreamFetchError as e:
                logger.error(f"Fetch error: {e}")
                if pages:
                    logger.warning(
                        f"Returning {len(all_activities)} activities from {pages} pages fetched before the error"
                    )
                    return all_activities[:limit]
                raise

            if not data:
                break

            all_activities.extend(self._parse_activities(data))
            pages += 1

            if len(data) < PAGE_SIZE or len(all_activities) >= limit:
                break

            offset += len(data)
            await asyncio.sleep(self.page_delay)

        logger.info(f"Fetched total {len(all_activities)} activities")
        return all_activities[:limit]

    async def get_wallet_activities(
        self,
        address: str,
        limit: int = 500,
    ) -> list[RawActivity]:
        """Retrieve a single page of recent activities for a wallet."""
        data = await self._get_page(
            f"/wallets/{address}/activities",
            offset=0,
            limit=min(limit, PAGE_SIZE),
        )
        return self._parse_activities(data)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
