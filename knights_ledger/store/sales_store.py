"""Sales persistence with idempotent, batched upserts."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from knights_ledger.config import Config
from knights_ledger.models import SaleRecord
from knights_ledger.utils import to_naive_utc
from .database import Base, SaleRow

logger = logging.getLogger(__name__)

BATCH_SIZE = 100


class StoreWriteError(RuntimeError):
    """Raised when a batch of sales could not be written."""


def _engine_kwargs(database_url: str) -> dict:
    kwargs: dict = {"echo": False}
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"timeout": 30}  # Wait up to 30s when DB is locked
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return kwargs


class SalesStore:
    """
    Store for SaleRecord rows keyed by transaction signature.

    Writes are chunked and each chunk commits on its own, so a failure
    part-way leaves the earlier chunks in place. Duplicate signatures are
    ignored; source transactions never change once confirmed.
    """

    def __init__(self, database_url: str, engine: Optional[AsyncEngine] = None):
        self.database_url = database_url
        self._engine = engine or create_async_engine(
            database_url, **_engine_kwargs(database_url)
        )
        self._session_factory = sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init_models(self) -> None:
        """Create the sales table if it does not exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def _insert_ignore(self, rows: list[dict]):
        if self._engine.dialect.name == "postgresql":
            stmt = pg_insert(SaleRow).values(rows)
        else:
            stmt = sqlite_insert(SaleRow).values(rows)
        return stmt.on_conflict_do_nothing(index_elements=["signature"])

    async def upsert(self, records: Sequence[SaleRecord]) -> int:
        """
        Insert sale records in chunks of BATCH_SIZE, ignoring known signatures.

        Args:
            records: Sale records to write

        Returns:
            Number of records submitted (including ignored duplicates)

        Raises:
            StoreWriteError: On the first chunk that fails. Remaining chunks
                are not attempted.
        """
        submitted = 0

        for start in range(0, len(records), BATCH_SIZE):
            batch = records[start:start + BATCH_SIZE]
            rows = [record.model_dump() for record in batch]
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        await session.execute(self._insert_ignore(rows))
            except SQLAlchemyError as e:
                message = str(getattr(e, "orig", None) or e)
                logger.error(f"Upsert error after {submitted} records: {message}")
                raise StoreWriteError(message) from e
            submitted += len(batch)

        return submitted

    async def get_sales(
        self,
        since: Optional[datetime] = None,
        collection_symbol: Optional[str] = None,
    ) -> list[SaleRecord]:
        """
        Read sales, newest first.

        Args:
            since: Inclusive lower bound on block_time, None for no bound
            collection_symbol: Optional collection filter

        Returns:
            List of SaleRecord ordered by block_time descending
        """
        stmt = select(SaleRow).order_by(SaleRow.block_time.desc(), SaleRow.id)
        if since is not None:
            stmt = stmt.where(SaleRow.block_time >= to_naive_utc(since))
        if collection_symbol:
            stmt = stmt.where(SaleRow.collection_symbol == collection_symbol)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()

        return [
            SaleRecord(
                signature=row.signature,
                collection_symbol=row.collection_symbol,
                buyer=row.buyer,
                seller=row.seller,
                price=row.price or 0.0,
                block_time=row.block_time,
                source=row.source,
            )
            for row in rows
        ]

    async def count(self) -> int:
        """Return the number of stored sales."""
        async with self._session_factory() as session:
            result = await session.execute(select(func.count(SaleRow.id)))
            return int(result.scalar_one())

    async def close(self) -> None:
        """Dispose of the engine's connection pool."""
        await self._engine.dispose()


def create_admin_store(config: Config) -> SalesStore:
    """
    Build the store used for writes.

    Raises:
        ConfigurationError: If ADMIN_DATABASE_URL is not set.
    """
    return SalesStore(config.require_admin_database_url())
