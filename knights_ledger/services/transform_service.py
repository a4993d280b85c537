"""Turns raw marketplace activities into storable sale records."""

import logging
from typing import Iterable, Optional
from datetime import datetime

from pydantic import ValidationError

from knights_ledger.models import RawActivity, SaleRecord, SOURCE_MAGICEDEN
from knights_ledger.utils import sanitize_string, utcfromtimestamp, utcnow

logger = logging.getLogger(__name__)


def process_activities_for_db(
    activities: Iterable[RawActivity],
    symbol: str,
    now: Optional[datetime] = None,
) -> list[SaleRecord]:
    """
    Keep realized trades and map them to SaleRecord.

    Listings, bids, cancellations and trades missing a buyer or signature
    are dropped without error.

    Args:
        activities: Raw activities from the marketplace
        symbol: Collection symbol stored on every record
        now: Ingestion time used when an activity has no blockTime

    Returns:
        List of SaleRecord in input order
    """
    ingested_at = now or utcnow()
    records = []

    for activity in activities:
        if not activity.is_realized_trade:
            continue

        block_time = (
            utcfromtimestamp(activity.block_time)
            if activity.block_time
            else ingested_at
        )
        try:
            records.append(
                SaleRecord(
                    signature=sanitize_string(activity.signature),
                    collection_symbol=sanitize_string(symbol),
                    buyer=sanitize_string(activity.buyer),
                    seller=sanitize_string(activity.seller),
                    price=activity.price or 0,
                    block_time=block_time,
                    source=SOURCE_MAGICEDEN,
                )
            )
        except ValidationError:
            logger.debug(f"Dropping unstorable activity {activity.signature}")

    return records
