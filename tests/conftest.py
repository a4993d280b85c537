"""Shared fixtures for ledger tests."""

import sys
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from knights_ledger.models import RawActivity, SaleRecord


@pytest.fixture
def now():
    """Fixed naive-UTC reference time."""
    return datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture
def make_sale(now):
    """Factory for SaleRecord with sensible defaults."""
    counter = {"n": 0}

    def _make(buyer="BuyerA", seller="SellerA", price=1.0, block_time=None, signature=None):
        counter["n"] += 1
        return SaleRecord(
            signature=signature or f"sig{counter['n']}",
            collection_symbol="vibe_knights",
            buyer=buyer,
            seller=seller,
            price=price,
            block_time=block_time or now,
        )

    return _make


@pytest.fixture
def raw_activity_payloads():
    """A realistic mix of Magic Eden /activities entries."""
    return [
        {
            "signature": "5xBuyNowSig",
            "type": "buyNow",
            "source": "magiceden_v2",
            "tokenMint": "Mint1",
            "collection": "vibe_knights",
            "buyer": "Buyer1",
            "seller": "Seller1",
            "price": 1.25,
            "blockTime": 1767225600,
        },
        {
            "signature": "5xAcceptBidSig",
            "type": "acceptBid",
            "buyer": "Buyer2",
            "seller": "Seller2",
            "price": 0.8,
            "blockTime": 1767229200,
        },
        {
            "signature": "5xListSig",
            "type": "list",
            "seller": "Seller3",
            "price": 3.0,
            "blockTime": 1767232800,
        },
        {
            "signature": "5xBidSig",
            "type": "bid",
            "buyer": "Buyer4",
            "price": 0.5,
        },
        {
            "type": "buyNow",
            "buyer": "Buyer5",
            "price": 2.0,
        },
    ]


@pytest.fixture
def raw_activities(raw_activity_payloads):
    return [RawActivity.model_validate(p) for p in raw_activity_payloads]
