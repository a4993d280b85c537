"""Sale record model persisted by the sync job."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


SOURCE_MAGICEDEN = "magiceden"


class SaleRecord(BaseModel):
    """
    A realized trade, keyed by its transaction signature.
    """
    signature: str = Field(description="Transaction signature (unique)")
    collection_symbol: str
    buyer: str
    seller: Optional[str] = None
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False, description="Price in SOL")
    block_time: datetime = Field(description="Naive UTC timestamp of the trade")
    source: str = SOURCE_MAGICEDEN
