"""Raw marketplace activity as returned by Magic Eden."""

import math
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityType:
    """Activity type strings used by the marketplace."""
    BUY_NOW = "buyNow"
    ACCEPT_BID = "acceptBid"
    LIST = "list"
    DELIST = "delist"
    BID = "bid"
    CANCEL_BID = "cancelBid"


# Activity kinds that represent a completed, paid transfer
REALIZED_TRADE_TYPES = frozenset({ActivityType.BUY_NOW, ActivityType.ACCEPT_BID})


class RawActivity(BaseModel):
    """
    One activity entry from the marketplace API.

    The upstream payload is untrusted, so every field is optional and
    unknown fields are kept as-is. Validation happens when activities are
    turned into sale records, never here.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: Optional[str] = None
    signature: Optional[str] = Field(default=None, description="Transaction signature")
    buyer: Optional[str] = None
    seller: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False, description="Price in SOL")
    block_time: Optional[int] = Field(
        default=None,
        alias="blockTime",
        description="Unix timestamp in seconds",
    )

    @field_validator("type", "signature", "buyer", "seller", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        # Identifiers sometimes arrive as bare JSON numbers
        if v is None or isinstance(v, (str, dict, list)):
            return v
        return str(v)

    @field_validator("block_time", mode="before")
    @classmethod
    def truncate_block_time(cls, v: Any) -> Any:
        if isinstance(v, float):
            return int(v) if math.isfinite(v) else None
        return v

    @property
    def is_realized_trade(self) -> bool:
        """Check if this activity is a completed purchase with a buyer and signature."""
        return (
            self.type in REALIZED_TRADE_TYPES
            and bool(self.buyer)
            and bool(self.signature)
        )
