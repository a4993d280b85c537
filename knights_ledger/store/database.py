"""SQLAlchemy table definitions."""

from sqlalchemy import Column, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SaleRow(Base):
    """A realized trade synced from the marketplace."""

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, autoincrement=True)
    signature = Column(String, nullable=False, unique=True)
    collection_symbol = Column(String, nullable=False)
    buyer = Column(String, nullable=False)
    seller = Column(String, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    block_time = Column(DateTime, nullable=False)  # naive UTC
    source = Column(String, nullable=False)

    __table_args__ = (
        Index("idx_sales_block_time", "block_time"),
        Index("idx_sales_collection", "collection_symbol"),
    )
