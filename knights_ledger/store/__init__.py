from .database import Base, SaleRow
from .sales_store import SalesStore, StoreWriteError, create_admin_store, BATCH_SIZE

__all__ = [
    "Base",
    "SaleRow",
    "SalesStore",
    "StoreWriteError",
    "create_admin_store",
    "BATCH_SIZE",
]
