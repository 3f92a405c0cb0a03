"""SQLite storage implementations."""

from storeledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
)
from storeledger.infrastructure.storage.sqlite.inventory_store import (
    SQLiteCategoryStore,
    SQLiteProductStore,
    SQLiteStockLedgerStore,
)
from storeledger.infrastructure.storage.sqlite.purchase_order_store import (
    SQLiteAuditLogStore,
    SQLitePurchaseOrderStore,
)
from storeledger.infrastructure.storage.sqlite.supplier_store import SQLiteSupplierStore
from storeledger.infrastructure.storage.sqlite.unit_of_work import (
    SQLiteUnitOfWork,
    SQLiteUnitOfWorkFactory,
)

_uow_factory: SQLiteUnitOfWorkFactory | None = None


async def get_uow_factory() -> SQLiteUnitOfWorkFactory:
    """Get the unit-of-work factory bound to the global pool."""
    global _uow_factory
    if _uow_factory is None:
        _uow_factory = SQLiteUnitOfWorkFactory(await get_pool())
    return _uow_factory


async def close_storage() -> None:
    """Drop the factory and close the global pool."""
    global _uow_factory
    _uow_factory = None
    await close_pool()


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    # Store classes
    "SQLitePurchaseOrderStore",
    "SQLiteAuditLogStore",
    "SQLiteProductStore",
    "SQLiteCategoryStore",
    "SQLiteStockLedgerStore",
    "SQLiteSupplierStore",
    # Unit of work
    "SQLiteUnitOfWork",
    "SQLiteUnitOfWorkFactory",
    "get_uow_factory",
    "close_storage",
]
