"""Core interfaces (ports) for dependency injection."""

from storeledger.core.interfaces.inventory_store import (
    ICategoryStore,
    IProductStore,
    IStockLedgerStore,
)
from storeledger.core.interfaces.purchase_order_store import (
    IAuditLogStore,
    IPurchaseOrderStore,
)
from storeledger.core.interfaces.supplier_store import ISupplierStore
from storeledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory

__all__ = [
    # Storage interfaces
    "IPurchaseOrderStore",
    "IAuditLogStore",
    "IProductStore",
    "ICategoryStore",
    "IStockLedgerStore",
    "ISupplierStore",
    # Transaction scope
    "IUnitOfWork",
    "UnitOfWorkFactory",
]
