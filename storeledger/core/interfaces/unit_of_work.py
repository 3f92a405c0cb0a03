"""Abstract unit of work: one transaction spanning every repository."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from types import TracebackType

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


class IUnitOfWork(ABC):
    """A transaction scope exposing the repositories the core writes through.

    Usage:
        async with uow_factory() as uow:
            po = await uow.purchase_orders.get(po_id)
            ...

    Leaving the block normally commits; an exception rolls back every
    write made through the repositories.
    """

    purchase_orders: IPurchaseOrderStore
    audit_log: IAuditLogStore
    products: IProductStore
    categories: ICategoryStore
    suppliers: ISupplierStore
    stock_ledger: IStockLedgerStore

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit the transaction."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard every write of the transaction."""
        pass


# Called as factory() for a write transaction, factory(read_only=True) for reads
UnitOfWorkFactory = Callable[..., IUnitOfWork]
