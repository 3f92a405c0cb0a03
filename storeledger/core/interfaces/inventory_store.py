"""Abstract interfaces for product, category and stock ledger storage."""

from abc import ABC, abstractmethod

from storeledger.core.entities.enums import LedgerRefType
from storeledger.core.entities.inventory import (
    Category,
    Product,
    StockLedgerEntry,
    StockReconciliationLine,
)


class IProductStore(ABC):
    """Interface for store-scoped product lookup and stock/cost updates."""

    @abstractmethod
    async def get(self, product_id: int, store_id: int) -> Product | None:
        """Get a product belonging to the store."""
        pass

    @abstractmethod
    async def get_by_sku(self, store_id: int, sku: str) -> Product | None:
        """Get a product by SKU within the store."""
        pass

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """Create a product."""
        pass

    @abstractmethod
    async def update_stock_and_cost(
        self,
        product_id: int,
        expected_stock: int,
        stock: int,
        cost_price: int | None,
    ) -> None:
        """Write new stock and cost if stock still equals expected_stock.

        Raises ConcurrentModificationError when the row changed since it
        was read.
        """
        pass


class ICategoryStore(ABC):
    """Interface for category find-or-create support."""

    @abstractmethod
    async def find_by_name(self, store_id: int, name: str) -> Category | None:
        """Find a category by name, ignoring case."""
        pass

    @abstractmethod
    async def slug_exists(self, store_id: int, slug: str) -> bool:
        """Check whether a slug is taken within the store."""
        pass

    @abstractmethod
    async def create(self, category: Category) -> Category:
        """Create a category."""
        pass


class IStockLedgerStore(ABC):
    """Interface for the append-only stock ledger."""

    @abstractmethod
    async def append(self, entry: StockLedgerEntry) -> StockLedgerEntry:
        """Record a ledger entry."""
        pass

    @abstractmethod
    async def list_entries(
        self,
        store_id: int,
        product_id: int | None = None,
        ref_type: LedgerRefType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[StockLedgerEntry]:
        """List ledger entries, newest first."""
        pass

    @abstractmethod
    async def count_entries(
        self,
        store_id: int,
        product_id: int | None = None,
        ref_type: LedgerRefType | None = None,
    ) -> int:
        """Count ledger entries matching the filters."""
        pass

    @abstractmethod
    async def reconcile(self, store_id: int) -> list[StockReconciliationLine]:
        """Compare each product's stock with the sum of its ledger deltas."""
        pass
