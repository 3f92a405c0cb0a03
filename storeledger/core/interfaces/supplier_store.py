"""Abstract interface for supplier lookup."""

from abc import ABC, abstractmethod

from storeledger.core.entities.supplier import Supplier


class ISupplierStore(ABC):
    """Interface for supplier lookups scoped by store or linked user."""

    @abstractmethod
    async def get(self, supplier_id: int, store_id: int) -> Supplier | None:
        """Get a supplier belonging to the store."""
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int) -> Supplier | None:
        """Get the supplier linked to a user account."""
        pass
