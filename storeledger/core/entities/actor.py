"""Caller identity handed to the core by the authentication layer."""

from pydantic import BaseModel

from storeledger.core.entities.enums import UserRole


class Actor(BaseModel):
    """An authenticated user acting on the core.

    ``store_id`` is the store the user owns; it is only meaningful for
    store owners. Suppliers are resolved from ``user_id`` through their
    linked supplier record.
    """

    user_id: int
    role: UserRole
    store_id: int | None = None

    @property
    def is_store_owner(self) -> bool:
        return self.role == UserRole.STORE_OWNER and self.store_id is not None

    @property
    def is_supplier(self) -> bool:
        return self.role == UserRole.SUPPLIER
