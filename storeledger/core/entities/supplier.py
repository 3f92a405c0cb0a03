"""Supplier domain entity."""

from datetime import datetime

from pydantic import BaseModel, Field

from storeledger.core.clock import utc_now


class Supplier(BaseModel):
    """A supplier registered by a store, optionally linked to a user account."""

    id: int | None = None
    store_id: int
    user_id: int | None = None  # linked supplier login, if any
    name: str
    email: str | None = None
    phone: str | None = None
    lead_time_days: int = 3
    created_at: datetime = Field(default_factory=utc_now)
