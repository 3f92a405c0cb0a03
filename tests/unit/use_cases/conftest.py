"""Mocked unit of work for use case tests."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from storeledger.core.entities import (
    Actor,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    Supplier,
    UserRole,
)


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__.return_value = uow
    uow.__aexit__.return_value = False
    for repo in ("purchase_orders", "audit_log", "products", "categories", "suppliers", "stock_ledger"):
        setattr(uow, repo, AsyncMock())
    uow.audit_log.append.side_effect = lambda entry: entry
    uow.purchase_orders.update.side_effect = lambda po: po
    return uow


@pytest.fixture
def uow_factory(mock_uow):
    return MagicMock(return_value=mock_uow)


@pytest.fixture
def owner() -> Actor:
    return Actor(user_id=1, role=UserRole.STORE_OWNER, store_id=1)


@pytest.fixture
def supplier_user() -> Actor:
    return Actor(user_id=50, role=UserRole.SUPPLIER)


@pytest.fixture
def linked_supplier() -> Supplier:
    return Supplier(id=8, store_id=1, user_id=50, name="Acme Wholesale")


@pytest.fixture
def make_po():
    def _make(status: PurchaseOrderStatus, items: list[PurchaseOrderItem] | None = None):
        return PurchaseOrder(
            id=70,
            store_id=1,
            supplier_id=8,
            code="PO-2026-0001-000001",
            status=status,
            items=items
            if items is not None
            else [
                PurchaseOrderItem(id=101, po_id=70, product_id=5, qty=2, cost=100),
                PurchaseOrderItem(id=102, po_id=70, product_id=6, qty=5, cost=100),
            ],
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
            updated_at=datetime(2026, 1, 1, tzinfo=UTC),
        )

    return _make
