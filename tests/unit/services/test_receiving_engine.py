"""Tests for ReceivingEngine with mocked repositories."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from storeledger.core.entities import LedgerRefType, Product
from storeledger.core.exceptions import (
    ConcurrentModificationError,
    InvalidQuantityError,
    ProductNotFoundError,
)
from storeledger.core.services.receiving_engine import ReceivingEngine


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.products = AsyncMock()
    uow.stock_ledger = AsyncMock()
    uow.stock_ledger.append.side_effect = lambda entry: entry.model_copy(update={"id": 900})
    return uow


@pytest.fixture
def engine() -> ReceivingEngine:
    return ReceivingEngine()


class TestReceivingEngine:
    async def test_first_receipt_sets_cost(self, engine, mock_uow):
        mock_uow.products.get.return_value = Product(id=5, store_id=1, title="Rice")

        result = await engine.receive(
            mock_uow, store_id=1, product_id=5, po_id=70, quantity=10, unit_cost=500
        )

        mock_uow.products.update_stock_and_cost.assert_awaited_once_with(
            5, expected_stock=0, stock=10, cost_price=500
        )
        assert result.product.stock == 10
        assert result.product.cost_price == 500
        assert result.previous_stock == 0
        assert result.previous_cost_price is None

    async def test_ledger_entry_matches_receipt(self, engine, mock_uow):
        mock_uow.products.get.return_value = Product(
            id=5, store_id=1, title="Rice", stock=10, cost_price=500
        )

        result = await engine.receive(
            mock_uow, store_id=1, product_id=5, po_id=70, quantity=3, unit_cost=550
        )

        entry = mock_uow.stock_ledger.append.call_args[0][0]
        assert entry.ref_type == LedgerRefType.PO_RECEIPT
        assert entry.ref_id == 70
        assert entry.delta == 3
        assert entry.unit_cost == 550
        assert entry.store_id == 1
        assert result.entry.id == 900
        assert result.product.cost_price == 512

    @pytest.mark.parametrize("quantity", [0, -3])
    async def test_rejects_non_positive_quantity(self, engine, mock_uow, quantity):
        with pytest.raises(InvalidQuantityError):
            await engine.receive(
                mock_uow, store_id=1, product_id=5, po_id=70, quantity=quantity, unit_cost=1
            )
        mock_uow.products.get.assert_not_awaited()

    async def test_product_outside_store(self, engine, mock_uow):
        mock_uow.products.get.return_value = None

        with pytest.raises(ProductNotFoundError):
            await engine.receive(
                mock_uow, store_id=1, product_id=5, po_id=70, quantity=1, unit_cost=1
            )
        mock_uow.stock_ledger.append.assert_not_awaited()

    async def test_guard_failure_writes_no_ledger_entry(self, engine, mock_uow):
        mock_uow.products.get.return_value = Product(id=5, store_id=1, title="Rice", stock=2)
        mock_uow.products.update_stock_and_cost.side_effect = ConcurrentModificationError(
            "Product", 5
        )

        with pytest.raises(ConcurrentModificationError):
            await engine.receive(
                mock_uow, store_id=1, product_id=5, po_id=70, quantity=1, unit_cost=1
            )
        mock_uow.stock_ledger.append.assert_not_awaited()
