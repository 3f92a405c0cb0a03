"""Tests for receiving and confirming purchase orders with mocked storage."""

from unittest.mock import AsyncMock

import pytest

from storeledger.application.dto.requests import (
    ConfirmPurchaseOrderRequest,
    ReceivePurchaseOrderRequest,
)
from storeledger.application.use_cases import (
    ConfirmPurchaseOrderUseCase,
    ReceivePurchaseOrderUseCase,
)
from storeledger.application.use_cases.receive_purchase_order import validate_delivery
from storeledger.core.entities import (
    AuditAction,
    Product,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    StockLedgerEntry,
)
from storeledger.core.exceptions import (
    InvalidQuantityError,
    InvalidTransitionError,
    PurchaseOrderItemNotFoundError,
    ValidationError,
)
from storeledger.core.services.receiving_engine import ReceiptResult

S = PurchaseOrderStatus


def delivery(*lines: tuple[int, int]) -> ReceivePurchaseOrderRequest:
    return ReceivePurchaseOrderRequest(
        items=[{"item_id": item_id, "received_qty": qty} for item_id, qty in lines]
    )


@pytest.fixture
def engine():
    engine = AsyncMock()

    async def receive(uow, store_id, product_id, po_id, quantity, unit_cost):
        return ReceiptResult(
            product=Product(id=product_id, store_id=store_id, title="P", stock=quantity),
            entry=StockLedgerEntry(
                id=1,
                store_id=store_id,
                product_id=product_id,
                ref_type="PO_RECEIPT",
                ref_id=po_id,
                delta=quantity,
                unit_cost=unit_cost,
            ),
            previous_stock=0,
            previous_cost_price=None,
        )

    engine.receive.side_effect = receive
    return engine


@pytest.fixture
def incrementing_uow(mock_uow):
    """increment_received_qty adds to the item of the order the test loaded."""

    async def increment(item_id, delta):
        item = mock_uow.purchase_orders.get.return_value.get_item(item_id)
        return item.received_qty + delta

    mock_uow.purchase_orders.increment_received_qty.side_effect = increment
    return mock_uow


class TestValidateDelivery:
    @pytest.fixture
    def po(self, make_po):
        return make_po(
            S.SHIPPED,
            [
                PurchaseOrderItem(id=101, product_id=5, qty=10, received_qty=4),
                PurchaseOrderItem(id=102, product_id=6, qty=3),
            ],
        )

    def test_resolves_lines(self, po):
        lines = validate_delivery(po, delivery((101, 6), (102, 0)))
        assert [(item.id, qty) for item, qty in lines] == [(101, 6), (102, 0)]

    def test_over_receipt(self, po):
        with pytest.raises(InvalidQuantityError) as exc_info:
            validate_delivery(po, delivery((101, 7)))
        assert exc_info.value.details["remaining"] == 6

    def test_negative_quantity(self, po):
        with pytest.raises(InvalidQuantityError):
            validate_delivery(po, delivery((102, -1)))

    def test_unknown_item(self, po):
        with pytest.raises(PurchaseOrderItemNotFoundError):
            validate_delivery(po, delivery((999, 1)))

    def test_duplicate_item(self, po):
        with pytest.raises(ValidationError):
            validate_delivery(po, delivery((101, 1), (101, 1)))

    def test_later_bad_line_rejects_whole_delivery(self, po):
        with pytest.raises(InvalidQuantityError):
            validate_delivery(po, delivery((102, 3), (101, 99)))


class TestReceivePurchaseOrderUseCase:
    @pytest.fixture
    def use_case(self, uow_factory, engine):
        return ReceivePurchaseOrderUseCase(uow_factory, engine=engine)

    async def test_partial_then_status_partial(
        self, use_case, incrementing_uow, engine, owner, make_po
    ):
        incrementing_uow.purchase_orders.get.return_value = make_po(S.SHIPPED)

        result = await use_case.execute(owner, 70, delivery((101, 1), (102, 0)))

        assert result.purchase_order.status == S.PARTIAL
        assert result.audit_entry.action == AuditAction.PARTIALLY_RECEIVED
        assert len(result.receipts) == 1
        engine.receive.assert_awaited_once()
        kwargs = engine.receive.call_args.kwargs
        assert kwargs["quantity"] == 1
        assert kwargs["unit_cost"] == 100
        assert kwargs["po_id"] == 70

    async def test_uses_quoted_cost(self, use_case, incrementing_uow, engine, owner, make_po):
        incrementing_uow.purchase_orders.get.return_value = make_po(
            S.QUOTATION_APPROVED,
            [PurchaseOrderItem(id=101, product_id=5, qty=2, cost=100, quoted_cost=85)],
        )

        result = await use_case.execute(owner, 70, delivery((101, 2)))

        assert engine.receive.call_args.kwargs["unit_cost"] == 85
        assert result.purchase_order.status == S.RECEIVED
        assert result.audit_entry.action == AuditAction.RECEIVED

    async def test_no_status_change_writes_no_audit_entry(
        self, use_case, incrementing_uow, owner, make_po
    ):
        incrementing_uow.purchase_orders.get.return_value = make_po(
            S.PARTIAL,
            [PurchaseOrderItem(id=101, product_id=5, qty=10, received_qty=2)],
        )

        result = await use_case.execute(owner, 70, delivery((101, 1)))

        assert result.purchase_order.status == S.PARTIAL
        assert result.audit_entry is None
        incrementing_uow.audit_log.append.assert_not_awaited()
        incrementing_uow.purchase_orders.update.assert_awaited_once()

    async def test_invalid_delivery_touches_nothing(
        self, use_case, incrementing_uow, engine, owner, make_po
    ):
        incrementing_uow.purchase_orders.get.return_value = make_po(S.SHIPPED)

        with pytest.raises(InvalidQuantityError):
            await use_case.execute(owner, 70, delivery((101, 1), (102, 6)))

        incrementing_uow.purchase_orders.increment_received_qty.assert_not_awaited()
        engine.receive.assert_not_awaited()

    async def test_cancelled_order_cannot_be_received(
        self, use_case, incrementing_uow, owner, make_po
    ):
        incrementing_uow.purchase_orders.get.return_value = make_po(S.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            await use_case.execute(owner, 70, delivery((101, 1)))


class TestConfirmPurchaseOrderUseCase:
    @pytest.fixture
    def use_case(self, uow_factory, engine):
        return ConfirmPurchaseOrderUseCase(uow_factory, engine=engine)

    async def test_received_books_remaining_quantities(
        self, use_case, incrementing_uow, engine, owner, make_po
    ):
        incrementing_uow.purchase_orders.get.return_value = make_po(S.SHIPPED)

        result = await use_case.execute(
            owner, 70, ConfirmPurchaseOrderRequest(status="received")
        )

        assert result.purchase_order.status == S.RECEIVED
        assert result.audit_entry.action == AuditAction.RECEIVED
        assert [c.kwargs["quantity"] for c in engine.receive.call_args_list] == [2, 5]
        assert all(i.is_fully_received for i in result.purchase_order.items)

    async def test_rejected_leaves_stock_alone(
        self, use_case, incrementing_uow, engine, owner, make_po
    ):
        incrementing_uow.purchase_orders.get.return_value = make_po(S.SHIPPED)

        result = await use_case.execute(
            owner, 70, ConfirmPurchaseOrderRequest(status="rejected", notes="damaged")
        )

        assert result.purchase_order.status == S.REJECTED
        assert result.audit_entry.notes == "damaged"
        engine.receive.assert_not_awaited()

    @pytest.mark.parametrize("status", [S.SENT, S.PARTIAL, S.RECEIVED])
    async def test_only_shipped_orders(self, use_case, incrementing_uow, owner, make_po, status):
        incrementing_uow.purchase_orders.get.return_value = make_po(status)
        with pytest.raises(InvalidTransitionError):
            await use_case.execute(owner, 70, ConfirmPurchaseOrderRequest(status="received"))
