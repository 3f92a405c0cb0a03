"""Tests for the plain transition use cases and quotation submission."""

import pytest

from storeledger.application.dto.requests import SubmitQuotationRequest, TransitionRequest
from storeledger.application.use_cases import (
    ApproveQuotationUseCase,
    CancelPurchaseOrderUseCase,
    RequestQuotationUseCase,
    RequestRevisionUseCase,
    ShipPurchaseOrderUseCase,
    SubmitQuotationUseCase,
)
from storeledger.core.entities import AuditAction, PurchaseOrderItem, PurchaseOrderStatus
from storeledger.core.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    PurchaseOrderNotFoundError,
    SupplierNotFoundError,
)

S = PurchaseOrderStatus


class TestTransitionUseCases:
    async def test_request_quotation(self, uow_factory, mock_uow, owner, make_po):
        mock_uow.purchase_orders.get.return_value = make_po(S.DRAFT)
        use_case = RequestQuotationUseCase(uow_factory)

        result = await use_case.execute(owner, 70, TransitionRequest(notes="please quote"))

        assert result.purchase_order.status == S.QUOTATION_REQUESTED
        assert result.purchase_order.quotation_requested_at is not None
        assert result.audit_entry.action == AuditAction.QUOTATION_REQUESTED
        assert result.audit_entry.notes == "please quote"
        mock_uow.purchase_orders.get.assert_awaited_once_with(70, store_id=1)
        mock_uow.purchase_orders.update.assert_awaited_once()
        mock_uow.audit_log.append.assert_awaited_once()

    async def test_request_revision_records_notes(self, uow_factory, mock_uow, owner, make_po):
        mock_uow.purchase_orders.get.return_value = make_po(S.QUOTATION_SUBMITTED)
        use_case = RequestRevisionUseCase(uow_factory)

        result = await use_case.execute(owner, 70, TransitionRequest(notes="oil is too costly"))

        assert result.purchase_order.status == S.QUOTATION_REVISION_REQUESTED
        assert result.purchase_order.quotation_notes == "oil is too costly"

    async def test_invalid_transition_writes_nothing(self, uow_factory, mock_uow, owner, make_po):
        mock_uow.purchase_orders.get.return_value = make_po(S.DRAFT)
        use_case = ApproveQuotationUseCase(uow_factory)

        with pytest.raises(InvalidTransitionError):
            await use_case.execute(owner, 70)

        mock_uow.purchase_orders.update.assert_not_awaited()
        mock_uow.audit_log.append.assert_not_awaited()

    async def test_wrong_role_rejected_before_loading(self, uow_factory, supplier_user):
        use_case = CancelPurchaseOrderUseCase(uow_factory)
        with pytest.raises(ForbiddenError):
            await use_case.execute(supplier_user, 70)
        uow_factory.assert_not_called()

    async def test_order_of_another_store_is_not_found(self, uow_factory, mock_uow, owner):
        mock_uow.purchase_orders.get.return_value = None
        with pytest.raises(PurchaseOrderNotFoundError):
            await CancelPurchaseOrderUseCase(uow_factory).execute(owner, 70)

    async def test_ship_scoped_to_linked_supplier(
        self, uow_factory, mock_uow, supplier_user, linked_supplier, make_po
    ):
        mock_uow.suppliers.get_by_user.return_value = linked_supplier
        mock_uow.purchase_orders.get.return_value = make_po(S.QUOTATION_APPROVED)

        result = await ShipPurchaseOrderUseCase(uow_factory).execute(supplier_user, 70)

        assert result.purchase_order.status == S.SHIPPED
        mock_uow.purchase_orders.get.assert_awaited_once_with(70, supplier_id=8)

    async def test_unlinked_supplier(self, uow_factory, mock_uow, supplier_user):
        mock_uow.suppliers.get_by_user.return_value = None
        with pytest.raises(SupplierNotFoundError):
            await ShipPurchaseOrderUseCase(uow_factory).execute(supplier_user, 70)


class TestSubmitQuotationUseCase:
    @pytest.fixture
    def use_case(self, uow_factory):
        return SubmitQuotationUseCase(uow_factory, tax_rate_bps=1800)

    @pytest.fixture(autouse=True)
    def linked(self, mock_uow, linked_supplier):
        mock_uow.suppliers.get_by_user.return_value = linked_supplier

    async def test_quotes_and_recomputes_totals(
        self, use_case, mock_uow, supplier_user, make_po
    ):
        po = make_po(S.QUOTATION_REQUESTED)
        po.quotation_notes = "old note"
        mock_uow.purchase_orders.get.return_value = po

        result = await use_case.execute(
            supplier_user, 70, SubmitQuotationRequest(quotation={101: 150})
        )

        po = result.purchase_order
        assert po.status == S.QUOTATION_SUBMITTED
        assert po.quotation_submitted_at is not None
        assert po.get_item(101).quoted_cost == 150
        assert po.get_item(102).quoted_cost is None
        assert (po.subtotal, po.tax_total, po.total) == (800, 144, 944)
        assert po.quotation_notes is None
        assert result.quoted_item_ids == [101]
        mock_uow.purchase_orders.update_item_quoted_cost.assert_awaited_once_with(101, 150)

    async def test_ignores_unknown_items_and_non_positive_costs(
        self, use_case, mock_uow, supplier_user, make_po
    ):
        mock_uow.purchase_orders.get.return_value = make_po(S.QUOTATION_REVISION_REQUESTED)

        result = await use_case.execute(
            supplier_user,
            70,
            SubmitQuotationRequest(quotation={101: 0, 102: -5, 999: 400}),
        )

        assert result.quoted_item_ids == []
        assert result.ignored_item_ids == [101, 102, 999]
        assert result.purchase_order.subtotal == 700
        mock_uow.purchase_orders.update_item_quoted_cost.assert_not_awaited()

    async def test_previous_quote_kept_when_not_requoted(
        self, use_case, mock_uow, supplier_user, make_po
    ):
        po = make_po(
            S.QUOTATION_REVISION_REQUESTED,
            [
                PurchaseOrderItem(id=101, product_id=5, qty=2, cost=100, quoted_cost=120),
                PurchaseOrderItem(id=102, product_id=6, qty=1, cost=100),
            ],
        )
        mock_uow.purchase_orders.get.return_value = po

        result = await use_case.execute(
            supplier_user, 70, SubmitQuotationRequest(quotation={102: 90})
        )

        assert result.purchase_order.subtotal == 2 * 120 + 90

    async def test_only_requested_orders_can_be_quoted(
        self, use_case, mock_uow, supplier_user, make_po
    ):
        mock_uow.purchase_orders.get.return_value = make_po(S.SENT)
        with pytest.raises(InvalidTransitionError):
            await use_case.execute(supplier_user, 70, SubmitQuotationRequest(quotation={101: 5}))
        mock_uow.purchase_orders.update_item_quoted_cost.assert_not_awaited()

    async def test_owner_cannot_quote(self, use_case, owner):
        with pytest.raises(ForbiddenError):
            await use_case.execute(owner, 70, SubmitQuotationRequest(quotation={101: 5}))
