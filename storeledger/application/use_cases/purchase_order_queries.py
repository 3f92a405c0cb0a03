"""Read-side use cases for purchase orders and their audit history."""

from dataclasses import dataclass

from storeledger.application.dto.responses import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    PurchaseOrderListResponse,
    PurchaseOrderResponse,
)
from storeledger.application.use_cases.common import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Page,
    load_purchase_order,
    po_to_response,
    require_store_owner,
    resolve_supplier,
)
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import PurchaseOrderStatus
from storeledger.core.entities.purchase_order import AuditLogEntry, PurchaseOrder
from storeledger.core.interfaces.unit_of_work import UnitOfWorkFactory


@dataclass
class PurchaseOrderPage:
    purchase_orders: list[PurchaseOrder]
    total: int
    page: Page


@dataclass
class AuditHistory:
    po_id: int
    entries: list[AuditLogEntry]
    total: int
    page: Page


class _QueryUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self._uow_factory = uow_factory
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    def _page(self, limit: int | None, offset: int | None) -> Page:
        return Page.of(limit, offset, self._default_page_size, self._max_page_size)

    @staticmethod
    def _list_response(result: PurchaseOrderPage) -> PurchaseOrderListResponse:
        return PurchaseOrderListResponse(
            purchase_orders=[po_to_response(po) for po in result.purchase_orders],
            total=result.total,
            limit=result.page.limit,
            offset=result.page.offset,
        )


class GetPurchaseOrderUseCase(_QueryUseCase):
    """Fetch one order for its store owner or its linked supplier."""

    async def execute(self, actor: Actor, po_id: int) -> PurchaseOrder:
        async with self._uow_factory(read_only=True) as uow:
            return await load_purchase_order(uow, actor, po_id, "view_purchase_order")

    def to_response(self, result: PurchaseOrder) -> PurchaseOrderResponse:
        return po_to_response(result)


class ListPurchaseOrdersUseCase(_QueryUseCase):
    """List the owner's purchase orders, newest first."""

    async def execute(
        self,
        actor: Actor,
        status: PurchaseOrderStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PurchaseOrderPage:
        store_id = require_store_owner(actor, "list_purchase_orders")
        page = self._page(limit, offset)
        async with self._uow_factory(read_only=True) as uow:
            orders = await uow.purchase_orders.list_for_store(
                store_id, status=status, limit=page.limit, offset=page.offset
            )
            total = await uow.purchase_orders.count_for_store(store_id, status=status)
        return PurchaseOrderPage(purchase_orders=orders, total=total, page=page)

    def to_response(self, result: PurchaseOrderPage) -> PurchaseOrderListResponse:
        return self._list_response(result)


class ListSupplierPurchaseOrdersUseCase(_QueryUseCase):
    """List orders addressed to the calling supplier.

    With ``quotations_only`` the list is restricted to orders in a
    QUOTATION_* status, which is the supplier's quotation inbox.
    """

    async def execute(
        self,
        actor: Actor,
        quotations_only: bool = False,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PurchaseOrderPage:
        page = self._page(limit, offset)
        statuses = PurchaseOrderStatus.quotation_statuses() if quotations_only else None
        async with self._uow_factory(read_only=True) as uow:
            supplier = await resolve_supplier(uow, actor, "list_supplier_purchase_orders")
            orders = await uow.purchase_orders.list_for_supplier(
                supplier.id, statuses=statuses, limit=page.limit, offset=page.offset
            )
            total = await uow.purchase_orders.count_for_supplier(supplier.id, statuses=statuses)
        return PurchaseOrderPage(purchase_orders=orders, total=total, page=page)

    def to_response(self, result: PurchaseOrderPage) -> PurchaseOrderListResponse:
        return self._list_response(result)


class GetAuditHistoryUseCase(_QueryUseCase):
    """Audit history of one purchase order, newest first."""

    async def execute(
        self,
        actor: Actor,
        po_id: int,
        limit: int | None = None,
        offset: int | None = None,
    ) -> AuditHistory:
        page = self._page(limit, offset)
        async with self._uow_factory(read_only=True) as uow:
            po = await load_purchase_order(uow, actor, po_id, "view_audit_history")
            entries = await uow.audit_log.list_for_po(po.id, limit=page.limit, offset=page.offset)
            total = await uow.audit_log.count_for_po(po.id)
        return AuditHistory(po_id=po.id, entries=entries, total=total, page=page)

    def to_response(self, result: AuditHistory) -> AuditLogListResponse:
        return AuditLogListResponse(
            entries=[
                AuditLogEntryResponse(
                    id=e.id,  # type: ignore[arg-type]
                    po_id=e.po_id,
                    user_id=e.user_id,
                    action=e.action.value,
                    previous_status=e.previous_status.value if e.previous_status else None,
                    new_status=e.new_status.value,
                    notes=e.notes,
                    created_at=e.created_at,
                )
                for e in result.entries
            ],
            total=result.total,
            limit=result.page.limit,
            offset=result.page.offset,
        )
