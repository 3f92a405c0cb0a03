"""Create Purchase Order Use Case: a new DRAFT order for a store supplier."""

from dataclasses import dataclass

from storeledger.application.dto.requests import CreatePurchaseOrderRequest
from storeledger.application.dto.responses import PurchaseOrderResponse
from storeledger.application.use_cases.common import po_to_response, require_store_owner
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import AuditAction, PurchaseOrderStatus
from storeledger.core.entities.purchase_order import (
    AuditLogEntry,
    PurchaseOrder,
    PurchaseOrderItem,
)
from storeledger.core.exceptions import (
    ProductNotFoundError,
    SupplierNotFoundError,
    ValidationError,
)
from storeledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from storeledger.core.services.costing import order_subtotal
from storeledger.core.services.po_code import PurchaseOrderCodeGenerator

logger = get_logger(__name__)


@dataclass
class CreatePurchaseOrderResult:
    purchase_order: PurchaseOrder
    audit_entry: AuditLogEntry


class CreatePurchaseOrderUseCase:
    """Create a draft purchase order with its line items."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        code_generator: PurchaseOrderCodeGenerator | None = None,
    ):
        self._uow_factory = uow_factory
        self._code_generator = code_generator or PurchaseOrderCodeGenerator()

    async def execute(
        self, actor: Actor, request: CreatePurchaseOrderRequest
    ) -> CreatePurchaseOrderResult:
        """Execute create purchase order use case."""
        store_id = require_store_owner(actor, "create_purchase_order")

        product_ids = [line.product_id for line in request.items]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationError("items", "each product may appear only once", product_ids)

        logger.info(
            "create_purchase_order_started",
            store_id=store_id,
            supplier_id=request.supplier_id,
            line_count=len(request.items),
        )

        async with self._uow_factory() as uow:
            supplier = await uow.suppliers.get(request.supplier_id, store_id)
            if supplier is None:
                raise SupplierNotFoundError(request.supplier_id)

            for product_id in product_ids:
                if await uow.products.get(product_id, store_id) is None:
                    raise ProductNotFoundError(product_id)

            code = await self._code_generator.generate(uow.purchase_orders, store_id)

            items = [
                PurchaseOrderItem(product_id=line.product_id, qty=line.qty, cost=line.cost)
                for line in request.items
            ]
            subtotal = order_subtotal(items)
            po = PurchaseOrder(
                store_id=store_id,
                supplier_id=supplier.id,
                code=code,
                status=PurchaseOrderStatus.DRAFT,
                subtotal=subtotal,
                tax_total=0,
                total=subtotal,
                notes=request.notes,
                items=items,
            )
            po = await uow.purchase_orders.create(po)

            entry = await uow.audit_log.append(
                AuditLogEntry(
                    po_id=po.id,
                    user_id=actor.user_id,
                    action=AuditAction.CREATED,
                    previous_status=None,
                    new_status=PurchaseOrderStatus.DRAFT,
                    notes=request.notes,
                )
            )

        logger.info("purchase_order_created", po_id=po.id, code=po.code, total=po.total)
        return CreatePurchaseOrderResult(purchase_order=po, audit_entry=entry)

    def to_response(self, result: CreatePurchaseOrderResult) -> PurchaseOrderResponse:
        """Convert result to API response."""
        return po_to_response(result.purchase_order)
