"""
Bulk Intake Use Case: record an offline purchase already paid and in hand.

Categories and products are found or created by name and SKU, a
purchase order is written directly as RECEIVED, and every line goes
through the receiving engine once. All of it happens in one unit of
work, so a failure anywhere leaves no categories, products, orders or
ledger entries behind.

The order total is the amount the caller declares as paid. It may
differ from the sum of the line costs (bundle pricing, rounding) and is
kept as declared.
"""

from dataclasses import dataclass, field

from storeledger.application.dto.requests import BulkIntakeLineRequest, BulkIntakeRequest
from storeledger.application.dto.responses import BulkIntakeResponse
from storeledger.application.use_cases.common import (
    po_to_response,
    receipt_to_response,
    require_store_owner,
)
from storeledger.config import get_logger
from storeledger.core.clock import utc_now
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import AuditAction, PurchaseOrderStatus
from storeledger.core.entities.inventory import Category, Product
from storeledger.core.entities.purchase_order import (
    AuditLogEntry,
    PurchaseOrder,
    PurchaseOrderItem,
)
from storeledger.core.exceptions import SupplierNotFoundError, ValidationError
from storeledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory
from storeledger.core.services.costing import markup_price, order_subtotal
from storeledger.core.services.po_code import PurchaseOrderCodeGenerator
from storeledger.core.services.receiving_engine import ReceiptResult, ReceivingEngine
from storeledger.core.services.slug import category_name_key, slug_candidates, slugify

logger = get_logger(__name__)

DEFAULT_MARKUP_BPS = 15_000  # selling price = 1.5 x cost


@dataclass
class BulkIntakeResult:
    purchase_order: PurchaseOrder
    audit_entry: AuditLogEntry
    receipts: list[tuple[int, ReceiptResult]] = field(default_factory=list)
    created_product_ids: list[int] = field(default_factory=list)
    existing_product_ids: list[int] = field(default_factory=list)
    created_category_ids: list[int] = field(default_factory=list)


class BulkIntakeUseCase:
    """Create a RECEIVED purchase order from an offline purchase."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        code_generator: PurchaseOrderCodeGenerator | None = None,
        engine: ReceivingEngine | None = None,
        markup_bps: int = DEFAULT_MARKUP_BPS,
    ):
        self._uow_factory = uow_factory
        self._code_generator = code_generator or PurchaseOrderCodeGenerator()
        self._engine = engine or ReceivingEngine()
        self._markup_bps = markup_bps

    async def execute(self, actor: Actor, request: BulkIntakeRequest) -> BulkIntakeResult:
        """Execute bulk intake use case."""
        store_id = require_store_owner(actor, "bulk_intake")

        skus = [line.sku for line in request.items]
        if len(set(skus)) != len(skus):
            raise ValidationError("items", "each SKU may appear only once", skus)

        logger.info(
            "bulk_intake_started",
            store_id=store_id,
            supplier_id=request.supplier_id,
            lines=len(request.items),
            total_amount=request.total_amount,
        )

        result_products: list[Product] = []
        created_products: list[int] = []
        existing_products: list[int] = []
        categories: dict[str, Category] = {}
        created_categories: list[int] = []

        async with self._uow_factory() as uow:
            supplier = await uow.suppliers.get(request.supplier_id, store_id)
            if supplier is None:
                raise SupplierNotFoundError(request.supplier_id)

            for line in request.items:
                key = category_name_key(line.category)
                if key not in categories:
                    category, created = await self._find_or_create_category(
                        uow, store_id, line.category
                    )
                    categories[key] = category
                    if created:
                        created_categories.append(category.id)

                product = await uow.products.get_by_sku(store_id, line.sku)
                if product is None:
                    product = await uow.products.create(
                        self._new_product(store_id, supplier.id, categories[key].id, line)
                    )
                    created_products.append(product.id)
                else:
                    existing_products.append(product.id)
                result_products.append(product)

            now = utc_now()
            items = [
                PurchaseOrderItem(
                    product_id=product.id,
                    qty=line.quantity,
                    cost=line.unit_cost,
                    quoted_cost=line.unit_cost,
                    received_qty=line.quantity,
                )
                for line, product in zip(request.items, result_products)
            ]
            code = await self._code_generator.generate(uow.purchase_orders, store_id)
            po = PurchaseOrder(
                store_id=store_id,
                supplier_id=supplier.id,
                code=code,
                status=PurchaseOrderStatus.RECEIVED,
                placed_at=now,
                subtotal=order_subtotal(items),
                tax_total=0,
                total=request.total_amount,
                notes=request.notes
                or f"Bulk intake - offline procurement ({len(items)} items)",
                items=items,
                created_at=now,
                updated_at=now,
            )
            po = await uow.purchase_orders.create(po)

            receipts = []
            for item in po.items:
                receipt = await self._engine.receive(
                    uow,
                    store_id=store_id,
                    product_id=item.product_id,
                    po_id=po.id,
                    quantity=item.qty,
                    unit_cost=item.effective_cost,
                )
                receipts.append((item.id, receipt))

            entry = await uow.audit_log.append(
                AuditLogEntry(
                    po_id=po.id,
                    user_id=actor.user_id,
                    action=AuditAction.BULK_RECEIVED,
                    previous_status=None,
                    new_status=PurchaseOrderStatus.RECEIVED,
                    notes=po.notes,
                    created_at=now,
                )
            )

        logger.info(
            "bulk_intake_complete",
            po_id=po.id,
            code=po.code,
            products_created=len(created_products),
            products_existing=len(existing_products),
            categories_created=len(created_categories),
            subtotal=po.subtotal,
            total=po.total,
        )
        return BulkIntakeResult(
            purchase_order=po,
            audit_entry=entry,
            receipts=receipts,
            created_product_ids=created_products,
            existing_product_ids=existing_products,
            created_category_ids=created_categories,
        )

    @staticmethod
    async def _find_or_create_category(
        uow: IUnitOfWork, store_id: int, name: str
    ) -> tuple[Category, bool]:
        existing = await uow.categories.find_by_name(store_id, name)
        if existing is not None:
            return existing, False

        for slug in slug_candidates(slugify(name)):
            if not await uow.categories.slug_exists(store_id, slug):
                break
        category = await uow.categories.create(
            Category(store_id=store_id, name=name, slug=slug)
        )
        return category, True

    def _new_product(
        self,
        store_id: int,
        supplier_id: int,
        category_id: int,
        line: BulkIntakeLineRequest,
    ) -> Product:
        selling_price = (
            line.price if line.price is not None else markup_price(line.unit_cost, self._markup_bps)
        )
        return Product(
            store_id=store_id,
            category_id=category_id,
            supplier_id=supplier_id,
            sku=line.sku,
            title=line.title,
            description=line.description,
            selling_price=selling_price,
            cost_price=None,
            stock=0,
        )

    def to_response(self, result: BulkIntakeResult) -> BulkIntakeResponse:
        """Convert result to API response."""
        return BulkIntakeResponse(
            purchase_order=po_to_response(result.purchase_order),
            receipts=[receipt_to_response(i, r) for i, r in result.receipts],
            created_product_ids=result.created_product_ids,
            existing_product_ids=result.existing_product_ids,
            created_category_ids=result.created_category_ids,
        )
