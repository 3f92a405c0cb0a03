"""Submit Quotation Use Case: supplier prices a requested purchase order."""

from dataclasses import dataclass, field

from storeledger.application.dto.requests import SubmitQuotationRequest
from storeledger.application.dto.responses import PurchaseOrderResponse
from storeledger.application.use_cases.common import (
    load_purchase_order,
    po_to_response,
)
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.purchase_order import AuditLogEntry, PurchaseOrder
from storeledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from storeledger.core.services.costing import quotation_totals
from storeledger.core.services.po_state_machine import (
    PurchaseOrderStateMachine,
    Transition,
)

logger = get_logger(__name__)

DEFAULT_TAX_RATE_BPS = 1800  # 18%


@dataclass
class SubmitQuotationResult:
    purchase_order: PurchaseOrder
    audit_entry: AuditLogEntry | None
    quoted_item_ids: list[int] = field(default_factory=list)
    ignored_item_ids: list[int] = field(default_factory=list)


class SubmitQuotationUseCase:
    """
    Record the supplier's quoted unit costs and recompute totals.

    Costs that are not positive, and item ids that are not on the order,
    are ignored. Lines without a new quote keep their previous quoted
    cost or fall back to the baseline cost. Tax is applied to the
    subtotal at a fixed rate and rounded half-up.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        tax_rate_bps: int = DEFAULT_TAX_RATE_BPS,
        state_machine: PurchaseOrderStateMachine | None = None,
    ):
        self._uow_factory = uow_factory
        self._tax_rate_bps = tax_rate_bps
        self._state_machine = state_machine or PurchaseOrderStateMachine()

    async def execute(
        self, actor: Actor, po_id: int, request: SubmitQuotationRequest
    ) -> SubmitQuotationResult:
        """Execute submit quotation use case."""
        transition = Transition.SUBMIT_QUOTATION
        self._state_machine.authorize(actor, transition)

        async with self._uow_factory() as uow:
            po = await load_purchase_order(uow, actor, po_id, transition.value)
            self._state_machine.check(po, transition)

            quoted: list[int] = []
            for item in po.items:
                cost = request.quotation.get(item.id)
                if cost is None or cost <= 0:
                    continue
                await uow.purchase_orders.update_item_quoted_cost(item.id, cost)
                item.quoted_cost = cost
                quoted.append(item.id)

            known = {item.id for item in po.items}
            ignored = sorted(i for i, c in request.quotation.items() if i not in known or c <= 0)

            totals = quotation_totals(po.items, self._tax_rate_bps)
            po.subtotal = totals.subtotal
            po.tax_total = totals.tax_total
            po.total = totals.total
            po.quotation_notes = None

            entry = self._state_machine.apply(po, transition, actor, notes=request.notes)
            await uow.purchase_orders.update(po)
            if entry is not None:
                entry = await uow.audit_log.append(entry)

        logger.info(
            "quotation_submitted",
            po_id=po.id,
            quoted_items=len(quoted),
            ignored_items=len(ignored),
            subtotal=po.subtotal,
            tax_total=po.tax_total,
            total=po.total,
        )
        return SubmitQuotationResult(
            purchase_order=po,
            audit_entry=entry,
            quoted_item_ids=quoted,
            ignored_item_ids=ignored,
        )

    def to_response(self, result: SubmitQuotationResult) -> PurchaseOrderResponse:
        """Convert result to API response."""
        return po_to_response(result.purchase_order, self._state_machine)
