"""Stock ledger queries: entry history and stock reconciliation."""

from dataclasses import dataclass

from storeledger.application.dto.responses import (
    ReconciliationLineResponse,
    ReconciliationResponse,
    StockLedgerEntryResponse,
    StockLedgerListResponse,
)
from storeledger.application.use_cases.common import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Page,
    require_store_owner,
)
from storeledger.config import get_logger
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import LedgerRefType
from storeledger.core.entities.inventory import StockLedgerEntry, StockReconciliationLine
from storeledger.core.interfaces.unit_of_work import UnitOfWorkFactory

logger = get_logger(__name__)


@dataclass
class StockLedgerPage:
    entries: list[StockLedgerEntry]
    total: int
    page: Page


@dataclass
class ReconciliationResult:
    store_id: int
    lines: list[StockReconciliationLine]

    @property
    def mismatches(self) -> list[StockReconciliationLine]:
        return [line for line in self.lines if not line.is_consistent]


class ListStockLedgerUseCase:
    """Ledger entries of the owner's store, newest first."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self._uow_factory = uow_factory
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def execute(
        self,
        actor: Actor,
        product_id: int | None = None,
        ref_type: LedgerRefType | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> StockLedgerPage:
        store_id = require_store_owner(actor, "view_stock_ledger")
        page = Page.of(limit, offset, self._default_page_size, self._max_page_size)
        async with self._uow_factory(read_only=True) as uow:
            entries = await uow.stock_ledger.list_entries(
                store_id,
                product_id=product_id,
                ref_type=ref_type,
                limit=page.limit,
                offset=page.offset,
            )
            total = await uow.stock_ledger.count_entries(
                store_id, product_id=product_id, ref_type=ref_type
            )
        return StockLedgerPage(entries=entries, total=total, page=page)

    def to_response(self, result: StockLedgerPage) -> StockLedgerListResponse:
        return StockLedgerListResponse(
            entries=[
                StockLedgerEntryResponse(
                    id=e.id,  # type: ignore[arg-type]
                    product_id=e.product_id,
                    ref_type=e.ref_type.value,
                    ref_id=e.ref_id,
                    delta=e.delta,
                    unit_cost=e.unit_cost,
                    created_at=e.created_at,
                )
                for e in result.entries
            ],
            total=result.total,
            limit=result.page.limit,
            offset=result.page.offset,
        )


class ReconcileStockUseCase:
    """Compare every product's stock with the sum of its ledger deltas."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def execute(self, store_id: int) -> ReconciliationResult:
        """Reconcile one store. Used by the CLI with a bare store id."""
        async with self._uow_factory(read_only=True) as uow:
            lines = await uow.stock_ledger.reconcile(store_id)

        result = ReconciliationResult(store_id=store_id, lines=lines)
        if result.mismatches:
            logger.warning(
                "stock_reconciliation_mismatch",
                store_id=store_id,
                mismatched_products=[m.product_id for m in result.mismatches],
            )
        else:
            logger.info("stock_reconciliation_ok", store_id=store_id, products=len(lines))
        return result

    async def execute_for(self, actor: Actor) -> ReconciliationResult:
        """Reconcile the calling owner's store."""
        return await self.execute(require_store_owner(actor, "reconcile_stock"))

    def to_response(self, result: ReconciliationResult) -> ReconciliationResponse:
        mismatches = result.mismatches
        return ReconciliationResponse(
            store_id=result.store_id,
            products_checked=len(result.lines),
            consistent=not mismatches,
            mismatches=[
                ReconciliationLineResponse(
                    product_id=m.product_id,
                    sku=m.sku,
                    title=m.title,
                    stock=m.stock,
                    ledger_total=m.ledger_total,
                    difference=m.difference,
                )
                for m in mismatches
            ],
        )
