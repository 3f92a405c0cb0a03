"""Stock ledger endpoints."""

from fastapi import APIRouter, Depends, Query

from storeledger.api.dependencies import (
    get_actor,
    get_list_stock_ledger_use_case,
    get_reconcile_stock_use_case,
)
from storeledger.application.dto.requests import MAX_ID
from storeledger.application.dto.responses import (
    ReconciliationResponse,
    StockLedgerListResponse,
)
from storeledger.application.use_cases import ListStockLedgerUseCase, ReconcileStockUseCase
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import LedgerRefType

router = APIRouter(prefix="/api/stock-ledger", tags=["stock-ledger"])


@router.get("", response_model=StockLedgerListResponse)
async def list_stock_ledger(
    product_id: int | None = Query(default=None, ge=1, le=MAX_ID),
    ref_type: LedgerRefType | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0, le=MAX_ID),
    actor: Actor = Depends(get_actor),
    use_case: ListStockLedgerUseCase = Depends(get_list_stock_ledger_use_case),
) -> StockLedgerListResponse:
    """Ledger entries of the caller's store, newest first."""
    result = await use_case.execute(
        actor, product_id=product_id, ref_type=ref_type, limit=limit, offset=offset
    )
    return use_case.to_response(result)


@router.get("/reconciliation", response_model=ReconciliationResponse)
async def reconcile_stock(
    actor: Actor = Depends(get_actor),
    use_case: ReconcileStockUseCase = Depends(get_reconcile_stock_use_case),
) -> ReconciliationResponse:
    """Products whose stock disagrees with the sum of their ledger entries."""
    result = await use_case.execute_for(actor)
    return use_case.to_response(result)
