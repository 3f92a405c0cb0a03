"""Supplier-facing endpoints: quotation inbox, quoting and shipping."""

from fastapi import APIRouter, Body, Depends, Query

from storeledger.api.dependencies import (
    PurchaseOrderId,
    get_actor,
    get_list_supplier_purchase_orders_use_case,
    get_submit_quotation_use_case,
    transition_use_case,
)
from storeledger.application.dto.requests import (
    MAX_ID,
    SubmitQuotationRequest,
    TransitionRequest,
)
from storeledger.application.dto.responses import (
    ErrorResponse,
    PurchaseOrderListResponse,
    PurchaseOrderResponse,
)
from storeledger.application.use_cases import (
    ListSupplierPurchaseOrdersUseCase,
    PurchaseOrderTransitionUseCase,
    ShipPurchaseOrderUseCase,
    SubmitQuotationUseCase,
)
from storeledger.core.entities.actor import Actor

router = APIRouter(prefix="/api/supplier", tags=["supplier"])


@router.get("/quotation-requests", response_model=PurchaseOrderListResponse)
async def list_quotation_requests(
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0, le=MAX_ID),
    actor: Actor = Depends(get_actor),
    use_case: ListSupplierPurchaseOrdersUseCase = Depends(
        get_list_supplier_purchase_orders_use_case
    ),
) -> PurchaseOrderListResponse:
    """Orders in any quotation status addressed to the calling supplier."""
    result = await use_case.execute(actor, quotations_only=True, limit=limit, offset=offset)
    return use_case.to_response(result)


@router.post(
    "/quotation-requests/{po_id}/submit",
    response_model=PurchaseOrderResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def submit_quotation(
    po_id: PurchaseOrderId,
    request: SubmitQuotationRequest,
    actor: Actor = Depends(get_actor),
    use_case: SubmitQuotationUseCase = Depends(get_submit_quotation_use_case),
) -> PurchaseOrderResponse:
    """Quote unit costs for a requested order."""
    result = await use_case.execute(actor, po_id, request)
    return use_case.to_response(result)


@router.get("/purchase-orders", response_model=PurchaseOrderListResponse)
async def list_supplier_purchase_orders(
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0, le=MAX_ID),
    actor: Actor = Depends(get_actor),
    use_case: ListSupplierPurchaseOrdersUseCase = Depends(
        get_list_supplier_purchase_orders_use_case
    ),
) -> PurchaseOrderListResponse:
    """All orders addressed to the calling supplier."""
    result = await use_case.execute(actor, limit=limit, offset=offset)
    return use_case.to_response(result)


@router.post(
    "/purchase-orders/{po_id}/ship",
    response_model=PurchaseOrderResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def ship_purchase_order(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(ShipPurchaseOrderUseCase)
    ),
) -> PurchaseOrderResponse:
    """Mark a sent or quotation-approved order as shipped."""
    result = await use_case.execute(actor, po_id, request)
    return use_case.to_response(result)
