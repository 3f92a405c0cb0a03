"""Purchase order endpoints for store owners."""

from fastapi import APIRouter, Body, Depends, Query, status

from storeledger.api.dependencies import (
    PurchaseOrderId,
    get_actor,
    get_audit_history_use_case,
    get_bulk_intake_use_case,
    get_confirm_purchase_order_use_case,
    get_create_purchase_order_use_case,
    get_get_purchase_order_use_case,
    get_list_purchase_orders_use_case,
    get_receive_purchase_order_use_case,
    transition_use_case,
)
from storeledger.application.dto.requests import (
    MAX_ID,
    BulkIntakeRequest,
    ConfirmPurchaseOrderRequest,
    CreatePurchaseOrderRequest,
    ReceivePurchaseOrderRequest,
    TransitionRequest,
)
from storeledger.application.dto.responses import (
    AuditLogListResponse,
    BulkIntakeResponse,
    ErrorResponse,
    PurchaseOrderListResponse,
    PurchaseOrderResponse,
    ReceivePurchaseOrderResponse,
)
from storeledger.application.use_cases import (
    ApproveQuotationUseCase,
    BulkIntakeUseCase,
    CancelPurchaseOrderUseCase,
    ClosePurchaseOrderUseCase,
    ConfirmPurchaseOrderUseCase,
    CreatePurchaseOrderUseCase,
    GetAuditHistoryUseCase,
    GetPurchaseOrderUseCase,
    ListPurchaseOrdersUseCase,
    PurchaseOrderTransitionUseCase,
    ReceivePurchaseOrderUseCase,
    RejectQuotationUseCase,
    RequestQuotationUseCase,
    RequestRevisionUseCase,
    SendPurchaseOrderUseCase,
)
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import PurchaseOrderStatus

router = APIRouter(prefix="/api/purchase-orders", tags=["purchase-orders"])

TRANSITION_RESPONSES = {
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.get("", response_model=PurchaseOrderListResponse)
async def list_purchase_orders(
    status_filter: PurchaseOrderStatus | None = Query(default=None, alias="status"),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0, le=MAX_ID),
    actor: Actor = Depends(get_actor),
    use_case: ListPurchaseOrdersUseCase = Depends(get_list_purchase_orders_use_case),
) -> PurchaseOrderListResponse:
    """List the store's purchase orders, newest first."""
    result = await use_case.execute(actor, status=status_filter, limit=limit, offset=offset)
    return use_case.to_response(result)


@router.post(
    "",
    response_model=PurchaseOrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_purchase_order(
    request: CreatePurchaseOrderRequest,
    actor: Actor = Depends(get_actor),
    use_case: CreatePurchaseOrderUseCase = Depends(get_create_purchase_order_use_case),
) -> PurchaseOrderResponse:
    """Create a DRAFT purchase order."""
    result = await use_case.execute(actor, request)
    return use_case.to_response(result)


@router.post(
    "/bulk-intake",
    response_model=BulkIntakeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def bulk_intake(
    request: BulkIntakeRequest,
    actor: Actor = Depends(get_actor),
    use_case: BulkIntakeUseCase = Depends(get_bulk_intake_use_case),
) -> BulkIntakeResponse:
    """Record goods bought offline, already paid and in hand."""
    result = await use_case.execute(actor, request)
    return use_case.to_response(result)


@router.get(
    "/{po_id}",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase_order(
    po_id: PurchaseOrderId,
    actor: Actor = Depends(get_actor),
    use_case: GetPurchaseOrderUseCase = Depends(get_get_purchase_order_use_case),
) -> PurchaseOrderResponse:
    """Get a purchase order with its items."""
    result = await use_case.execute(actor, po_id)
    return use_case.to_response(result)


@router.get(
    "/{po_id}/audit-logs",
    response_model=AuditLogListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_audit_logs(
    po_id: PurchaseOrderId,
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0, le=MAX_ID),
    actor: Actor = Depends(get_actor),
    use_case: GetAuditHistoryUseCase = Depends(get_audit_history_use_case),
) -> AuditLogListResponse:
    """Status history of a purchase order, newest first."""
    result = await use_case.execute(actor, po_id, limit=limit, offset=offset)
    return use_case.to_response(result)


async def _transition(
    use_case: PurchaseOrderTransitionUseCase,
    actor: Actor,
    po_id: PurchaseOrderId,
    request: TransitionRequest | None,
) -> PurchaseOrderResponse:
    result = await use_case.execute(actor, po_id, request)
    return use_case.to_response(result)


@router.post(
    "/{po_id}/request-quotation",
    response_model=PurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def request_quotation(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(RequestQuotationUseCase)
    ),
) -> PurchaseOrderResponse:
    """Ask the supplier to quote a DRAFT order."""
    return await _transition(use_case, actor, po_id, request)


@router.post(
    "/{po_id}/request-revision",
    response_model=PurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def request_revision(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(RequestRevisionUseCase)
    ),
) -> PurchaseOrderResponse:
    """Send a submitted quotation back for revision."""
    return await _transition(use_case, actor, po_id, request)


@router.post(
    "/{po_id}/approve-quotation",
    response_model=PurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def approve_quotation(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(ApproveQuotationUseCase)
    ),
) -> PurchaseOrderResponse:
    return await _transition(use_case, actor, po_id, request)


@router.post(
    "/{po_id}/reject-quotation",
    response_model=PurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def reject_quotation(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(RejectQuotationUseCase)
    ),
) -> PurchaseOrderResponse:
    return await _transition(use_case, actor, po_id, request)


@router.post(
    "/{po_id}/send",
    response_model=PurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def send_purchase_order(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(SendPurchaseOrderUseCase)
    ),
) -> PurchaseOrderResponse:
    """Place a DRAFT order with the supplier."""
    return await _transition(use_case, actor, po_id, request)


@router.post(
    "/{po_id}/cancel",
    response_model=PurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def cancel_purchase_order(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(CancelPurchaseOrderUseCase)
    ),
) -> PurchaseOrderResponse:
    return await _transition(use_case, actor, po_id, request)


@router.post(
    "/{po_id}/close",
    response_model=PurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def close_purchase_order(
    po_id: PurchaseOrderId,
    request: TransitionRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    use_case: PurchaseOrderTransitionUseCase = Depends(
        transition_use_case(ClosePurchaseOrderUseCase)
    ),
) -> PurchaseOrderResponse:
    return await _transition(use_case, actor, po_id, request)


@router.post(
    "/{po_id}/confirm",
    response_model=ReceivePurchaseOrderResponse,
    responses=TRANSITION_RESPONSES,
)
async def confirm_purchase_order(
    po_id: PurchaseOrderId,
    request: ConfirmPurchaseOrderRequest,
    actor: Actor = Depends(get_actor),
    use_case: ConfirmPurchaseOrderUseCase = Depends(get_confirm_purchase_order_use_case),
) -> ReceivePurchaseOrderResponse:
    """Confirm a shipped order as received in full, or reject it."""
    result = await use_case.execute(actor, po_id, request)
    return use_case.to_response(result)


@router.post(
    "/{po_id}/receive",
    response_model=ReceivePurchaseOrderResponse,
    responses={**TRANSITION_RESPONSES, 400: {"model": ErrorResponse}},
)
async def receive_purchase_order(
    po_id: PurchaseOrderId,
    request: ReceivePurchaseOrderRequest,
    actor: Actor = Depends(get_actor),
    use_case: ReceivePurchaseOrderUseCase = Depends(get_receive_purchase_order_use_case),
) -> ReceivePurchaseOrderResponse:
    """Receive part (or the rest) of an order into stock."""
    result = await use_case.execute(actor, po_id, request)
    return use_case.to_response(result)
