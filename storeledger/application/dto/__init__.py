"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from storeledger.application.dto.requests import (
    BulkIntakeLineRequest,
    BulkIntakeRequest,
    ConfirmPurchaseOrderRequest,
    CreatePurchaseOrderRequest,
    PurchaseOrderLineRequest,
    ReceiveLineRequest,
    ReceivePurchaseOrderRequest,
    SubmitQuotationRequest,
    TransitionRequest,
)
from storeledger.application.dto.responses import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    BulkIntakeResponse,
    ComponentHealthResponse,
    ErrorResponse,
    HealthResponse,
    PurchaseOrderItemResponse,
    PurchaseOrderListResponse,
    PurchaseOrderResponse,
    ReceiptResponse,
    ReceivePurchaseOrderResponse,
    ReconciliationLineResponse,
    ReconciliationResponse,
    StockLedgerEntryResponse,
    StockLedgerListResponse,
)

__all__ = [
    # Requests
    "CreatePurchaseOrderRequest",
    "PurchaseOrderLineRequest",
    "TransitionRequest",
    "ConfirmPurchaseOrderRequest",
    "ReceivePurchaseOrderRequest",
    "ReceiveLineRequest",
    "SubmitQuotationRequest",
    "BulkIntakeRequest",
    "BulkIntakeLineRequest",
    # Responses
    "PurchaseOrderResponse",
    "PurchaseOrderItemResponse",
    "PurchaseOrderListResponse",
    "ReceiptResponse",
    "ReceivePurchaseOrderResponse",
    "BulkIntakeResponse",
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "StockLedgerEntryResponse",
    "StockLedgerListResponse",
    "ReconciliationLineResponse",
    "ReconciliationResponse",
    "ComponentHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
