"""Application use cases."""

from storeledger.application.use_cases.bulk_intake import BulkIntakeResult, BulkIntakeUseCase
from storeledger.application.use_cases.confirm_purchase_order import ConfirmPurchaseOrderUseCase
from storeledger.application.use_cases.create_purchase_order import (
    CreatePurchaseOrderResult,
    CreatePurchaseOrderUseCase,
)
from storeledger.application.use_cases.purchase_order_queries import (
    GetAuditHistoryUseCase,
    GetPurchaseOrderUseCase,
    ListPurchaseOrdersUseCase,
    ListSupplierPurchaseOrdersUseCase,
)
from storeledger.application.use_cases.receive_purchase_order import (
    ReceivePurchaseOrderUseCase,
    ReceiveResult,
)
from storeledger.application.use_cases.stock_ledger import (
    ListStockLedgerUseCase,
    ReconcileStockUseCase,
)
from storeledger.application.use_cases.submit_quotation import (
    SubmitQuotationResult,
    SubmitQuotationUseCase,
)
from storeledger.application.use_cases.transition_purchase_order import (
    ApproveQuotationUseCase,
    CancelPurchaseOrderUseCase,
    ClosePurchaseOrderUseCase,
    PurchaseOrderTransitionUseCase,
    RejectQuotationUseCase,
    RequestQuotationUseCase,
    RequestRevisionUseCase,
    SendPurchaseOrderUseCase,
    ShipPurchaseOrderUseCase,
    TransitionResult,
)

__all__ = [
    "CreatePurchaseOrderUseCase",
    "CreatePurchaseOrderResult",
    "PurchaseOrderTransitionUseCase",
    "TransitionResult",
    "RequestQuotationUseCase",
    "RequestRevisionUseCase",
    "ApproveQuotationUseCase",
    "RejectQuotationUseCase",
    "SendPurchaseOrderUseCase",
    "ShipPurchaseOrderUseCase",
    "CancelPurchaseOrderUseCase",
    "ClosePurchaseOrderUseCase",
    "SubmitQuotationUseCase",
    "SubmitQuotationResult",
    "ConfirmPurchaseOrderUseCase",
    "ReceivePurchaseOrderUseCase",
    "ReceiveResult",
    "BulkIntakeUseCase",
    "BulkIntakeResult",
    "GetPurchaseOrderUseCase",
    "ListPurchaseOrdersUseCase",
    "ListSupplierPurchaseOrdersUseCase",
    "GetAuditHistoryUseCase",
    "ListStockLedgerUseCase",
    "ReconcileStockUseCase",
]
