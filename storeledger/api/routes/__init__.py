"""API route modules."""

from storeledger.api.routes.health import router as health_router
from storeledger.api.routes.purchase_orders import router as purchase_orders_router
from storeledger.api.routes.stock_ledger import router as stock_ledger_router
from storeledger.api.routes.supplier import router as supplier_router

__all__ = [
    "health_router",
    "purchase_orders_router",
    "supplier_router",
    "stock_ledger_router",
]
