"""
Dependency injection container for FastAPI.

Provides the caller identity, the unit-of-work factory and configured
use case instances to route handlers. Tests swap
``get_unit_of_work_factory`` through ``app.dependency_overrides``.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Path, status

from storeledger.application.dto.requests import MAX_ID

from storeledger.application.use_cases import (
    BulkIntakeUseCase,
    ConfirmPurchaseOrderUseCase,
    CreatePurchaseOrderUseCase,
    GetAuditHistoryUseCase,
    GetPurchaseOrderUseCase,
    ListPurchaseOrdersUseCase,
    ListStockLedgerUseCase,
    ListSupplierPurchaseOrdersUseCase,
    PurchaseOrderTransitionUseCase,
    ReceivePurchaseOrderUseCase,
    ReconcileStockUseCase,
    SubmitQuotationUseCase,
)
from storeledger.config import Settings, get_settings
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import UserRole
from storeledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from storeledger.core.services.po_code import PurchaseOrderCodeGenerator
from storeledger.infrastructure.storage.sqlite import get_uow_factory

PurchaseOrderId = Annotated[int, Path(le=MAX_ID, description="Purchase order ID")]


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


async def get_unit_of_work_factory() -> UnitOfWorkFactory:
    """Unit-of-work factory bound to the global SQLite pool."""
    return await get_uow_factory()


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


def get_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
    x_store_id: str | None = Header(default=None),
) -> Actor:
    """
    Caller identity from the headers set by the upstream auth layer.

    X-User-Id and X-User-Role are required; X-Store-Id identifies the
    store a STORE_OWNER acts for.
    """
    if not x_user_id or not x_user_role:
        raise _unauthorized("Missing caller identity")
    try:
        user_id = int(x_user_id)
        role = UserRole(x_user_role.strip().upper())
        store_id = int(x_store_id) if x_store_id else None
    except ValueError:
        raise _unauthorized("Malformed caller identity") from None
    if not 0 < user_id <= MAX_ID or (store_id is not None and not 0 < store_id <= MAX_ID):
        raise _unauthorized("Malformed caller identity")
    return Actor(user_id=user_id, role=role, store_id=store_id)


def _code_generator(settings: Settings) -> PurchaseOrderCodeGenerator:
    return PurchaseOrderCodeGenerator(max_attempts=settings.procurement.code_max_attempts)


# Use case dependencies
def get_create_purchase_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: Settings = Depends(get_app_settings),
) -> CreatePurchaseOrderUseCase:
    return CreatePurchaseOrderUseCase(uow_factory, code_generator=_code_generator(settings))


def transition_use_case(
    use_case_cls: type[PurchaseOrderTransitionUseCase],
) -> Callable[..., PurchaseOrderTransitionUseCase]:
    """Build a dependency providing one of the plain transition use cases."""

    def provider(
        uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    ) -> PurchaseOrderTransitionUseCase:
        return use_case_cls(uow_factory)

    return provider


def get_submit_quotation_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: Settings = Depends(get_app_settings),
) -> SubmitQuotationUseCase:
    return SubmitQuotationUseCase(
        uow_factory, tax_rate_bps=settings.procurement.quotation_tax_rate_bps
    )


def get_confirm_purchase_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> ConfirmPurchaseOrderUseCase:
    return ConfirmPurchaseOrderUseCase(uow_factory)


def get_receive_purchase_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> ReceivePurchaseOrderUseCase:
    return ReceivePurchaseOrderUseCase(uow_factory)


def get_bulk_intake_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: Settings = Depends(get_app_settings),
) -> BulkIntakeUseCase:
    return BulkIntakeUseCase(
        uow_factory,
        code_generator=_code_generator(settings),
        markup_bps=settings.procurement.default_markup_bps,
    )


def _page_kwargs(settings: Settings) -> dict[str, int]:
    return {
        "default_page_size": settings.procurement.default_page_size,
        "max_page_size": settings.procurement.max_page_size,
    }


def get_get_purchase_order_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> GetPurchaseOrderUseCase:
    return GetPurchaseOrderUseCase(uow_factory)


def get_list_purchase_orders_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: Settings = Depends(get_app_settings),
) -> ListPurchaseOrdersUseCase:
    return ListPurchaseOrdersUseCase(uow_factory, **_page_kwargs(settings))


def get_list_supplier_purchase_orders_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: Settings = Depends(get_app_settings),
) -> ListSupplierPurchaseOrdersUseCase:
    return ListSupplierPurchaseOrdersUseCase(uow_factory, **_page_kwargs(settings))


def get_audit_history_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: Settings = Depends(get_app_settings),
) -> GetAuditHistoryUseCase:
    return GetAuditHistoryUseCase(uow_factory, **_page_kwargs(settings))


def get_list_stock_ledger_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: Settings = Depends(get_app_settings),
) -> ListStockLedgerUseCase:
    return ListStockLedgerUseCase(uow_factory, **_page_kwargs(settings))


def get_reconcile_stock_use_case(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> ReconcileStockUseCase:
    return ReconcileStockUseCase(uow_factory)
