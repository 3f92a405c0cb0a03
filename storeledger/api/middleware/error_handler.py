"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action

Domain errors keep their message and details. Server-side failures are
logged with a traceback and returned with a generic message only.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from storeledger.application.dto.responses import ErrorResponse
from storeledger.config import get_logger
from storeledger.core.exceptions import (
    CodeGenerationExhaustedError,
    ConcurrentModificationError,
    ConfigurationError,
    ForbiddenError,
    InvalidQuantityError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    StoreLedgerError,
    ValidationError,
)

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An internal error occurred"

# Map exceptions to HTTP status codes, most specific first
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    InvalidQuantityError: status.HTTP_400_BAD_REQUEST,
    CodeGenerationExhaustedError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ConcurrentModificationError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "PURCHASE_ORDER_NOT_FOUND": "Check the purchase order ID and try GET /api/purchase-orders.",
    "PURCHASE_ORDER_ITEM_NOT_FOUND": "Use item IDs from the purchase order's items list.",
    "PRODUCT_NOT_FOUND": "The product must belong to your store.",
    "SUPPLIER_NOT_FOUND": "The supplier must belong to your store, or your account is not linked to a supplier.",
    "FORBIDDEN": "Your role cannot perform this operation.",
    "INVALID_TRANSITION": "See allowed_transitions on the purchase order for legal next steps.",
    "INVALID_QUANTITY": "Received quantities must be non-negative and within the remaining quantity.",
    "CODE_GENERATION_EXHAUSTED": "A unique purchase order code could not be generated. Retry the request.",
    "CONCURRENT_MODIFICATION": "The record changed while you were updating it. Reload and retry.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "UNAUTHORIZED": "Send X-User-Id and X-User-Role headers (and X-Store-Id for store owners).",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authenticate and retry.",
    403: "You are not allowed to perform this operation.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The resource is not in a state that allows this operation.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _format_details(details: dict) -> str | None:
    if not details:
        return None
    return "; ".join(f"{key}: {value}" for key, value in details.items() if value is not None)


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert any exception to the standardized JSON error response."""
    status_code = _status_for(exc)
    request_id = getattr(request.state, "request_id", None)

    if isinstance(exc, StoreLedgerError):
        error_code = exc.code
    else:
        error_code = "INTERNAL_ERROR"

    if status_code >= 500:
        logger.error(
            "unhandled_exception",
            request_id=request_id,
            path=request.url.path,
            error_type=exc.__class__.__name__,
            error=str(exc),
            traceback="".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
        )
    else:
        logger.warning(
            "request_rejected",
            request_id=request_id,
            path=request.url.path,
            error_code=error_code,
            error=str(exc),
        )

    if status_code >= 500 and not isinstance(exc, CodeGenerationExhaustedError):
        message = GENERIC_ERROR_MESSAGE
        detail = None
    else:
        message = exc.message if isinstance(exc, StoreLedgerError) else str(exc)
        detail = _format_details(exc.details) if isinstance(exc, StoreLedgerError) else None

    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Last line of defence for exceptions no exception handler claimed.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(StoreLedgerError)
    async def domain_exception_handler(
        request: Request,
        exc: StoreLedgerError,
    ) -> JSONResponse:
        """Handle domain errors raised by use cases."""
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
            headers=getattr(exc, "headers", None),
        )


def _infer_error_code(status_code: int) -> str:
    """Machine-readable error code for a bare HTTPException."""
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")
