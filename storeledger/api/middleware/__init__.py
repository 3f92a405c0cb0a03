"""API middleware."""

from storeledger.api.middleware.error_handler import ErrorHandlerMiddleware
from storeledger.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
