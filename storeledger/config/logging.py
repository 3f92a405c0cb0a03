"""
Structured logging for StoreLedger.

structlog runs on top of the stdlib root logger: coloured console output
in development, one JSON object per line elsewhere.

Request-scoped fields live in structlog's contextvars. LoggingMiddleware
binds them once per request, so every event logged while the request is
handled carries the request id, including events from use cases and the
SQLite stores that never see the request object.
"""

import logging
import sys
import uuid

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from storeledger.config.settings import Settings, get_settings

REQUEST_CONTEXT_KEYS = ("request_id", "method", "path", "user_id", "store_id")

# Access lines come from LoggingMiddleware
QUIET_LOGGERS = ("uvicorn.access", "aiosqlite")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def bind_request_context(
    request_id: str,
    method: str,
    path: str,
    user_id: str | None = None,
    store_id: str | None = None,
) -> None:
    """Bind the current request's identity for all loggers in this context."""
    clear_request_context()
    fields = {
        "request_id": request_id,
        "method": method,
        "path": path,
        "user_id": user_id,
        "store_id": store_id,
    }
    structlog.contextvars.bind_contextvars(
        **{key: value for key, value in fields.items() if value is not None}
    )


def clear_request_context() -> None:
    """Drop request fields, leaving anything else bound in the context."""
    structlog.contextvars.unbind_contextvars(*REQUEST_CONTEXT_KEYS)


def app_context_processor(settings: Settings) -> Processor:
    """Processor stamping the service identity on each event."""
    context = {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_app_context


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger."""
    settings = settings or get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        app_context_processor(settings),
    ]

    if settings.environment == "development":
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    else:
        # Category and product names are often non-ASCII
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
