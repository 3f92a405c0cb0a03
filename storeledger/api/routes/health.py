"""
Health check endpoints.
"""

import time

import aiosqlite
from fastapi import APIRouter

from storeledger import __version__
from storeledger.application.dto.responses import ComponentHealthResponse, HealthResponse
from storeledger.config import get_logger
from storeledger.infrastructure.storage.sqlite import get_pool

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check: service status and uptime."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and response time.
    """
    try:
        pool = await get_pool()
        start = time.time()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        db_status = ComponentHealthResponse(
            status="available",
            latency_ms=(time.time() - start) * 1000,
        )
    except (aiosqlite.Error, OSError) as e:
        logger.warning("db_health_check_failed", error=str(e))
        db_status = ComponentHealthResponse(status="unavailable", error=e.__class__.__name__)

    return HealthResponse(
        status="healthy" if db_status.status == "available" else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
