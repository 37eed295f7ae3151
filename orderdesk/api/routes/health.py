"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from orderdesk import __version__
from orderdesk.application.dto.responses import ComponentHealthResponse, HealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Service status and uptime."""
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
    from orderdesk.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        start = time.time()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        db_status = ComponentHealthResponse(
            status="available",
            latency_ms=(time.time() - start) * 1000,
        )
    except Exception as e:
        db_status = ComponentHealthResponse(status="unavailable", error=str(e))

    return HealthResponse(
        status="healthy" if db_status.status == "available" else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
