"""Health check endpoints for system monitoring."""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..db import check_connection
from ..dependencies import get_vector_index
from ..services.embeddings import MongoVectorIndex
from ..utils.cache import cache

router = APIRouter(prefix="/health", tags=["System"])

logger = logging.getLogger(__name__)


class ServiceCheck(BaseModel):
    """Model for individual service health check."""

    name: str
    status: Literal["healthy", "unhealthy"]
    duration_ms: Optional[float] = None
    error: Optional[str] = None
    details: Dict[str, Any] = {}


class HealthCheckResponse(BaseModel):
    """Response model for health check endpoint."""

    status: Literal["healthy", "unhealthy"]
    timestamp: float
    duration_ms: float
    checks: List[ServiceCheck]


async def _run_check(name: str, ping: Callable[[], Awaitable[Dict[str, Any]]]) -> ServiceCheck:
    """Time a ping; it returns check details or raises when unhealthy."""
    start = time.time()
    try:
        details = await ping()
    except Exception as e:
        logger.error(f"{name.capitalize()} health check error: {e}")
        return ServiceCheck(name=name, status="unhealthy", error=str(e))

    return ServiceCheck(
        name=name,
        status="healthy",
        duration_ms=round((time.time() - start) * 1000, 2),
        details=details,
    )


async def _ping_database() -> Dict[str, Any]:
    if not await check_connection():
        raise RuntimeError("Database ping failed")
    return {}


async def _ping_cache() -> Dict[str, Any]:
    if not await cache.ping():
        raise RuntimeError("Cache ping failed")
    return {}


@router.get("/", summary="System health check", response_model=HealthCheckResponse)
async def health_check(vector_index: MongoVectorIndex = Depends(get_vector_index)):
    """Check the database, the cache and the case vector index.

    Returns:
        Per-service check results, with status 503 if any service is unhealthy
    """
    start_time = time.time()

    checks = [
        await _run_check("database", _ping_database),
        await _run_check("cache", _ping_cache),
        await _run_check("vector_index", vector_index.stats),
    ]

    all_healthy = all(check.status == "healthy" for check in checks)
    response = HealthCheckResponse(
        status="healthy" if all_healthy else "unhealthy",
        timestamp=time.time(),
        duration_ms=round((time.time() - start_time) * 1000, 2),
        checks=checks,
    )

    if not all_healthy:
        return JSONResponse(status_code=503, content=response.model_dump())
    return response
