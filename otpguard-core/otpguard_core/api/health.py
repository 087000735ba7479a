"""
Health Check Router
===================
Liveness and readiness endpoints reporting ephemeral store connectivity.
"""

import time
from enum import Enum
from typing import Dict, Optional

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..store import EphemeralStore, StoreUnavailableError

logger = structlog.get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: HealthStatus
    service: str
    version: str
    components: Dict[str, ComponentHealth]
    timestamp: float


async def check_store(store: EphemeralStore) -> ComponentHealth:
    """Check store connectivity and latency."""
    try:
        start = time.time()
        await store.ping()
        latency = (time.time() - start) * 1000
        return ComponentHealth(status="connected", latency_ms=round(latency, 2))
    except StoreUnavailableError as e:
        logger.error("Store health check failed", error=str(e))
        return ComponentHealth(status="error", error=e.message)


def create_health_router(
    service_name: str,
    store: EphemeralStore,
    version: str = "1.0.0",
) -> APIRouter:
    """
    Create /health, /health/live and /health/ready endpoints.

    The store is the only critical dependency: without it no guard can be
    evaluated, so it decides both overall health and readiness.
    """
    router = APIRouter(tags=["Health"])

    @router.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        store_health = await check_store(store)
        status = (
            HealthStatus.UNHEALTHY if store_health.status == "error"
            else HealthStatus.HEALTHY
        )
        return HealthResponse(
            status=status,
            service=service_name,
            version=version,
            components={store.name: store_health},
            timestamp=time.time(),
        )

    @router.get("/health/live")
    async def liveness_probe():
        return {"status": "alive"}

    @router.get("/health/ready")
    async def readiness_probe():
        store_health = await check_store(store)
        if store_health.status == "error":
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "reason": "store_unavailable"},
            )
        return {"status": "ready"}

    return router
