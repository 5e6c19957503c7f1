"""Health check endpoints for debugging and monitoring."""

from fastapi import APIRouter, Depends

from src.api.core.dependencies import AsyncSessionDep
from src.modules.health.service import HealthService, OverallHealthStatus
from src.redis.client import get_redis_client
from src.utils.settings.app import AppSettings
import redis.asyncio as redis

# Create separate routers for root and health endpoints
root_router = APIRouter()
router = APIRouter(prefix="/health", tags=["health"])


@root_router.get("/")
async def root():
    """Minimal service banner."""
    return {
        "service": "keyhub-api",
        "version": AppSettings().API_VERSION,
        "docs": "/docs",
    }


@router.get("/")
async def health_check(
    db: AsyncSessionDep,
    redis: redis.Redis = Depends(get_redis_client),
) -> OverallHealthStatus:
    """Health check for the database and Redis."""
    health_service = HealthService(db, redis)
    return await health_service.run_all_checks()


@router.get("/liveness")
async def liveness_check():
    """Simple liveness check - indicates if service is running."""
    return {"status": "alive", "service": "keyhub-api"}
