from fastapi import APIRouter

from src.api.health.router import router as health_router, root_router
from src.api.keys.router import router as keys_router
from src.api.summarizer.router import router as summarizer_router
from src.api.validation.router import router as validation_router

# V1 API router
v1_router = APIRouter(prefix="/v1")

# Include domain routers
v1_router.include_router(keys_router)
v1_router.include_router(validation_router)
v1_router.include_router(summarizer_router)

# Main API router
api_router = APIRouter()
api_router.include_router(root_router)
api_router.include_router(health_router)
api_router.include_router(v1_router)
