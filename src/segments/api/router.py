"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from segments.api.routes import activity_config, health, segments

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(segments.router)
api_router.include_router(activity_config.router)
