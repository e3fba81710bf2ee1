"""API v1 router."""

from fastapi import APIRouter

from kinfinder.web.api.v1 import health, search, sources

router = APIRouter(prefix="/api/v1")

router.include_router(search.router, tags=["search"])
router.include_router(sources.router, tags=["sources"])
router.include_router(health.router, tags=["health"])
