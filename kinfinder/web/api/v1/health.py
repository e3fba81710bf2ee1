"""Health endpoint."""

import time

from fastapi import APIRouter, Depends

from kinfinder.catalog import SourceCatalog
from kinfinder.web.api.v1.deps import get_catalog
from kinfinder.web.api.v1.models import HealthResponse

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(catalog: SourceCatalog = Depends(get_catalog)):
    """Service status and number of enabled sources."""
    from kinfinder import __version__

    return HealthResponse(
        status="healthy",
        version=__version__,
        sources_enabled=len(catalog.active()),
        uptime_seconds=int(time.time() - _start_time),
    )
