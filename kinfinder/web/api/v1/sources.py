"""Source catalog endpoints."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from kinfinder.catalog import SourceCatalog
from kinfinder.web.api.v1.deps import get_catalog
from kinfinder.web.api.v1.models import SourceResponse

router = APIRouter()


@router.get("/sources", response_model=List[SourceResponse])
async def list_sources(catalog: SourceCatalog = Depends(get_catalog)):
    """List configured sources in catalog order."""
    return [source.to_dict() for source in catalog.list()]


@router.get("/sources/{source_id}", response_model=SourceResponse)
async def get_source(source_id: str, catalog: SourceCatalog = Depends(get_catalog)):
    """Get one source. Unknown ids return 404."""
    return catalog.require(source_id).to_dict()


@router.patch("/sources/{source_id}", response_model=SourceResponse)
async def update_source(
    source_id: str,
    patch: Dict[str, Any] = Body(...),
    catalog: SourceCatalog = Depends(get_catalog),
):
    """
    Update a source.

    Accepts snake_case or camelCase keys. Invalid values return 400 and
    leave the entry unchanged.
    """
    return catalog.update(source_id, patch).to_dict()
