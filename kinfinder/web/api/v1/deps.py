"""Request dependencies shared by API v1 routes."""

from fastapi import Request

from kinfinder.catalog import SourceCatalog
from kinfinder.orchestrator import SearchOrchestrator


def get_orchestrator(request: Request) -> SearchOrchestrator:
    return request.app.state.orchestrator


def get_catalog(request: Request) -> SourceCatalog:
    return request.app.state.orchestrator.catalog
