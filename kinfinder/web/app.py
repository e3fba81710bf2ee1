"""FastAPI application factory."""

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kinfinder.catalog import SourceNotFoundError
from kinfinder.config import Settings, load_config
from kinfinder.orchestrator import SearchOrchestrator, build_default_orchestrator
from kinfinder.store import JsonFileStore
from kinfinder.validation import ValidationError

logger = logging.getLogger(__name__)


def create_app(
    orchestrator: Optional[SearchOrchestrator] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        orchestrator: Orchestrator to serve (built over the on-disk catalog if not provided)
        settings: Settings used when building the default orchestrator
    """
    if orchestrator is None:
        settings = settings or load_config(os.environ.get("KINFINDER_CONFIG"))
        orchestrator = build_default_orchestrator(
            settings,
            store=JsonFileStore(settings.sources_store_path),
        )

    app = FastAPI(
        title="kinfinder",
        description="Kinship candidate discovery API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.orchestrator = orchestrator

    # CORS middleware for production
    origins = os.environ.get("ALLOWED_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",")]
    else:
        origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(SourceNotFoundError)
    async def source_not_found_handler(request: Request, exc: SourceNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    # API v1 routes
    from kinfinder.web.api.v1.router import router as api_router
    app.include_router(api_router)

    return app


# Create default app instance
app = create_app()
