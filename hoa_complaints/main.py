"""
HOA Complaints - FastAPI Application
Residents and the maintenance complaints they file.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hoa_complaints.core.config import get_settings
from hoa_complaints.core.errors import setup_exception_handlers
from hoa_complaints.core.logging_config import setup_logging
from hoa_complaints.core.logging_middleware import RequestLoggingMiddleware
from hoa_complaints.routers import complaints, health, residents
from hoa_complaints.services.residents import seed_default_residents
from hoa_complaints.services.store import create_store


# =============================================================================
# Lifespan (Startup/Shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the store selected by settings, make sure its schema exists,
    seed residents, and close it again on shutdown.
    """
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        json_format=settings.log_json_format,
        log_file=Path(settings.log_file) if settings.log_file else None,
    )
    logger = logging.getLogger(__name__)

    logger.info("Starting %s v%s (storage: %s)", settings.app_name, settings.app_version, settings.storage_backend)
    store = create_store(settings.storage_backend, settings.database_url, echo=settings.debug)
    await store.initialize()
    if settings.seed_residents:
        await seed_default_residents(store)
    app.state.store = store

    try:
        yield
    finally:
        await store.close()
        logger.info("Store closed")


# =============================================================================
# Application
# =============================================================================

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url="/redoc" if settings.enable_docs else None,
        openapi_url="/openapi.json" if settings.enable_docs else None,
    )

    # Middleware (first added = last to run)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(complaints.router)
    app.include_router(residents.router)

    # Attachment files, e.g. wwwroot/uploads/complaints/42/pipe_leak.jpg -> /uploads/complaints/42/pipe_leak.jpg
    static_path = Path(settings.static_dir)
    if static_path.is_dir():
        app.mount("/", StaticFiles(directory=static_path), name="static")

    return app


app = create_app()
