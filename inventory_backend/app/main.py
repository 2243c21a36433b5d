"""
FastAPI Application Entry Point.

This is the main application file for the Shop Ledger Backend.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from inventory_backend.app.core.config import settings
from inventory_backend.app.api.v1.router import router as api_v1_router
from inventory_backend.app.core.observability import ObservabilityMiddleware, configure_logging
from inventory_backend.app.db.session import Database
from inventory_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
import inventory_backend.app.db.base  # noqa: F401


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        database: Store handle to use. When omitted the application opens
            its own from settings, bootstraps it on startup and disposes it
            on shutdown. A handle passed in is owned by the caller.
    """
    configure_logging(settings.log_level)
    owns_database = database is None
    database = database or Database(settings.database_url, echo=settings.db_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for application startup/shutdown.

        1. Rebuilds (when configured) and seeds the schema on startup.
        2. Disposes the engine on shutdown.
        """
        if owns_database:
            await database.startup(
                reset=settings.reset_db_on_startup,
                admin_username=settings.default_admin_username,
                admin_password=settings.default_admin_password,
            )
        yield
        if owns_database:
            await database.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        debug=settings.debug,
        description="Inventory, sales and customer/supplier ledger backend for a retail shop",
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_middleware(ObservabilityMiddleware)

    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "version": settings.api_version,
        }

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": "Welcome to Shop Ledger Backend API",
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(api_v1_router, prefix=f"/{settings.api_version}")

    uploads = Path(settings.uploads_dir)
    uploads.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(uploads)), name="uploads")

    return app


app = create_app()
