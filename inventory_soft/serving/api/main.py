"""
FastAPI Application Factory

Creates and configures the Inventory Soft API.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from inventory_soft.config import Settings, get_settings
from inventory_soft.config.logging import configure_logging
from inventory_soft.database.connection import close_database, get_session_factory, init_database
from inventory_soft.serving.api.errors import register_exception_handlers
from inventory_soft.serving.api.middleware import RequestLoggingMiddleware
from inventory_soft.serving.api.routes import (
    auth_router,
    categories_router,
    dashboard_router,
    events_router,
    health_router,
    products_router,
    reports_router,
    sales_router,
)
from inventory_soft.services.auth import AuthService
from inventory_soft.state import SessionRegistry
from inventory_soft.store import RecordStore

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database and the per-session registry; tear both down on exit"""
    settings: Settings = app.state.settings
    configure_logging(settings.monitoring)

    logger.info("Starting Inventory Soft API", environment=settings.app_env)

    await init_database(settings.database)
    session_factory = get_session_factory()
    app.state.store = RecordStore(session_factory)
    app.state.auth = AuthService(session_factory, settings.security)
    app.state.registry = SessionRegistry(app.state.store)

    yield

    logger.info("Shutting down...", open_sessions=len(app.state.registry))
    app.state.registry.close_all()
    await close_database()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to run with (defaults to the cached environment settings)

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Inventory Soft API",
        description="Inventory, sales and calendar management for small businesses",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
    app.include_router(products_router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(categories_router, prefix="/api/v1/categories", tags=["Categories"])
    app.include_router(sales_router, prefix="/api/v1/sales", tags=["Sales"])
    app.include_router(events_router, prefix="/api/v1/events", tags=["Events"])
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])
    app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Inventory Soft API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app
