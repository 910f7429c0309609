"""CrudServe API — FastAPI application factory and default entry point.

Invariants:
    - Store and operation routes come only from Registry.bind()
    - Global error handlers map CrudServeError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - create_app(registry) factory: owners and tests build apps around their own
      registry; `app` below serves the default catalog
      (`pip install .[server]`, then `uvicorn crudserve.main:app`)
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crudserve.api.error_handlers import register_error_handlers
from crudserve.api.routes import health
from crudserve.catalog import build_registry
from crudserve.config import Settings, get_settings
from crudserve.infrastructure.database import init_db
from crudserve.infrastructure.observability import setup_logging
from crudserve.services.registry import Registry

logger = logging.getLogger(__name__)


def create_app(registry: Registry, settings: Settings | None = None) -> FastAPI:
    """Build the API around registry. Binding freezes the registry."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_auto_create:
            await manager.create_all()
        logger.info(
            f"CrudServe API started: {len(registry.stores)} stores, "
            f"{len(registry.operations)} operations",
        )
        yield
        await manager.dispose()
        logger.info("CrudServe API shutting down")

    app = FastAPI(title="CrudServe API", version="1.0.0", lifespan=lifespan)

    # CORS — configured from settings, not hardcoded
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Item-ID", "Item-User-ID", "Item-Timestamp", "Item-Revision"],
    )

    register_error_handlers(app)

    # Routes — explicit registration (ExMA: no convention-over-config)
    app.include_router(health.router)
    router = APIRouter()
    registry.bind(router)
    app.include_router(router)
    app.state.registry = registry
    return app


app = create_app(build_registry())
