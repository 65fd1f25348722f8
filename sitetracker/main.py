"""Main FastAPI application."""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitetracker import __version__
from sitetracker.api.router import api_router
from sitetracker.core.config import get_settings
from sitetracker.core.database import create_engine, create_session_factory
from sitetracker.core.deps import get_store
from sitetracker.core.exceptions import add_exception_handlers
from sitetracker.core.logging import configure_logging
from sitetracker.core.middleware import add_middleware
from sitetracker.core.store import DocumentStore
from sitetracker.dal.production import PRODUCTION_KEY_SCHEMA
from sitetracker.dal.production_site import SITE_KEY_SCHEMA

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the document store on startup and release it on shutdown."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    logger.info("Starting up application", environment=settings.ENVIRONMENT)

    engine = create_engine(settings)
    store = DocumentStore(create_session_factory(engine))
    store.register(settings.PRODUCTION_SITES_TABLE, SITE_KEY_SCHEMA)
    store.register(settings.PRODUCTION_TABLE, PRODUCTION_KEY_SCHEMA)
    await store.create_tables()
    app.state.store = store

    yield

    logger.info("Shutting down application")
    await engine.dispose()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    started_at = time.monotonic()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Production site and monthly generation tracking API",
        version=__version__,
        openapi_url=f"{settings.API_PREFIX}/openapi.json" if settings.DEBUG else None,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=None if settings.TESTING else lifespan,
        redirect_slashes=False,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    add_middleware(app)
    add_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": settings.PROJECT_NAME, "version": __version__, "status": "running"}

    @app.get("/health")
    async def health_check(store: DocumentStore = Depends(get_store)):
        """Liveness check including a store round-trip."""
        try:
            await store.ping()
            store_status = "connected"
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            store_status = "error"

        return {
            "status": "ok" if store_status == "connected" else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - started_at, 3),
            "store": store_status,
        }

    return app


app = create_application()
