"""
FastAPI application entry point.
Challenge: Mount routes, middleware (request id, CORS, Prometheus), error mapping, startup schema check.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app
from sqlalchemy.exc import SQLAlchemyError

from todo_api import __version__
from todo_api.api.router import api_router
from todo_api.config import get_settings
from todo_api.core.exceptions import register_exception_handlers
from todo_api.core.logging import configure_logging
from todo_api.db.session import create_tables, engine
from todo_api.middleware.request_id import RequestIdMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: make sure the schema exists (dev). Shutdown: release pooled connections."""
    settings = get_settings()
    logger.info("Starting %s %s (environment=%s)", settings.app_name, __version__, settings.environment)
    if settings.create_tables_on_startup:
        try:
            await create_tables()
        except SQLAlchemyError:
            # Store unreachable at startup is the one fatal fault
            logger.exception("Database unavailable at startup")
            raise
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Multi-user todo tracking: sessions, identity guard and owner-scoped todo queries.",
        version=__version__,
        lifespan=lifespan,
    )

    # Starlette runs middleware in reverse registration order: RequestId wraps everything
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router)
    return app


app = create_app()
