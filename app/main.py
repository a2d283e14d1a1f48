"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.api import status
from app.config import setup_logging
from app.core.exceptions import CallError, GatewayError
from app.core.handlers import (
    call_error_handler,
    gateway_error_handler,
    general_exception_handler,
    http_exception_handler,
)
from app.core.health import ProbeExecutor, StatusAggregator, StatusCache
from app.core.middleware import LoggingMiddleware, RequestIDMiddleware
from app.core.settings import Settings, settings
from app.services.node_directory import NodeDirectory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown."""
    logger.info(
        "Starting Gateway Health API",
        extra={
            "version": __version__,
            "settings": {
                "media_servers": settings.media_servers,
                "status_cache_validity": settings.status_cache_validity,
                "probe_timeout": settings.probe_timeout,
            },
        },
    )

    yield

    logger.info("Shutting down Gateway Health API")
    try:
        await app.state.probe_executor.close()
        logger.info("Probe client connections closed")
    except Exception as e:
        logger.warning(f"Error closing probe client: {e}")


def build_status_cache(
    config: Settings, directory: NodeDirectory, prober: ProbeExecutor
) -> StatusCache:
    """Wire the aggregator and cache for one application instance."""
    aggregator = StatusAggregator(
        directory,
        prober,
        media_servers=config.media_servers,
        node_group=config.node_group,
        media_group=config.media_group,
    )
    return StatusCache(aggregator, validity=config.status_cache_validity)


def create_app(node_directory: Optional[NodeDirectory] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    # Setup logging first
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Aggregated health of the gateway's backend nodes "
        "and downstream media servers.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=[
            {
                "name": "status",
                "description": "Service status and request introspection endpoints",
            },
        ],
    )

    # One cache per application instance, shared by every request
    directory = node_directory or NodeDirectory.from_settings(settings)
    prober = ProbeExecutor(
        timeout=settings.probe_timeout,
        sentinel_status=settings.probe_sentinel_status,
    )
    app.state.node_directory = directory
    app.state.probe_executor = prober
    app.state.status_cache = build_status_cache(settings, directory, prober)

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(LoggingMiddleware)

    # Register exception handlers
    app.add_exception_handler(CallError, call_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        GatewayError, gateway_error_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        StarletteHTTPException, http_exception_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(status.router)

    return app


# Create app instance
app = create_app()
