"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import shortener
from shortener.common.logging_config import get_logger
from .api import api_router, stats_router
from .web import web_router
from .exception_handlers import register_exception_handlers
from .middleware.headers import SecurityHeadersMiddleware
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance,
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance (may be None and set in lifespan)
        config: Configuration instance
        logger: Optional logger

    Returns:
        Configured FastAPI app
    """
    logger = logger or get_logger()

    app = FastAPI(
        title="URL Shortener",
        description="URL shortening microservice with click analytics",
        version=shortener.__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger

    # Reflect any origin with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(LoggingMiddleware, logger=get_logger("web"))

    register_exception_handlers(app, logger, expose_errors=config.is_development)

    # API routes are served both at the root and under /api; the catch-all
    # redirect route must be registered last.
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(stats_router, prefix="/api", tags=["API"])
    app.include_router(api_router, tags=["API"], include_in_schema=False)
    app.include_router(web_router, tags=["Web"])

    return app
