#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: requests are served concurrently by one asyncio event loop
(FastAPI + uvicorn). The registry is in-memory and owned by the process, so
WORKERS > 1 gives each worker its own independent set of short URLs.

Usage:
    python app.py

Environment variables:
    BASE_URL - Fallback base URL for short links
    PORT - Port to listen on
    ENVIRONMENT - 'development' or 'production'
    DEFAULT_VALIDITY_MINUTES - Validity used when a request omits it
    CLEANUP_INTERVAL_SECONDS - Seconds between expired-URL sweeps
    REMOTE_LOG_URL - Collector URL for remote log events (optional)
    GEOIP_DATABASE_PATH - MaxMind City database for click geolocation (optional)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortener.cleanup import ExpiryCleanupTask
from shortener.common.geolocation import GeoLocator
from shortener.common.remote_log import RemoteLogger
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.store.memory import UrlRegistry
from shortener.common.logging_config import setup_logging
from web_app import create_app


def build_service(config: Config, logger: logging.Logger) -> URLShortenerService:
    """Wire the registry and its collaborators from configuration."""
    event_log = RemoteLogger(
        endpoint_url=config.remote_log_url,
        timeout_seconds=config.remote_log_timeout_seconds,
        queue_size=config.remote_log_queue_size,
        logger=logger,
    )

    registry = UrlRegistry(logger=logger, event_log=event_log)

    return URLShortenerService(
        registry=registry,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        geolocator=GeoLocator(database_path=config.geoip_database_path, logger=logger),
        event_log=event_log,
        logger=logger,
        default_validity_minutes=config.default_validity_minutes,
        max_generation_attempts=config.max_generation_attempts,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    service = build_service(config, logger)
    cleanup = ExpiryCleanupTask(
        service,
        interval_seconds=config.cleanup_interval_seconds,
        logger=logger,
    )

    app.state.service = service
    app.state.cleanup = cleanup

    cleanup.start()
    if service.event_log:
        service.event_log.log("backend", "info", "middleware", "URL Shortener Microservice started")

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")

    await cleanup.stop()
    await service.close()
    app.state.service = None

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump()}")

    app = create_app(service_instance=None, config=config, logger=logger)
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
