"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortener.common.headers import get_client_ip
from shortener.common.logging_config import get_logger


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, logger: logging.Logger = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or get_logger("web")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.perf_counter()

        peer = request.client.host if request.client else None
        client_ip = get_client_ip(dict(request.headers), peer)
        user_agent = request.headers.get("user-agent", "Unknown")
        self.logger.info(
            f"Request: {request.method} {request.url.path} from {client_ip} ({user_agent})"
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        self.logger.info(
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )

        return response
