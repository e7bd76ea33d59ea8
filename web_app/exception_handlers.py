"""Map service errors to JSON error responses."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.errors import InternalError, URLShortenerError


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[str]] = None,
    path: Optional[str] = None,
) -> JSONResponse:
    """Build the common error body."""
    body = {
        "success": False,
        "timestamp": datetime.now(timezone.utc),
        "message": message,
        "errors": errors or [],
    }
    if path is not None:
        body["path"] = path
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def register_exception_handlers(app: FastAPI, logger: logging.Logger, expose_errors: bool) -> None:
    """Install handlers for service errors, bad bodies, unknown routes and crashes.

    Args:
        app: FastAPI application
        logger: Logger for warnings and unhandled errors
        expose_errors: Include the exception text in 500 responses
    """

    @app.exception_handler(URLShortenerError)
    async def handle_service_error(request: Request, exc: URLShortenerError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError):
        details = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        logger.warning(f"Invalid request body for {request.url.path}: {details}")
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body", details)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            logger.warning(f"404 - Route not found: {request.method} {request.url.path}")
            return error_response(exc.status_code, "Route not found", path=request.url.path)
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error: {request.method} {request.url.path}")
        error = InternalError("Internal server error", [str(exc)] if expose_errors else [])
        return error_response(error.status_code, error.message, error.errors)
