"""Error types raised at the service boundary."""

from typing import List, Optional


class URLShortenerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(URLShortenerError, ValueError):
    """Bad url, shortcode or validity in user input."""

    status_code = 400


class ConflictError(URLShortenerError, ValueError):
    """Shortcode already in use."""

    status_code = 409


class NotFoundError(URLShortenerError):
    """Shortcode absent or expired. The two causes are not distinguished."""

    status_code = 404


class ExhaustionError(URLShortenerError):
    """Auto-generation collided on every attempt."""

    status_code = 500


class InternalError(URLShortenerError):
    """Unexpected fault at the boundary."""

    status_code = 500
