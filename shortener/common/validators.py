"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse

MIN_VALIDITY_MINUTES = 1
MAX_VALIDITY_MINUTES = 525600  # one year

MAX_URL_LENGTH = 2048

MIN_SHORT_CODE_LENGTH = 3
MAX_SHORT_CODE_LENGTH = 20
SHORT_CODE_PATTERN = re.compile(
    rf"^[A-Za-z0-9]{{{MIN_SHORT_CODE_LENGTH},{MAX_SHORT_CODE_LENGTH}}}$"
)

INTERNAL_HOSTS = {"localhost", "127.0.0.1"}
INTERNAL_PREFIXES = ("192.168.", "10.")


def is_valid_url(url: str) -> bool:
    """Validate a URL.

    Accepts absolute http/https URLs with a non-empty host. Internal hosts
    are valid here; see ``is_internal_host``.

    Args:
        url: The URL to validate

    Returns:
        True if the URL can be shortened
    """
    if not url or not isinstance(url, str):
        return False

    if len(url) > MAX_URL_LENGTH or any(c.isspace() for c in url):
        return False

    try:
        result = urlparse(url)
        hostname = result.hostname
    except ValueError:
        return False

    if result.scheme not in ("http", "https"):
        return False

    return bool(hostname)


def is_internal_host(url: str) -> bool:
    """Check whether a URL points at localhost or a private network.

    Args:
        url: A URL already accepted by ``is_valid_url``

    Returns:
        True if the host should be flagged for audit
    """
    try:
        hostname = (urlparse(url).hostname or "").lower()
    except ValueError:
        return False

    return hostname in INTERNAL_HOSTS or hostname.startswith(INTERNAL_PREFIXES)


def is_valid_short_code(short_code: str) -> bool:
    """Validate a short code: 3-20 ASCII letters or digits, case-sensitive."""
    if not isinstance(short_code, str):
        return False
    return SHORT_CODE_PATTERN.fullmatch(short_code) is not None


def is_valid_validity(minutes) -> bool:
    """Validate a validity period in minutes."""
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        return False
    return MIN_VALIDITY_MINUTES <= minutes <= MAX_VALIDITY_MINUTES
