"""Common utilities for URL shortener."""

from .validators import (
    is_valid_url,
    is_internal_host,
    is_valid_short_code,
    is_valid_validity,
)
from .headers import (
    extract_forwarded_headers,
    build_base_url,
    build_short_link,
    get_client_ip,
    get_user_agent,
    extract_referrer,
)
from .logging_config import setup_logging
from .remote_log import RemoteLogger

__all__ = [
    "is_valid_url",
    "is_internal_host",
    "is_valid_short_code",
    "is_valid_validity",
    "extract_forwarded_headers",
    "build_base_url",
    "get_client_ip",
    "get_user_agent",
    "extract_referrer",
    "build_short_link",
    "setup_logging",
    "RemoteLogger",
]
