"""Header parsing utilities for URL shortener."""

from typing import Dict, Optional
from urllib.parse import urlparse

DEFAULT_CLIENT_IP = "127.0.0.1"


def _lower_keys(headers: Dict[str, str]) -> Dict[str, str]:
    return {k.lower(): v for k, v in headers.items()}


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers dictionary

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    headers_lower = _lower_keys(headers)

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def build_base_url(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build base URL from headers or fallback.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Fallback base URL from config

    Args:
        headers: Request headers
        fallback_base_url: Fallback base URL from configuration
        request_scheme: Request scheme (http/https)
        request_host: Request host

    Returns:
        Base URL (e.g., https://example.com)
    """
    forwarded = extract_forwarded_headers(headers)

    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        proto = forwarded["forwarded_proto"]
        host = forwarded["forwarded_host"]
        return f"{proto}://{host}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def build_short_link(
    shortcode: str,
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
    path_prefix: str = "",
) -> str:
    """Public redirect URL for ``shortcode`` as seen by the requesting client.

    The base comes from ``build_base_url``; ``path_prefix`` is inserted
    between base and code when the service is mounted below the root.
    """
    base = build_base_url(headers, fallback_base_url, request_scheme, request_host).rstrip("/")
    segments = [base, path_prefix.strip("/"), shortcode]
    return "/".join(segment for segment in segments if segment)


def get_client_ip(headers: Dict[str, str], peer_host: Optional[str] = None) -> str:
    """Client address: first X-Forwarded-For hop, then socket peer, then loopback."""
    forwarded_for = extract_forwarded_headers(headers)["forwarded_for"]
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return peer_host or DEFAULT_CLIENT_IP


def get_user_agent(headers: Dict[str, str]) -> str:
    """User-Agent header, or 'Unknown'."""
    return _lower_keys(headers).get("user-agent") or "Unknown"


def extract_referrer(headers: Dict[str, str]) -> str:
    """Hostname of the referring page.

    Returns:
        The hostname, 'direct' when no Referer/Referrer header is sent,
        or 'unknown' when the header is not an absolute URL
    """
    headers_lower = _lower_keys(headers)
    referrer = headers_lower.get("referer") or headers_lower.get("referrer")

    if not referrer:
        return "direct"

    try:
        parsed = urlparse(referrer)
        hostname = parsed.hostname
    except ValueError:
        return "unknown"

    if not parsed.scheme or not hostname:
        return "unknown"

    return hostname
