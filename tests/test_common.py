"""Tests for common utilities."""

import json
import logging

import pytest
from shortener.common.validators import (
    is_valid_url,
    is_internal_host,
    is_valid_short_code,
    is_valid_validity,
)
from shortener.common.headers import (
    extract_forwarded_headers,
    build_base_url,
    build_short_link,
    get_client_ip,
    get_user_agent,
    extract_referrer,
)
from shortener.common.logging_config import JsonFormatter, get_logger


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        assert is_valid_url("https://example.com")
        assert is_valid_url("http://example.com/path")
        assert is_valid_url("https://sub.example.com:8080/path?query=value")
        assert is_valid_url("http://localhost:3000/admin")

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        assert not is_valid_url("")
        assert not is_valid_url(None)
        assert not is_valid_url("not-a-url")
        assert not is_valid_url("ftp://example.com")
        assert not is_valid_url("https://")
        assert not is_valid_url("https:///path-only")
        assert not is_valid_url("https://exa mple.com")
        assert not is_valid_url("https://example.com/" + "a" * 2048)

    def test_internal_hosts_flagged(self):
        """Internal hosts are valid but flagged."""
        for url in (
            "http://localhost/x",
            "http://127.0.0.1:8080",
            "http://192.168.1.10/",
            "https://10.0.0.5/admin",
        ):
            assert is_valid_url(url)
            assert is_internal_host(url)

        assert not is_internal_host("https://example.com")
        assert not is_internal_host("https://10example.com")

    def test_valid_short_codes(self):
        """Test valid short code validation."""
        assert is_valid_short_code("abc")
        assert is_valid_short_code("abc123")
        assert is_valid_short_code("ABCdef")
        assert is_valid_short_code("a" * 20)

    def test_invalid_short_codes(self):
        """Test invalid short code validation."""
        assert not is_valid_short_code("ab")
        assert not is_valid_short_code("a" * 21)
        assert not is_valid_short_code("abc@123")
        assert not is_valid_short_code("test-code")
        assert not is_valid_short_code("test_code")
        assert not is_valid_short_code("abc\n")
        assert not is_valid_short_code("")
        assert not is_valid_short_code(None)

    @pytest.mark.parametrize("minutes", [1, 30, 525600])
    def test_valid_validity(self, minutes):
        assert is_valid_validity(minutes)

    @pytest.mark.parametrize("minutes", [0, -5, 525601, 1.5, "30", True, None])
    def test_invalid_validity(self, minutes):
        assert not is_valid_validity(minutes)


class TestHeaders:
    """Test header utilities."""

    def test_extract_forwarded_headers(self):
        """Test forwarded header extraction."""
        headers = {
            "X-Forwarded-Proto": "https",
            "X-Forwarded-Host": "example.com",
            "X-Forwarded-For": "1.2.3.4",
        }

        result = extract_forwarded_headers(headers)
        assert result["forwarded_proto"] == "https"
        assert result["forwarded_host"] == "example.com"
        assert result["forwarded_for"] == "1.2.3.4"

    def test_build_base_url_from_headers(self):
        """Test base URL building from headers."""
        headers = {
            "X-Forwarded-Proto": "https",
            "X-Forwarded-Host": "example.com",
        }

        base_url = build_base_url(
            headers=headers,
            fallback_base_url="http://localhost:3000"
        )

        assert base_url == "https://example.com"

    def test_build_base_url_fallback(self):
        """Test base URL fallback."""
        base_url = build_base_url(
            headers={},
            fallback_base_url="http://localhost:3000/"
        )

        assert base_url == "http://localhost:3000"

    def test_client_ip(self):
        """First forwarded hop wins, then the peer, then loopback."""
        assert get_client_ip({"X-Forwarded-For": "8.8.8.8, 10.0.0.1"}, "10.0.0.2") == "8.8.8.8"
        assert get_client_ip({}, "10.0.0.2") == "10.0.0.2"
        assert get_client_ip({}) == "127.0.0.1"

    def test_user_agent(self):
        assert get_user_agent({"User-Agent": "curl/8.0"}) == "curl/8.0"
        assert get_user_agent({}) == "Unknown"

    def test_referrer(self):
        """Referrer is reduced to its hostname."""
        assert extract_referrer({"Referer": "https://news.site.com/a?b=c"}) == "news.site.com"
        assert extract_referrer({"Referrer": "http://blog.example.org"}) == "blog.example.org"
        assert extract_referrer({}) == "direct"
        assert extract_referrer({"Referer": "not a url"}) == "unknown"
        assert extract_referrer({"Referer": "http://[::1"}) == "unknown"


class TestShortLink:
    """Test short link building."""

    def test_short_link_from_request_host(self):
        link = build_short_link(
            "abc123",
            headers={"host": "sho.rt"},
            fallback_base_url="http://localhost:3000",
            request_scheme="https",
            request_host="sho.rt",
        )

        assert link == "https://sho.rt/abc123"

    def test_short_link_prefers_forwarded_headers(self):
        link = build_short_link(
            "abc123",
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "links.example.com"},
            fallback_base_url="http://localhost:3000",
            request_scheme="http",
            request_host="10.0.0.5:3000",
        )

        assert link == "https://links.example.com/abc123"

    def test_short_link_with_prefix_and_fallback(self):
        """Configured base URL and mount prefix are joined without doubled slashes."""
        link = build_short_link(
            "abc123",
            headers={},
            fallback_base_url="https://example.com/",
            path_prefix="/s/",
        )

        assert link == "https://example.com/s/abc123"


class TestLogging:
    """Test logging helpers."""

    def test_json_formatter_escapes_message(self):
        record = logging.LogRecord(
            "shortener", logging.INFO, __file__, 1, 'said "hi"', None, None
        )
        entry = json.loads(JsonFormatter().format(record))
        assert entry["message"] == 'said "hi"'
        assert entry["level"] == "INFO"

    def test_get_logger_namespaced(self):
        assert get_logger("web").name == "shortener.web"
        assert get_logger().name == "shortener"
