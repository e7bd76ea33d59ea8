"""Integration tests for URL shortener."""

import functools
from datetime import datetime, timezone

import httpx
from httpx import ASGITransport, AsyncClient

from app import build_service, lifespan
from config import Config
from shortener.cleanup import ExpiryCleanupTask
from shortener.common.remote_log import RemoteLogger
from shortener.common.logging_config import setup_logging
from web_app import create_app


class TestIntegration:
    """End-to-end integration tests."""

    async def test_full_url_lifecycle(self, app, client, clock):
        """Create, visit, expire, purge, reuse."""
        # 1. Create short URL via API
        create_response = await client.post(
            "/shorturls",
            json={"url": "https://example.com", "validity": 1, "shortcode": "abc123"},
        )
        assert create_response.status_code == 201
        assert create_response.json()["shortLink"].endswith("/abc123")

        # 2. Stats before any click
        info_response = await client.get("/shorturls/abc123")
        assert info_response.status_code == 200
        assert info_response.json()["totalClicks"] == 0

        # 3. Access short URL (redirect)
        redirect_response = await client.get("/abc123", follow_redirects=False)
        assert redirect_response.status_code == 302
        assert redirect_response.headers["location"] == "https://example.com"

        # 4. Click counted
        info_response2 = await client.get("/shorturls/abc123")
        assert info_response2.json()["totalClicks"] == 1

        # 5. 61 seconds later the link is gone for every reader
        clock.advance(seconds=61)
        assert (await client.get("/shorturls/abc123")).status_code == 404
        assert (await client.get("/abc123", follow_redirects=False)).status_code == 404

        # 6. The code stays reserved until the sweep purges it
        retry = await client.post("/shorturls", json={"url": "https://example.org", "shortcode": "abc123"})
        assert retry.status_code == 409

        service = app.state.service
        assert await ExpiryCleanupTask(service).run_once() == 1

        reuse = await client.post("/shorturls", json={"url": "https://example.org", "shortcode": "abc123"})
        assert reuse.status_code == 201

    async def test_invalid_requests(self, client):
        assert (await client.post("/shorturls", json={"url": "not-a-url"})).status_code == 400
        assert (
            await client.post("/shorturls", json={"url": "https://example.com", "shortcode": "ab"})
        ).status_code == 400

        first = await client.post("/shorturls", json={"url": "https://example.com", "shortcode": "twice1"})
        second = await client.post("/shorturls", json={"url": "https://example.com", "shortcode": "twice1"})
        assert (first.status_code, second.status_code) == (201, 409)

    async def test_lifespan_wires_service_and_remote_log(self, monkeypatch):
        """The application lifespan builds the service and ships events."""
        received = []

        def collector(request: httpx.Request) -> httpx.Response:
            received.append(request)
            return httpx.Response(200, json={"logID": "1", "message": "log created"})

        monkeypatch.setattr(
            "app.RemoteLogger",
            functools.partial(RemoteLogger, transport=httpx.MockTransport(collector)),
        )

        logger = setup_logging(level="DEBUG")
        config = Config(remote_log_url="http://collector.test/logs", cleanup_interval_seconds=3600)
        app = create_app(service_instance=None, config=config, logger=logger)

        async with lifespan(app):
            service = app.state.service
            assert service is not None
            assert app.state.cleanup.running

            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
                response = await client.post("/shorturls", json={"url": "https://example.com"})
                assert response.status_code == 201

        assert app.state.service is None
        assert any(b"Short URL created" in request.content for request in received)

    def test_build_service_from_config(self):
        logger = setup_logging(level="DEBUG")
        config = Config(short_code_length=8, default_validity_minutes=15, max_generation_attempts=3)

        service = build_service(config, logger)

        assert service.generator.default_length == 8
        assert service.default_validity_minutes == 15
        assert service.max_generation_attempts == 3
        assert service.event_log.enabled is False
        assert service.clock().tzinfo == timezone.utc
        assert isinstance(service.clock(), datetime)
