"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.common.geolocation import GeoLocator
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.store.memory import UrlRegistry
from shortener.common.logging_config import setup_logging
from web_app import create_app


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    """Fake clock starting at a fixed instant."""
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def registry(logger, clock) -> UrlRegistry:
    """Create empty registry on the fake clock."""
    return UrlRegistry(logger=logger, clock=clock)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(registry, short_code_generator, logger, clock) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        registry=registry,
        short_code_generator=short_code_generator,
        geolocator=GeoLocator(logger=logger),
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def config():
    """Test configuration."""
    return Config(base_url="http://testserver", environment="development")


@pytest.fixture
def app(service, config, logger):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config, logger=logger)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
