"""Pytest configuration and fixtures."""

import random
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlink.registry import LinkRegistry
from shortlink.shortcode import ShortCodeGenerator
from shortlink.storage.memory import MemoryLinkStore
from shortlink.common.logging_config import setup_logging
from web_app import create_app


class FakeClock:
    """Controllable clock for expiry tests."""

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
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(logger):
    return MemoryLinkStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Seeded generator so failures are reproducible."""
    return ShortCodeGenerator(default_length=6, rng=random.Random(1234))


@pytest.fixture
def registry(store, short_code_generator, logger, clock) -> LinkRegistry:
    return LinkRegistry(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def config():
    return Config(store_url="memory://", base_url="http://testserver")


@pytest.fixture
def app(registry, config, logger):
    """Create test FastAPI app."""
    return create_app(registry=registry, config=config, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
