"""Shared pytest fixtures for Keyword Scraper tests.

Fixture summary
---------------
client         : httpx.AsyncClient against the FastAPI app (no network).

Every test runs without network access or a Chromium binary: fetchers are
mocked with ``respx`` and Playwright objects with ``unittest.mock``.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ---------------------------------------------------------------------------
# Test environment bootstrap
# ---------------------------------------------------------------------------
# Pin the pipeline configuration before any application module is imported
# so that a developer's .env cannot change what the tests exercise.

_TEST_ENV_DEFAULTS: dict[str, str] = {
    "ACQUISITION_STRATEGY": "http",
    "EXTRACTION_MODE": "basic",
    "LOG_LEVEL": "INFO",
    "DEBUG": "false",
}

for _key, _value in _TEST_ENV_DEFAULTS.items():
    os.environ[_key] = _value

# ---------------------------------------------------------------------------
# Application imports (after env bootstrap)
# ---------------------------------------------------------------------------

from keyword_scraper.api.main import app  # noqa: E402
from keyword_scraper.config.settings import get_settings  # noqa: E402

get_settings.cache_clear()


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx.AsyncClient wired to the FastAPI app in-process.

    Yields:
        :class:`httpx.AsyncClient` configured for the test app.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
