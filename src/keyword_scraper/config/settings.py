"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.
Never call ``os.getenv`` directly elsewhere in the codebase.

Usage::

    from keyword_scraper.config.settings import get_settings

    settings = get_settings()
    port = settings.port
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from keyword_scraper import __version__
from keyword_scraper.config.modes import AcquisitionStrategy, ExtractionMode


class Settings(BaseSettings):
    """Service configuration backed by environment variables and an optional .env file.

    Every field has a default, so the service starts with no environment at
    all.  Field names map to upper-case environment variables
    (``port`` <- ``PORT``, ``extraction_mode`` <- ``EXTRACTION_MODE``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Application behaviour
    # ------------------------------------------------------------------

    app_name: str = "Keyword Scraper API"
    """Human-readable name shown in the health payload and OpenAPI docs."""

    app_version: str = __version__

    debug: bool = False
    """Attach ``debug_info`` (markup length and preview) to extraction results."""

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"

    port: int = 10000
    """Listening port, read from ``PORT`` as most PaaS hosts expect."""

    allowed_origins: list[str] = ["*"]
    """Origins permitted by the CORS middleware."""

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    acquisition_strategy: AcquisitionStrategy = AcquisitionStrategy.HTTP
    """``http`` for a single GET, ``browser`` for headless Chromium rendering."""

    extraction_mode: ExtractionMode = ExtractionMode.BASIC
    """``basic`` for the primary delimiter rules only, ``extended`` for
    additional patterns, heuristics and (browser only) surface keywords."""

    # ------------------------------------------------------------------
    # Timeouts
    # ------------------------------------------------------------------

    http_timeout: float = 15.0
    """Seconds allowed for the plain HTTP ``GET``."""

    browser_timeout_ms: int = 15_000
    """Navigation timeout and default action timeout for the browser page."""

    settle_ms: int = 2_000
    """Fixed pause after navigation (and after a cookie click) so that
    client-side script can populate the DOM."""

    headless: bool = True


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    In tests, call ``get_settings.cache_clear()`` after patching environment
    variables.

    Returns:
        Settings: The validated settings object.
    """
    return Settings()
