"""Configuration package for Keyword Scraper.

Re-exports the most commonly used configuration symbols so that
callers can write::

    from keyword_scraper.config import get_settings, ExtractionMode
"""

from __future__ import annotations

from keyword_scraper.config.modes import AcquisitionStrategy, ExtractionMode
from keyword_scraper.config.settings import Settings, get_settings

__all__ = [
    "AcquisitionStrategy",
    "ExtractionMode",
    "Settings",
    "get_settings",
]
