"""Acquisition strategies and extraction modes.

The pipeline is a single configurable flow: *how* the page is obtained
(:class:`AcquisitionStrategy`) is independent of *how much* is extracted
from it (:class:`ExtractionMode`).
"""

from __future__ import annotations

from enum import Enum


class AcquisitionStrategy(str, Enum):
    """How page markup is obtained.

    Attributes:
        HTTP: One plain ``GET`` request.  No script execution, no live DOM,
            so surface keywords are never available.
        BROWSER: A dedicated headless Chromium per request.  Client-side
            script runs before the markup is read, and the live page is
            available for the iframe scan and the cookie-consent fallback.
    """

    HTTP = "http"
    BROWSER = "browser"


class ExtractionMode(str, Enum):
    """How much is extracted from the acquired page.

    Attributes:
        BASIC: Primary delimiter rules only.
        EXTENDED: Primary rules, then the additional patterns and the
            heuristic fallback chain; under :attr:`AcquisitionStrategy.BROWSER`
            also the surface-keyword iframe scan.
    """

    BASIC = "basic"
    EXTENDED = "extended"
