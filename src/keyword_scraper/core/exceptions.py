"""Application-wide exception hierarchy for Keyword Scraper.

Hierarchy::

    KeywordScraperError
    └── InvalidRequestError

Acquisition and extraction failures are *not* exceptions: fetchers return a
:class:`~keyword_scraper.scraper.http_fetcher.FetchResult` carrying an
``error`` string, and the pipeline folds it into an
:class:`~keyword_scraper.scraper.pipeline.ExtractionResult`.
"""

from __future__ import annotations


class KeywordScraperError(Exception):
    """Base class for all Keyword Scraper exceptions."""


class InvalidRequestError(KeywordScraperError):
    """Raised when an ``/extract`` request fails input validation.

    Converted to an HTTP 400 response; no page acquisition is attempted.

    Args:
        message: Client-facing description, e.g. ``"URL is required"``.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
