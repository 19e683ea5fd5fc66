"""Per-request extraction pipeline.

One coroutine per request, no state shared between requests::

    acquire markup ──► delimiter scan ──┬──► result
      (http | browser)  (+ surface scan)│
                                        └── both empty, browser only:
                                            accept cookies, settle, rescan once

Every acquisition and extraction failure is caught here and folded into an
:class:`ExtractionResult` with ``success=False``.  A miss (nothing matched)
is ``success=True`` with empty strings.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any

import httpx
from playwright.async_api import Page

from keyword_scraper.config.modes import AcquisitionStrategy, ExtractionMode
from keyword_scraper.config.settings import Settings, get_settings
from keyword_scraper.scraper.http_fetcher import FetchResult, fetch_markup
from keyword_scraper.scraper.keyword_extractor import extract_keywords
from keyword_scraper.scraper.playwright_fetcher import (
    accept_cookies,
    extract_surface_keywords,
    open_browser_page,
    render_page,
)

logger = logging.getLogger(__name__)

_HTML_PREVIEW_CHARS = 200


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of processing one URL.

    Attributes:
        scraped_keywords: Keywords found in the markup, or ``""``.
        surface_keywords: Keywords read from the rendered iframe, or ``""``.
            Always ``""`` under HTTP acquisition.
        success: ``False`` only when acquisition or extraction failed.
        error: Failure description, ``""`` on success.
        processing_time_ms: Wall-clock time spent on the URL.
        debug_info: Markup diagnostics, present only with ``debug`` enabled.
    """

    scraped_keywords: str
    surface_keywords: str
    success: bool
    error: str
    processing_time_ms: int
    debug_info: dict[str, Any] | None = None

    @classmethod
    def failure(cls, error: str, *, started: float) -> ExtractionResult:
        return cls(
            scraped_keywords="",
            surface_keywords="",
            success=False,
            error=error,
            processing_time_ms=_elapsed_ms(started),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; ``debug_info`` is omitted when unset."""
        data = asdict(self)
        if self.debug_info is None:
            del data["debug_info"]
        return data


def _elapsed_ms(started: float) -> int:
    return round((time.perf_counter() - started) * 1000)


def _debug_info(html: str, mode: ExtractionMode) -> dict[str, Any]:
    return {
        "html_length": len(html),
        "html_preview": html[:_HTML_PREVIEW_CHARS],
        "patterns_searched": (
            "primary + additional patterns + heuristics"
            if mode is ExtractionMode.EXTENDED
            else "primary patterns"
        ),
    }


# ---------------------------------------------------------------------------
# HTTP strategy
# ---------------------------------------------------------------------------


async def _process_with_http(
    url: str,
    mode: ExtractionMode,
    settings: Settings,
    started: float,
) -> ExtractionResult:
    async with httpx.AsyncClient() as client:
        fetched = await fetch_markup(url, client=client, timeout=settings.http_timeout)
    if not fetched.ok:
        return ExtractionResult.failure(fetched.error or "Empty response", started=started)

    html = fetched.html or ""
    scraped = extract_keywords(html, extended=mode is ExtractionMode.EXTENDED)
    return ExtractionResult(
        scraped_keywords=scraped,
        surface_keywords="",
        success=True,
        error="",
        processing_time_ms=_elapsed_ms(started),
        debug_info=_debug_info(html, mode) if settings.debug else None,
    )


# ---------------------------------------------------------------------------
# Browser strategy
# ---------------------------------------------------------------------------


async def _scan_page(page: Page, html: str, mode: ExtractionMode) -> tuple[str, str]:
    """Run the delimiter scan and, in extended mode, the surface scan."""
    extended = mode is ExtractionMode.EXTENDED
    scraped = extract_keywords(html, extended=extended)
    surface = await extract_surface_keywords(page) if extended else ""
    return scraped, surface


async def _process_with_browser(
    url: str,
    mode: ExtractionMode,
    settings: Settings,
    started: float,
) -> ExtractionResult:
    async with open_browser_page(
        timeout_ms=settings.browser_timeout_ms,
        headless=settings.headless,
    ) as page:
        rendered: FetchResult = await render_page(
            page,
            url,
            timeout_ms=settings.browser_timeout_ms,
            settle_ms=settings.settle_ms,
        )
        if not rendered.ok:
            return ExtractionResult.failure(rendered.error or "Empty page", started=started)

        html = rendered.html or ""
        scraped, surface = await _scan_page(page, html, mode)

        if not scraped and not surface:
            logger.info("scraper: nothing found on %s, trying cookie consent", url)
            await accept_cookies(page)
            await page.wait_for_timeout(settings.settle_ms)
            html = await page.content()
            scraped, surface = await _scan_page(page, html, mode)

    return ExtractionResult(
        scraped_keywords=scraped,
        surface_keywords=surface,
        success=True,
        error="",
        processing_time_ms=_elapsed_ms(started),
        debug_info=_debug_info(html, mode) if settings.debug else None,
    )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


async def process_url(
    url: str,
    *,
    strategy: AcquisitionStrategy | None = None,
    mode: ExtractionMode | None = None,
    settings: Settings | None = None,
) -> ExtractionResult:
    """Acquire ``url`` and extract its keywords.

    Args:
        url: Absolute http(s) URL, already validated by the caller.
        strategy: Acquisition strategy; defaults to the configured one.
        mode: Extraction mode; defaults to the configured one.
        settings: Settings override, mainly for tests.

    Returns:
        An :class:`ExtractionResult`.  Never raises for acquisition or
        extraction failures.
    """
    settings = settings or get_settings()
    strategy = strategy or settings.acquisition_strategy
    mode = mode or settings.extraction_mode
    started = time.perf_counter()
    logger.info("scraper: processing %s (strategy=%s, mode=%s)", url, strategy.value, mode.value)

    try:
        if strategy is AcquisitionStrategy.BROWSER:
            result = await _process_with_browser(url, mode, settings, started)
        else:
            result = await _process_with_http(url, mode, settings, started)
    except Exception as exc:  # noqa: BLE001
        logger.warning("scraper: processing failed for %s: %s", url, exc)
        return ExtractionResult.failure(str(exc) or type(exc).__name__, started=started)

    if result.success and not (result.scraped_keywords or result.surface_keywords):
        logger.info("scraper: no keywords found for %s", url)
    logger.info(
        "scraper: processed %s in %d ms (success=%s)",
        url,
        result.processing_time_ms,
        result.success,
    )
    return result
