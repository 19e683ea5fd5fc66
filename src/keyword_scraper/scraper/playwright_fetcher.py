"""Playwright-based headless browser acquisition.

Each request gets its own Chromium process: nothing is pooled or shared,
and :func:`open_browser_page` closes page, context and browser on every exit
path.  Concurrent requests therefore cost one browser each.

The live page is also what the browser-only steps work on:

- :func:`render_page`: navigate, let client-side script settle, read markup.
- :func:`accept_cookies`: click the first cookie-consent control found.
- :func:`extract_surface_keywords`: read keyword labels from the
  ``#master-1`` iframe.

Install the Chromium binary once per environment::

    playwright install chromium
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from keyword_scraper.scraper.config import (
    BROWSER_ARGS,
    COOKIE_CLICK_PAUSE_MS,
    COOKIE_PROBE_TIMEOUT_MS,
    COOKIE_SELECTORS,
    MAX_KEYWORD_FRAGMENTS,
    SURFACE_FRAME_SELECTOR,
    SURFACE_FRAME_SETTLE_MS,
    SURFACE_FRAME_TIMEOUT_MS,
    SURFACE_ITEM_SELECTOR,
    TIMEOUT_ERROR,
    USER_AGENT,
    VIEWPORT,
)
from keyword_scraper.scraper.http_fetcher import FetchResult

logger = logging.getLogger(__name__)

_ELEMENT_TEXT_JS = "el => el.innerText || el.textContent"


# ---------------------------------------------------------------------------
# Browser lifetime
# ---------------------------------------------------------------------------


@asynccontextmanager
async def open_browser_page(
    *,
    timeout_ms: int,
    headless: bool = True,
) -> AsyncIterator[Page]:
    """Launch a dedicated Chromium and yield a fresh page.

    The page has a 1920x1080 viewport, the desktop user agent and
    ``timeout_ms`` as its default action timeout.  Page, context and browser
    are closed when the block exits, whether it returned or raised.

    Args:
        timeout_ms: Default timeout for page actions, in milliseconds.
        headless: Run Chromium without a window.

    Yields:
        The Playwright :class:`~playwright.async_api.Page`.
    """
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless, args=list(BROWSER_ARGS))
        try:
            context = await browser.new_context(
                user_agent=USER_AGENT,
                viewport=VIEWPORT,
            )
            page = await context.new_page()
            page.set_default_timeout(timeout_ms)
            try:
                yield page
            finally:
                await page.close()
                await context.close()
        finally:
            await browser.close()
            logger.debug("scraper: browser closed")


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


async def render_page(
    page: Page,
    url: str,
    *,
    timeout_ms: int,
    settle_ms: int,
) -> FetchResult:
    """Navigate to ``url`` and return the rendered markup.

    Waits for ``domcontentloaded`` (bounded by ``timeout_ms``), then pauses
    ``settle_ms`` so client-side script can populate the DOM.  A navigation
    timeout is reported, not retried.

    Returns:
        A :class:`~keyword_scraper.scraper.http_fetcher.FetchResult`;
        ``error`` is ``"Timeout loading page"`` on navigation timeout.
    """
    try:
        response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        logger.warning("scraper: timeout loading %s: %s", url, exc)
        return FetchResult(html=None, status_code=None, final_url=url, error=TIMEOUT_ERROR)

    await page.wait_for_timeout(settle_ms)
    html = await page.content()
    logger.info("scraper: rendered %s (%d characters)", url, len(html))
    return FetchResult(
        html=html,
        status_code=response.status if response else None,
        final_url=page.url,
        error=None,
    )


# ---------------------------------------------------------------------------
# Cookie consent
# ---------------------------------------------------------------------------


async def accept_cookies(page: Page) -> bool:
    """Click the first cookie-consent control found on ``page``.

    Probes :data:`~keyword_scraper.scraper.config.COOKIE_SELECTORS` in order,
    waiting up to 3 s for each.

    Returns:
        ``True`` if a control was clicked, ``False`` if none appeared.
    """
    for selector in COOKIE_SELECTORS:
        try:
            await page.wait_for_selector(selector, timeout=COOKIE_PROBE_TIMEOUT_MS)
            element = await page.query_selector(selector)
            if element is None:
                continue
            await element.click()
            await page.wait_for_timeout(COOKIE_CLICK_PAUSE_MS)
        except PlaywrightError:
            continue
        logger.info("scraper: cookie dialog accepted via %s", selector)
        return True

    logger.info("scraper: no cookie dialog found")
    return False


# ---------------------------------------------------------------------------
# Surface keywords
# ---------------------------------------------------------------------------


async def _read_surface_labels(page: Page) -> list[str]:
    await page.bring_to_front()
    await page.wait_for_selector(SURFACE_FRAME_SELECTOR, timeout=SURFACE_FRAME_TIMEOUT_MS)

    frame_element = await page.query_selector(SURFACE_FRAME_SELECTOR)
    if frame_element is None:
        logger.info("scraper: surface frame %s not found", SURFACE_FRAME_SELECTOR)
        return []
    frame = await frame_element.content_frame()
    if frame is None:
        logger.info("scraper: surface frame %s is not accessible", SURFACE_FRAME_SELECTOR)
        return []

    await page.wait_for_timeout(SURFACE_FRAME_SETTLE_MS)
    elements = await frame.query_selector_all(SURFACE_ITEM_SELECTOR)
    logger.debug("scraper: %d surface label elements", len(elements))

    labels = []
    for element in elements[:MAX_KEYWORD_FRAGMENTS]:
        try:
            text = await element.evaluate(_ELEMENT_TEXT_JS)
        except PlaywrightError as exc:
            logger.debug("scraper: unreadable surface label: %s", exc)
            continue
        labels.append((text or "").strip())
    return labels


async def extract_surface_keywords(page: Page) -> str:
    """Read up to 10 keyword labels from the ``#master-1`` iframe.

    Best-effort: any failure (frame missing or inaccessible, selector error)
    yields ``""`` instead of failing the request.

    Returns:
        Non-empty trimmed label texts in DOM order, joined with ``", "``.
    """
    try:
        labels = await _read_surface_labels(page)
    except Exception as exc:  # noqa: BLE001
        logger.info("scraper: surface keyword scan failed: %s", exc)
        return ""

    surface = ", ".join(label for label in labels if label)
    if surface:
        logger.info("scraper: surface keywords: %.100s", surface)
    return surface
