"""Unit tests for the Playwright browser acquisition module.

All Playwright objects are mocks: no Chromium is launched.  Covers browser
teardown on every exit path, navigation timeout, cookie-consent probing and
the best-effort surface keyword scan.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from keyword_scraper.scraper.config import (
    COOKIE_SELECTORS,
    SURFACE_FRAME_SELECTOR,
    SURFACE_ITEM_SELECTOR,
    TIMEOUT_ERROR,
    USER_AGENT,
    VIEWPORT,
)
from keyword_scraper.scraper.playwright_fetcher import (
    accept_cookies,
    extract_surface_keywords,
    open_browser_page,
    render_page,
)

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


def _make_page(html: str = "<html></html>") -> MagicMock:
    page = MagicMock()
    page.url = "https://example.com/final"
    page.goto = AsyncMock(return_value=MagicMock(status=200))
    page.content = AsyncMock(return_value=html)
    page.wait_for_timeout = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.query_selector = AsyncMock(return_value=None)
    page.bring_to_front = AsyncMock()
    page.close = AsyncMock()
    return page


def _make_label(text: Any) -> MagicMock:
    element = MagicMock()
    if isinstance(text, Exception):
        element.evaluate = AsyncMock(side_effect=text)
    else:
        element.evaluate = AsyncMock(return_value=text)
    return element


def _page_with_surface_frame(labels: list[Any]) -> tuple[MagicMock, MagicMock]:
    frame = MagicMock()
    frame.query_selector_all = AsyncMock(return_value=[_make_label(t) for t in labels])
    frame_element = MagicMock()
    frame_element.content_frame = AsyncMock(return_value=frame)
    page = _make_page()
    page.query_selector = AsyncMock(return_value=frame_element)
    return page, frame


def _patched_playwright(page: MagicMock) -> tuple[MagicMock, MagicMock, MagicMock]:
    """Build an ``async_playwright`` replacement that yields ``page``."""
    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)

    manager = MagicMock()
    manager.__aenter__.return_value = playwright
    manager.__aexit__.return_value = False

    return MagicMock(return_value=manager), browser, context


# ---------------------------------------------------------------------------
# open_browser_page
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
class TestOpenBrowserPage:
    async def test_configures_page_and_closes_everything(self) -> None:
        page = _make_page()
        factory, browser, context = _patched_playwright(page)

        with patch("keyword_scraper.scraper.playwright_fetcher.async_playwright", factory):
            async with open_browser_page(timeout_ms=15_000) as opened:
                assert opened is page

        browser.new_context.assert_awaited_once_with(user_agent=USER_AGENT, viewport=VIEWPORT)
        page.set_default_timeout.assert_called_once_with(15_000)
        page.close.assert_awaited_once()
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()

    async def test_browser_closed_when_block_raises(self) -> None:
        page = _make_page()
        factory, browser, context = _patched_playwright(page)

        with patch("keyword_scraper.scraper.playwright_fetcher.async_playwright", factory):
            with pytest.raises(RuntimeError, match="extraction blew up"):
                async with open_browser_page(timeout_ms=15_000):
                    raise RuntimeError("extraction blew up")

        page.close.assert_awaited_once()
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()

    async def test_browser_closed_when_page_creation_fails(self) -> None:
        page = _make_page()
        factory, browser, context = _patched_playwright(page)
        context.new_page = AsyncMock(side_effect=PlaywrightError("target closed"))

        with patch("keyword_scraper.scraper.playwright_fetcher.async_playwright", factory):
            with pytest.raises(PlaywrightError):
                async with open_browser_page(timeout_ms=15_000):
                    pass

        browser.close.assert_awaited_once()

    async def test_launches_headless_by_default(self) -> None:
        page = _make_page()
        factory, _, _ = _patched_playwright(page)

        with patch("keyword_scraper.scraper.playwright_fetcher.async_playwright", factory):
            async with open_browser_page(timeout_ms=1_000):
                pass

        playwright = factory.return_value.__aenter__.return_value
        launch_kwargs = playwright.chromium.launch.await_args.kwargs
        assert launch_kwargs["headless"] is True
        assert "--no-sandbox" in launch_kwargs["args"]


# ---------------------------------------------------------------------------
# render_page
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
class TestRenderPage:
    async def test_returns_rendered_markup(self) -> None:
        page = _make_page('<html>{"terms":"x",}</html>')

        result = await render_page(page, "https://example.com", timeout_ms=15_000, settle_ms=2_000)

        page.goto.assert_awaited_once_with(
            "https://example.com", wait_until="domcontentloaded", timeout=15_000
        )
        page.wait_for_timeout.assert_awaited_once_with(2_000)
        assert result.ok
        assert result.html == '<html>{"terms":"x",}</html>'
        assert result.status_code == 200
        assert result.final_url == "https://example.com/final"

    async def test_navigation_timeout_is_reported_not_retried(self) -> None:
        page = _make_page()
        page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 15000ms exceeded"))

        result = await render_page(page, "https://example.com", timeout_ms=15_000, settle_ms=2_000)

        assert result.ok is False
        assert result.error == TIMEOUT_ERROR
        page.goto.assert_awaited_once()
        page.content.assert_not_awaited()

    async def test_missing_main_response_leaves_status_empty(self) -> None:
        page = _make_page()
        page.goto = AsyncMock(return_value=None)

        result = await render_page(page, "https://example.com", timeout_ms=1_000, settle_ms=0)

        assert result.ok
        assert result.status_code is None


# ---------------------------------------------------------------------------
# accept_cookies
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
class TestAcceptCookies:
    async def test_clicks_first_selector_found(self) -> None:
        page = _make_page()
        button = MagicMock()
        button.click = AsyncMock()
        # The first two selectors never appear.
        page.wait_for_selector = AsyncMock(
            side_effect=[
                PlaywrightTimeoutError("no accept"),
                PlaywrightTimeoutError("no agree"),
                None,
            ]
        )
        page.query_selector = AsyncMock(return_value=button)

        assert await accept_cookies(page) is True

        page.query_selector.assert_awaited_once_with(COOKIE_SELECTORS[2])
        button.click.assert_awaited_once()
        page.wait_for_timeout.assert_awaited_once_with(1_000)

    async def test_returns_false_when_no_dialog(self) -> None:
        page = _make_page()
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("nothing"))

        assert await accept_cookies(page) is False
        assert page.wait_for_selector.await_count == len(COOKIE_SELECTORS)

    async def test_click_failure_moves_to_next_selector(self) -> None:
        page = _make_page()
        broken = MagicMock()
        broken.click = AsyncMock(side_effect=PlaywrightError("element detached"))
        working = MagicMock()
        working.click = AsyncMock()
        page.query_selector = AsyncMock(side_effect=[broken, working])

        assert await accept_cookies(page) is True
        working.click.assert_awaited_once()


# ---------------------------------------------------------------------------
# extract_surface_keywords
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
class TestExtractSurfaceKeywords:
    async def test_joins_trimmed_labels(self) -> None:
        page, frame = _page_with_surface_frame([" red shoes ", "blue hat", "", "   ", "green scarf"])

        result = await extract_surface_keywords(page)

        assert result == "red shoes, blue hat, green scarf"
        page.wait_for_selector.assert_awaited_once_with(SURFACE_FRAME_SELECTOR, timeout=10_000)
        frame.query_selector_all.assert_awaited_once_with(SURFACE_ITEM_SELECTOR)

    async def test_reads_at_most_ten_labels(self) -> None:
        page, _ = _page_with_surface_frame([f"k{i}" for i in range(1, 15)])

        result = await extract_surface_keywords(page)

        assert result == ", ".join(f"k{i}" for i in range(1, 11))

    async def test_unreadable_label_is_skipped(self) -> None:
        page, _ = _page_with_surface_frame(["first", PlaywrightError("detached"), None, "last"])

        assert await extract_surface_keywords(page) == "first, last"

    async def test_frame_never_appears(self) -> None:
        page = _make_page()
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("no frame"))

        assert await extract_surface_keywords(page) == ""

    async def test_frame_element_missing(self) -> None:
        page = _make_page()
        page.query_selector = AsyncMock(return_value=None)

        assert await extract_surface_keywords(page) == ""

    async def test_frame_not_accessible(self) -> None:
        page = _make_page()
        frame_element = MagicMock()
        frame_element.content_frame = AsyncMock(return_value=None)
        page.query_selector = AsyncMock(return_value=frame_element)

        assert await extract_surface_keywords(page) == ""

    async def test_selector_error_degrades_to_empty(self) -> None:
        page, frame = _page_with_surface_frame([])
        frame.query_selector_all = AsyncMock(side_effect=PlaywrightError("frame detached"))

        assert await extract_surface_keywords(page) == ""
