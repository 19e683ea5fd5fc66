"""Async HTTP fetcher: the fast acquisition path.

Uses ``httpx`` for a single ``GET`` with a desktop-browser user agent.  No
script runs, so pages that build their keyword payload client-side need
:mod:`keyword_scraper.scraper.playwright_fetcher` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from keyword_scraper.scraper.config import REQUEST_HEADERS, TIMEOUT_ERROR

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass
class FetchResult:
    """Result of a single acquisition attempt (HTTP or browser).

    Attributes:
        html: Page markup, or ``None`` if the fetch failed.
        status_code: HTTP status code, or ``None`` on network error or when
            the browser reported no main-document response.
        final_url: URL after redirects, or the requested URL on error.
        error: Human-readable error description, or ``None`` on success.
    """

    html: str | None
    status_code: int | None
    final_url: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None and self.html is not None


# ---------------------------------------------------------------------------
# Public fetch function
# ---------------------------------------------------------------------------


async def fetch_markup(
    url: str,
    *,
    client: httpx.AsyncClient,
    timeout: float,
) -> FetchResult:
    """Fetch the raw markup of ``url`` with one ``GET``.

    Redirects are followed.  No retry.

    Args:
        url: Target URL.
        client: :class:`httpx.AsyncClient` owned by the caller.
        timeout: Request timeout in seconds.

    Returns:
        A :class:`FetchResult`.  ``error`` is ``"Timeout loading page"`` on
        timeout, ``"HTTP <status>: <reason>"`` on a non-2xx status, or the
        transport error text on any other request failure.
    """
    try:
        response = await client.get(
            url,
            timeout=timeout,
            follow_redirects=True,
            headers=REQUEST_HEADERS,
        )
    except httpx.TimeoutException:
        logger.warning("scraper: timeout fetching %s", url)
        return FetchResult(html=None, status_code=None, final_url=url, error=TIMEOUT_ERROR)
    except httpx.RequestError as exc:
        logger.warning("scraper: request error for %s: %s", url, exc)
        return FetchResult(
            html=None, status_code=None, final_url=url, error=str(exc) or type(exc).__name__
        )

    final_url = str(response.url)

    if not response.is_success:
        logger.info("scraper: HTTP %d for %s", response.status_code, url)
        return FetchResult(
            html=None,
            status_code=response.status_code,
            final_url=final_url,
            error=f"HTTP {response.status_code}: {response.reason_phrase}",
        )

    try:
        html = response.text
    except Exception as exc:  # noqa: BLE001
        logger.warning("scraper: decode error for %s: %s", url, exc)
        return FetchResult(
            html=None,
            status_code=response.status_code,
            final_url=final_url,
            error=f"decode error: {exc}",
        )

    logger.info("scraper: fetched %s (%d characters)", url, len(html))
    return FetchResult(
        html=html,
        status_code=response.status_code,
        final_url=final_url,
        error=None,
    )
