"""Constants for page acquisition and keyword extraction.

Everything here is fixed policy; anything an operator may reasonably tune
(timeouts, strategy, mode) lives in :mod:`keyword_scraper.config.settings`.
"""

from __future__ import annotations

from typing import NamedTuple

# ---------------------------------------------------------------------------
# Delimiter rules
# ---------------------------------------------------------------------------


class DelimiterRule(NamedTuple):
    """Literal start/end markers around an embedded keyword value.

    Attributes:
        start: Marker whose *first* occurrence opens the value.
        end: Marker whose first occurrence after ``start`` closes it.
        min_length: Minimum length of the trimmed value for a match.
    """

    start: str
    end: str
    min_length: int = 1


#: Primary rules.  Order is priority: the first rule yielding a non-empty
#: value wins, wherever in the document the other patterns appear.
PRIMARY_RULES: tuple[DelimiterRule, ...] = (
    DelimiterRule("&quot;terms&quot;:&quot;", "&quot;,"),
    DelimiterRule('"terms":"', '",'),
    DelimiterRule("terms=", "&"),
    DelimiterRule('"keyWords":"', '",'),
    DelimiterRule('"keywords":"', '",'),
)

#: Extended-mode rules, tried after :data:`PRIMARY_RULES`.  Values of two
#: characters or fewer are rejected as noise.
ADDITIONAL_RULES: tuple[DelimiterRule, ...] = (
    # Facebook / Meta
    DelimiterRule('data-keywords="', '"', 3),
    DelimiterRule('"keywords":[', "]", 3),
    DelimiterRule('keywordsList":[', "]", 3),
    # Google
    DelimiterRule('"q":"', '"', 3),
    DelimiterRule("search_terms\":", ",", 3),
    # Generic JSON
    DelimiterRule('"tags":[', "]", 3),
    DelimiterRule('"categories":[', "]", 3),
    # URL parameters
    DelimiterRule("keywords=", "&", 3),
    DelimiterRule("terms=", "&", 3),
    DelimiterRule("tags=", "&", 3),
    # Meta tags
    DelimiterRule('name="keywords" content="', '"', 3),
    DelimiterRule("name='keywords' content='", "'", 3),
    # Misc
    DelimiterRule('"query":"', '"', 3),
    DelimiterRule('searchTerm":', ",", 3),
)

#: Query-string parameters scanned by the URL-parameter heuristic.
URL_KEYWORD_PARAMS: tuple[str, ...] = ("terms", "keywords", "query", "q", "search", "tags")

#: CSS selector for keyword label spans in raw markup.
KEYWORD_SPAN_SELECTOR: str = "span.si34.span"

#: Words counted (case-insensitively) in the debug census when nothing matched.
CENSUS_WORDS: tuple[str, ...] = ("terms", "keywords", "query", "search", "tags", "categories")

#: Upper bound on heuristic and surface keyword fragments per result.
MAX_KEYWORD_FRAGMENTS: int = 10

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

#: Desktop Chrome user agent sent by both acquisition strategies.
USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

#: Headers sent with the plain HTTP ``GET``.
REQUEST_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

#: Error reported for any navigation or request timeout.
TIMEOUT_ERROR: str = "Timeout loading page"

# ---------------------------------------------------------------------------
# Browser
# ---------------------------------------------------------------------------

VIEWPORT: dict[str, int] = {"width": 1920, "height": 1080}

#: Chromium flags for a lean, container-friendly headless instance.
BROWSER_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-features=VizDisplayCompositor",
    "--disable-background-timer-throttling",
    "--disable-renderer-backgrounding",
    "--disable-backgrounding-occluded-windows",
    "--memory-pressure-off",
    "--disable-extensions",
    "--disable-plugins",
    "--disable-images",
)

#: Cookie-consent controls, probed in order; the first one found is clicked.
COOKIE_SELECTORS: tuple[str, ...] = (
    'button:has-text("Accept")',
    'button:has-text("Agree")',
    'button:has-text("OK")',
    'button:has-text("Allow")',
    'a:has-text("Accept")',
    'button[class*="accept"]',
    'button[class*="agree"]',
    'button[class*="consent"]',
    '[id*="accept"]',
    '[id*="consent"]',
)

#: Per-selector wait while probing for a cookie control (ms).
COOKIE_PROBE_TIMEOUT_MS: int = 3_000

#: Pause after clicking a cookie control (ms).
COOKIE_CLICK_PAUSE_MS: int = 1_000

# ---------------------------------------------------------------------------
# Surface keywords
# ---------------------------------------------------------------------------

#: Iframe holding the rendered keyword labels.
SURFACE_FRAME_SELECTOR: str = "#master-1"

#: Keyword label elements inside :data:`SURFACE_FRAME_SELECTOR`.
SURFACE_ITEM_SELECTOR: str = ".p_.si34.span"

#: Wait for the iframe to attach (ms).
SURFACE_FRAME_TIMEOUT_MS: int = 10_000

#: Pause after resolving the iframe so its content can render (ms).
SURFACE_FRAME_SETTLE_MS: int = 2_000
