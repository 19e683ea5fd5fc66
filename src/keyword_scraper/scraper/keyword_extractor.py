"""Keyword extraction from raw page markup.

Primary extractor: an ordered list of literal delimiter rules
(:data:`~keyword_scraper.scraper.config.PRIMARY_RULES`) evaluated by a single
first-match-wins loop.  Matching is case-sensitive substring search, with no
regex and no normalisation.

In extended mode the same loop runs over
:data:`~keyword_scraper.scraper.config.ADDITIONAL_RULES`, and if that also
misses, a chain of best-effort heuristics (meta tags, title words, URL
parameters, keyword spans, JSON-LD) is tried.  A heuristic that raises is
logged and skipped; it never aborts extraction.

"No keywords" is not an error: every function here returns ``""`` on a miss.
"""

from __future__ import annotations

import json
import logging
import re
import urllib.parse
from collections.abc import Callable, Iterable

from bs4 import BeautifulSoup, Tag

from keyword_scraper.scraper.config import (
    ADDITIONAL_RULES,
    CENSUS_WORDS,
    KEYWORD_SPAN_SELECTOR,
    MAX_KEYWORD_FRAGMENTS,
    PRIMARY_RULES,
    URL_KEYWORD_PARAMS,
    DelimiterRule,
)

logger = logging.getLogger(__name__)

_DESCRIPTION_SPLIT = re.compile(r"[,\s]+")
_TITLE_SPLIT = re.compile(r"[,\s\-|]+")


# ---------------------------------------------------------------------------
# Delimiter rules
# ---------------------------------------------------------------------------


def match_rule(markup: str, rule: DelimiterRule) -> str:
    """Apply a single delimiter rule to ``markup``.

    Takes the text after the first occurrence of ``rule.start``, then the
    text before the first ``rule.end`` in that tail, and trims it.

    Returns:
        The trimmed value, or ``""`` if ``rule.start`` is absent, no
        ``rule.end`` follows it, or the value is shorter than
        ``rule.min_length``.
    """
    start = markup.find(rule.start)
    if start == -1:
        return ""
    tail = markup[start + len(rule.start):]
    end = tail.find(rule.end)
    if end == -1:
        return ""
    value = tail[:end].strip()
    if len(value) < rule.min_length:
        return ""
    return value


def scan_rules(markup: str, rules: Iterable[DelimiterRule]) -> str:
    """Return the first non-empty :func:`match_rule` result, in rule order."""
    for rule in rules:
        value = match_rule(markup, rule)
        if value:
            logger.debug("scraper: keywords matched by %r: %.100s", rule.start, value)
            return value
    return ""


# ---------------------------------------------------------------------------
# Heuristic fallback chain (extended mode)
# ---------------------------------------------------------------------------


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find("meta", attrs={"name": re.compile(rf"^{name}$", re.IGNORECASE)})
    if not isinstance(tag, Tag):
        return ""
    content = tag.get("content")
    return content.strip() if isinstance(content, str) else ""


def _meta_keywords(markup: str, soup: BeautifulSoup) -> list[str]:  # noqa: ARG001
    keywords = _meta_content(soup, "keywords")
    return [keywords] if keywords else []


def _description_words(markup: str, soup: BeautifulSoup) -> list[str]:  # noqa: ARG001
    words = _DESCRIPTION_SPLIT.split(_meta_content(soup, "description"))
    return [word for word in words if len(word) > 3][:3]


def _title_words(markup: str, soup: BeautifulSoup) -> list[str]:  # noqa: ARG001
    if soup.title is None:
        return []
    words = _TITLE_SPLIT.split(soup.title.get_text().strip())
    return [word for word in words if len(word) > 3][:2]


def _url_parameters(markup: str, soup: BeautifulSoup) -> list[str]:  # noqa: ARG001
    """Values of keyword-ish query parameters found anywhere in the markup."""
    values = []
    for param in URL_KEYWORD_PARAMS:
        match = re.search(rf"[?&]{param}=([^&\"'<>\s]+)", markup, re.IGNORECASE)
        if match:
            values.append(urllib.parse.unquote_plus(match.group(1)))
    return values


def _keyword_spans(markup: str, soup: BeautifulSoup) -> list[str]:  # noqa: ARG001
    """Full text of every ``span.si34.span`` label, nested markup included."""
    return [span.get_text(" ", strip=True) for span in soup.select(KEYWORD_SPAN_SELECTOR)]


def _json_ld_keywords(markup: str, soup: BeautifulSoup) -> list[str]:  # noqa: ARG001
    """``keywords`` of every JSON-LD block; malformed blocks are skipped."""
    values: list[str] = []
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.get_text())
        except ValueError:
            logger.debug("scraper: skipping malformed JSON-LD block")
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict) or not item.get("keywords"):
                continue
            keywords = item["keywords"]
            if isinstance(keywords, list):
                keywords = ", ".join(str(k) for k in keywords)
            values.append(str(keywords))
    return values


_Heuristic = Callable[[str, BeautifulSoup], list[str]]

#: Tried in order; every step contributes, results are de-duplicated.
HEURISTICS: tuple[tuple[str, _Heuristic], ...] = (
    ("meta_keywords", _meta_keywords),
    ("meta_description", _description_words),
    ("title", _title_words),
    ("url_parameters", _url_parameters),
    ("keyword_spans", _keyword_spans),
    ("json_ld", _json_ld_keywords),
)


def extract_heuristic_keywords(markup: str) -> str:
    """Run the heuristic chain over ``markup``.

    The markup is parsed once with BeautifulSoup and the tree is shared by
    every heuristic.  Each heuristic is independent: one that raises is
    logged and skipped.  Fragments are trimmed, de-duplicated in first-seen
    order, capped at
    :data:`~keyword_scraper.scraper.config.MAX_KEYWORD_FRAGMENTS` and joined
    with ``", "``.

    Args:
        markup: Raw HTML.

    Returns:
        Comma-joined keyword fragments, or ``""``.
    """
    soup = BeautifulSoup(markup, "html.parser")

    fragments: list[str] = []
    for name, heuristic in HEURISTICS:
        try:
            found = heuristic(markup, soup)
        except Exception as exc:  # noqa: BLE001
            logger.debug("scraper: heuristic %s failed: %s", name, exc)
            continue
        if found:
            logger.debug("scraper: heuristic %s found %s", name, found)
        fragments.extend(found)

    unique: list[str] = []
    for fragment in fragments:
        fragment = fragment.strip()
        if fragment and fragment not in unique:
            unique.append(fragment)
    return ", ".join(unique[:MAX_KEYWORD_FRAGMENTS])


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def pattern_census(markup: str) -> dict[str, int]:
    """Count case-insensitive occurrences of common keyword-ish words.

    Used for debug logging when no rule matched, to show which patterns a
    page *does* contain.
    """
    lowered = markup.lower()
    counts = {word: lowered.count(word) for word in CENSUS_WORDS}
    return {word: count for word, count in counts.items() if count}


# ---------------------------------------------------------------------------
# Public extraction function
# ---------------------------------------------------------------------------


def extract_keywords(markup: str | None, *, extended: bool = False) -> str:
    """Extract the embedded keyword string from raw markup.

    Args:
        markup: Raw HTML/JSON text.  ``None`` and ``""`` are accepted.
        extended: Also try the additional rules and the heuristic chain
            when the primary rules miss.

    Returns:
        The first non-empty match in priority order, or ``""``.
    """
    if not markup:
        return ""

    keywords = scan_rules(markup, PRIMARY_RULES)
    if not keywords and extended:
        keywords = scan_rules(markup, ADDITIONAL_RULES) or extract_heuristic_keywords(markup)

    if not keywords and logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "scraper: no keywords in %d characters; census=%s",
            len(markup),
            pattern_census(markup),
        )
    return keywords
