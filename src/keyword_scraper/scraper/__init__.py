"""Page acquisition and keyword extraction.

Sub-modules:
- ``config``: delimiter rules, selectors, user agent, browser flags
- ``keyword_extractor``: delimiter-rule scan and extended-mode heuristics
- ``http_fetcher``: async httpx fetcher (fast path)
- ``playwright_fetcher``: per-request headless Chromium, cookie consent, surface keywords
- ``pipeline``: ``process_url()`` and ``ExtractionResult``
"""
