"""Keyword Scraper: extract embedded keyword strings from web pages."""

__version__ = "1.1.0"
