"""Allow ``python -m keyword_scraper`` to start the API server."""

from keyword_scraper.api.main import run

if __name__ == "__main__":
    run()
