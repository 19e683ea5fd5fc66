"""Route handlers for the keyword extraction API.

Routes:
    GET  /         : static liveness payload
    POST /extract  : extract keywords from a URL

Extraction failures are reported in the body (``success: false``) with HTTP
200; only input validation (400) and unanticipated handler errors (500)
change the status code.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Optional

import structlog
from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from keyword_scraper.config.settings import get_settings
from keyword_scraper.core.exceptions import InvalidRequestError
from keyword_scraper.core.schemas import ExtractRequest
from keyword_scraper.scraper.pipeline import process_url

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["extraction"])

#: Listed in the 404 body for unmatched routes.
AVAILABLE_ENDPOINTS: list[str] = ["GET /", "POST /extract"]

SERVER_NAME = "keyword-scraper"

_URL_ADAPTER: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def error_body(message: str) -> dict[str, Any]:
    """Common shape of the 400 and 500 error bodies."""
    return {
        "success": False,
        "error": message,
        "scraped_keywords": "",
        "surface_keywords": "",
    }


def _validate_url(url: Optional[str]) -> str:
    """Return ``url`` if it is an absolute http(s) URL.

    Raises:
        InvalidRequestError: ``"URL is required"`` when missing or empty,
            ``"Invalid URL format"`` when it does not parse.
    """
    if not url:
        raise InvalidRequestError("URL is required")
    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError as exc:
        raise InvalidRequestError("Invalid URL format") from exc
    return url


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/")
async def service_status() -> dict[str, Any]:
    """Return the static liveness payload.  No I/O is performed."""
    settings = get_settings()
    return {
        "status": "alive",
        "message": settings.app_name,
        "version": settings.app_version,
        "mode": settings.extraction_mode.value.upper(),
        "strategy": settings.acquisition_strategy.value,
        "endpoints": {
            "POST /extract": "Extract keywords from a URL",
            "GET /": "Health check",
        },
    }


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


@router.post("/extract")
async def extract(
    payload: Annotated[Optional[ExtractRequest], Body()] = None,
) -> JSONResponse:
    """Extract scraped and surface keywords from ``payload.url``.

    Args:
        payload: Validated :class:`~keyword_scraper.core.schemas.ExtractRequest`;
            ``None`` when the request has no body.

    Returns:
        HTTP 400 for a missing or malformed URL, HTTP 500 for an unexpected
        handler error, otherwise HTTP 200 with the extraction result plus
        request echo fields (``url``, ``country``, ``mode``, ``method``,
        ``timestamp``, ``server``).
    """
    payload = payload or ExtractRequest()
    try:
        url = _validate_url(payload.url)
    except InvalidRequestError as exc:
        logger.info("extract_rejected", reason=exc.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(exc.message),
        )

    country = payload.country or "Unknown"
    settings = get_settings()
    logger.info(
        "extract_request",
        url=url,
        country=country,
        strategy=settings.acquisition_strategy.value,
        mode=settings.extraction_mode.value,
    )

    try:
        result = await process_url(url, settings=settings)
        body = {
            **result.to_dict(),
            "url": url,
            "country": country,
            "mode": settings.extraction_mode.value.upper(),
            "method": settings.acquisition_strategy.value,
            "timestamp": _now_iso(),
            "server": SERVER_NAME,
        }
    except Exception as exc:
        logger.exception("extract_failed", url=url)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                **error_body(str(exc)),
                "timestamp": _now_iso(),
            },
        )

    logger.info(
        "extract_response",
        success=result.success,
        has_scraped=bool(result.scraped_keywords),
        has_surface=bool(result.surface_keywords),
        processing_time_ms=result.processing_time_ms,
    )
    return JSONResponse(content=body)
