"""FastAPI application factory and entry point.

Creates the application instance, registers middleware and error handlers,
and mounts the extraction router.

Usage::

    # Development server (from project root)
    uvicorn keyword_scraper.api.main:app --reload

    # Production: reads PORT from the environment
    keyword-scraper
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from keyword_scraper.api.routes import extract as extract_routes
from keyword_scraper.api.routes.extract import AVAILABLE_ENDPOINTS, error_body
from keyword_scraper.config.settings import get_settings
from keyword_scraper.core.logging_config import configure_logging, request_id_var

# ---------------------------------------------------------------------------
# Logging configuration, applied at import time so that records emitted
# during app construction are captured.  The level from settings is
# re-applied inside create_app().
# ---------------------------------------------------------------------------

configure_logging("INFO")

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application.

    Separated from the module-level ``app`` singleton so that tests can
    call ``create_app()`` with a patched settings environment.

    Returns:
        A fully configured ``FastAPI`` instance.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description="Extracts embedded keyword strings from web pages.",
        version=settings.app_version,
        redirect_slashes=False,
    )

    # ---- Middleware --------------------------------------------------------

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Log every request with its status and duration.

        Binds a unique ``request_id`` to the structlog context so that all
        log lines emitted during a request can be correlated, and returns it
        as ``X-Request-ID``.
        """
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("unhandled_exception", exc_info=exc)
            raise
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = getattr(response, "status_code", 500)
            log_fn = logger.warning if status_code >= 400 else logger.info
            log_fn(
                "request_complete",
                status_code=status_code,
                elapsed_ms=elapsed_ms,
            )

        response.headers["X-Request-ID"] = request_id
        return response

    # ---- Error handlers ----------------------------------------------------

    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Report unmatched routes (unknown path or wrong method) as 404."""
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "error": "Endpoint not found",
                    "available_endpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies get the same 400 shape as a bad URL."""
        logger.info("request_body_rejected", errors=len(exc.errors()))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Invalid request body"),
        )

    # ---- Routers -----------------------------------------------------------

    application.include_router(extract_routes.router)

    # ---- Lifecycle events -------------------------------------------------

    @application.on_event("startup")
    async def on_startup() -> None:
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            port=settings.port,
            strategy=settings.acquisition_strategy.value,
            mode=settings.extraction_mode.value,
            log_level=settings.log_level,
        )

    @application.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info("application_shutdown")

    return application


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

app = create_app()
"""The FastAPI application instance.

This is the ASGI callable passed to Uvicorn.
"""


def run() -> None:
    """Serve :data:`app` with Uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        # Keep the structlog handlers installed by configure_logging().
        log_config=None,
    )
