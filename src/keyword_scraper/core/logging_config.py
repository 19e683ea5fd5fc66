"""Logging setup for the keyword scraper service.

Scraper modules log through the stdlib (``logging.getLogger(__name__)``,
``%``-style messages); the API layer uses structlog events with keyword
fields.  :func:`configure_logging` sends both through one structlog
processor chain so every line on stdout has the same shape: a JSON object
in production, a coloured console line at ``DEBUG``.

Each record carries ``timestamp``, ``level``, ``logger`` and ``event``; lines
written while a request is in flight also carry its ``request_id``.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

#: Set by the request middleware; copied into records that lack a bound
#: ``request_id`` (stdlib records from the scraper modules).
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

#: Libraries whose INFO output would drown per-request lines outside DEBUG.
_CHATTY_LOGGERS: tuple[str, ...] = ("uvicorn.access", "httpx", "httpcore", "asyncio")


def _add_request_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    request_id = request_id_var.get()
    if request_id is not None:
        event_dict.setdefault("request_id", request_id)
    return event_dict


def _pre_chain() -> list[Processor]:
    """Processors applied to structlog and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        _add_request_id,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _stdout_handler(renderer: Processor) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(log_level: str = "INFO") -> None:
    """Install the stdout handler and configure structlog.

    Replaces the root handlers on every call, so the app factory can re-apply
    the configured level after the import-time call in ``api/main.py``.

    Args:
        log_level: Level name, case-insensitive.  Unknown names fall back to
            ``INFO``.  ``DEBUG`` also switches to console rendering and keeps
            third-party loggers at their own levels.
    """
    level_name = log_level.upper()
    debug = level_name == "DEBUG"
    renderer: Processor = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stdout_handler(renderer))
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if not debug:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
