"""
structlog configuration for the API, the CLI and the engine.

Every record is one JSON line carrying the logger name, level, ISO timestamp
and whatever request context is bound (operation, target, session_id).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog

_PLAIN = logging.Formatter("%(message)s")


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.EventRenamer("message"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def _attach(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(_PLAIN)
    root.addHandler(handler)


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_stdout: bool = True,
) -> None:
    """
    Route structlog through the root logger to stdout and/or `log_file`.

    Safe to call again (handlers are replaced). With both outputs disabled,
    stdout is used anyway.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if log_stdout:
        _attach(root, logging.StreamHandler(sys.stdout), level)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        _attach(root, logging.FileHandler(log_file, encoding="utf-8"), level)
    if not root.handlers:
        _attach(root, logging.StreamHandler(sys.stdout), level)

    structlog.configure(
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Module logger; configures defaults on first use if nothing has yet."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_request_context(
    *,
    operation: Optional[str] = None,
    target: Optional[str] = None,
    session_id: Optional[str] = None,
    **extra: Any,
) -> Mapping[str, Any]:
    """
    Bind per-request fields into the current task's logging context.

    `target` is the page number, content id, episode id or search term.
    None values are skipped, so later calls can add `session_id` alone.
    """
    context = {"operation": operation, "target": target, "session_id": session_id, **extra}
    bound = {k: v for k, v in context.items() if v is not None}
    structlog.contextvars.bind_contextvars(**bound)
    return bound
