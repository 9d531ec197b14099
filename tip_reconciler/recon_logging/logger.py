"""
Structured logging for reconciliation runs.

Every event carries timestamp, level, event_type and the emitting module;
per-transaction events also carry signature and backend (see bind_signature).

Two renderers:
  LOG_FORMAT=json     one JSON object per line (default, for piping into jq)
  LOG_FORMAT=console  aligned key=value lines for watching a run locally

Logs go to stderr; stdout belongs to the CLI summaries. No tip_reconciler
imports here, every other module imports this one.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog

LOG_FORMATS = ("json", "console")


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict:
        event_dict.setdefault("event_type", event_dict.pop("event"))
    return event_dict


def _renderers(fmt: str, stream: TextIO) -> list[Any]:
    # console keeps structlog's "event" key, which ConsoleRenderer uses as the headline
    if fmt == "console":
        return [structlog.dev.ConsoleRenderer(colors=stream.isatty())]
    return [_rename_event, structlog.processors.JSONRenderer(sort_keys=True)]


def configure_logging(
    level: str | None = None,
    fmt: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    (Re)configure structlog. Arguments default to LOG_LEVEL, LOG_FORMAT and
    stderr. Loggers from get_logger() pick the change up on their next call.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).strip().upper()
    fmt = (fmt or os.getenv("LOG_FORMAT", "json")).strip().lower()
    if fmt not in LOG_FORMATS:
        fmt = "json"
    stream = stream or sys.stderr
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _add_timestamp,
            *_renderers(fmt, stream),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger; the module name lands in the "logger" field.

        logger = get_logger(__name__)
        logger.info("fetch_not_found", signature=sig, backend="helius")
    """
    return structlog.get_logger(name, logger=name)


def bind_signature(signature: str, backend: str | None = None) -> structlog.BoundLogger:
    """Logger for one transaction: signature (and backend, if known) on every event."""
    fields: dict[str, Any] = {"signature": signature}
    if backend is not None:
        fields["backend"] = backend
    return get_logger("tip_reconciler.transaction").bind(**fields)
