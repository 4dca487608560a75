"""
Structured JSON logging: timestamp, wallet, event_type.

structlog with ISO timestamps, log level, and consistent keys for
aggregation. All modules use get_logger() and log an event name first,
followed by keyword context (wallet, counts, score).

Uses only Python stdlib logging and structlog; no other degenscore imports
to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

WALLET_LOG_PREFIX = 16


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """
    Configure structlog: JSON or console renderer, level filter, event_type.

    Runs once at import from LOG_LEVEL / LOG_FORMAT. The CLI calls it again
    with level="DEBUG" for --verbose; loggers are not cached, so module-level
    loggers pick up the new level.
    """
    level_value = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if (fmt or LOG_FORMAT).strip().lower() == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    # stderr keeps stdout free for CLI JSON output
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("wallet_analyzed", wallet=short_wallet(addr), degen_score=72.5)
    """
    return structlog.get_logger(name, logger_name=name)


def short_wallet(wallet: str | None) -> str:
    """Shorten an address for logs: first 16 chars plus '...'."""
    wallet = wallet or ""
    if len(wallet) > WALLET_LOG_PREFIX:
        return wallet[:WALLET_LOG_PREFIX] + "..."
    return wallet


def bind_wallet(wallet: str) -> structlog.BoundLogger:
    """Return a logger with wallet bound to all subsequent log calls."""
    return get_logger("degenscore").bind(wallet=short_wallet(wallet))
