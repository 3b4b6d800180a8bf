# ABOUTME: Structured logging with correlation IDs for the VSTS REST client
# ABOUTME: Configures structlog processors and console or JSON rendering

"""
Structured logging with correlation IDs.

=============================================================================
WHAT IS THIS FILE?
=============================================================================

The library logs through structlog. Each module does:

    logger = structlog.get_logger(__name__)
    logger.debug("Making VSTS API request", method="GET", resource="projects")

Applications call ``configure_logging`` once at startup to choose the level
and output format. Without it, structlog's defaults apply.

=============================================================================
CORRELATION IDs
=============================================================================

A single high-level operation such as ``add_project`` issues several
requests: a process-template lookup, the create call, then a series of
existence polls. A correlation ID ties those log lines together:

    {"correlation_id": "a1b2c3d4", "event": "Making VSTS API request", "resource": "process/processes"}
    {"correlation_id": "a1b2c3d4", "event": "Making VSTS API request", "resource": "projects"}
    {"correlation_id": "a1b2c3d4", "event": "Polled resource existence", "observed": false}

The ID lives in a ContextVar, so independent threads and tasks each see
their own value.
"""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping


correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """
    Get current correlation ID or generate new one.

    Returns:
        8-character correlation ID string.
    """
    cid = correlation_id.get()
    if not cid:
        cid = str(uuid.uuid4())[:8]
        correlation_id.set(cid)
    return cid


def set_correlation_id(cid: str) -> None:
    """
    Set correlation ID for current context.

    Passing "" makes the next ``get_correlation_id`` call generate a new one.
    """
    correlation_id.set(cid)


def add_correlation_id(
    logger: structlog.types.WrappedLogger,  # noqa: ARG001 - Required by structlog Processor API
    method_name: str,  # noqa: ARG001 - Required by structlog Processor API
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """structlog processor adding the correlation ID to every event."""
    event_dict["correlation_id"] = get_correlation_id()
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """
    Configure structured logging.

    PROCESSOR PIPELINE:
    -------------------
    1. merge_contextvars: Values bound via structlog.contextvars
    2. add_log_level: "level" field
    3. TimeStamper: ISO 8601 "timestamp" field
    4. add_correlation_id: "correlation_id" field
    5. Renderer: JSON lines or colored console text

    Args:
        level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL".
               Request-level detail is logged at DEBUG.
        json_output: True for JSON lines (CI, log shipping),
                     False for console output (interactive use).
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
