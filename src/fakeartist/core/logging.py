"""Structured logging configuration for fakeartist.

Provides structlog setup and per-session context binding.
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(*, debug: bool = False, json_logs: bool = False) -> None:
    """Configure structlog for session clients.

    Log lines go to stderr so that command output on stdout stays clean.

    Args:
        debug: Enable debug level logging.
        json_logs: Emit one JSON object per line instead of console output.
    """
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.extend(
            [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def bind_session_context(session_code: str, participant_id: str | None = None) -> None:
    """Bind the session to the structlog context.

    Every log line emitted while the session is active carries the session
    code and, once the join handshake completes, the local participant id.

    Args:
        session_code: Public short code of the session.
        participant_id: Local participant id, if known.
    """
    structlog.contextvars.bind_contextvars(session_code=session_code)
    if participant_id is not None:
        structlog.contextvars.bind_contextvars(participant_id=participant_id)


def clear_session_context() -> None:
    """Remove session keys from the structlog context."""
    structlog.contextvars.unbind_contextvars("session_code", "participant_id")
