"""Process-wide structlog setup.

Modules only ever call structlog.get_logger(__name__); configuring the
output is left to the host process, which calls configure_logging() once
at startup. Opening a repository never configures logging.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_configured = False


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    force: bool = False,
) -> bool:
    """Configure structlog for the whole process.

    Args:
        level: Minimum level name ("DEBUG", "INFO", ...)
        json_output: Render JSON lines instead of console output
        force: Reconfigure even if already configured

    Returns:
        True if this call configured logging, False if it was a no-op.

    Raises:
        ValueError: If level is not a known level name
    """
    global _configured

    if _configured and not force:
        return False

    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        raise ValueError(f"Unknown log level: {level}")

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )

    _configured = True
    return True


def is_configured() -> bool:
    return _configured


def reset_logging() -> None:
    """Restore structlog defaults (for tests)."""
    global _configured
    structlog.reset_defaults()
    _configured = False
