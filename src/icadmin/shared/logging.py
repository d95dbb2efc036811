"""Logging setup for icadmin.

Operator-facing progress goes through click output. structlog carries the
event log of each workflow step: human-readable on stderr, or JSON lines when
written to a file.
"""

import logging
import sys
from pathlib import Path

import structlog

_VERBOSITY_LEVELS = ("warning", "info", "debug")

# Event keys whose values are never rendered
SECRET_KEYS = frozenset({"password", "root_password", "admin_password", "session_password"})
REDACTED = "***"


def level_for_verbosity(verbose: int, default: str = "warning") -> str:
    """Map a repeated -v count to a level name.

    Args:
        verbose: Number of -v flags given
        default: Level used when no flag is given

    Returns:
        Level name (warning, info or debug)
    """
    if verbose <= 0:
        return default
    return _VERBOSITY_LEVELS[min(verbose, len(_VERBOSITY_LEVELS) - 1)]


def redact_secrets(logger, method_name, event_dict):
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json_output: bool = False,
) -> None:
    """Route structlog events through standard logging.

    Runs at the start of every CLI invocation and replaces any handlers a
    previous call installed.

    Args:
        level: Log level (debug, info, warning, error, critical)
        log_file: Append events to this file instead of stderr
        json_output: Render events as JSON lines
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handler: logging.Handler = (
        logging.FileHandler(str(log_file)) if log_file else logging.StreamHandler(sys.stderr)
    )
    handler.setLevel(log_level)
    logging.basicConfig(level=log_level, handlers=[handler], format="%(message)s", force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)
