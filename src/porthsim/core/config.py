"""
Logging configuration for porthsim.

The PORTHSIM_LOG environment variable selects how chatty the pipeline is.
Overflow and non-binary-condition warnings from the simulator are emitted
at WARNING, so they show at the default level.

Level values:
    - trace, debug: every line read and token lexed
    - info (default): one line per parsed program
    - warn, warning: simulator warnings only
    - error: diagnostics only
    - off: nothing

Usage:
    from porthsim.core.config import configure_logging

    configure_logging()          # honour PORTHSIM_LOG
    configure_logging("debug")   # explicit override
"""

from __future__ import annotations

import logging
import os
from enum import StrEnum

logger = logging.getLogger(__name__)


class LogLevel(StrEnum):
    """Accepted PORTHSIM_LOG values."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    OFF = "off"


_DEFAULT_LEVEL = LogLevel.INFO

PORTHSIM_LOG_VAR = "PORTHSIM_LOG"

PACKAGE_LOGGER = "porthsim"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"

_LOGGING_LEVELS: dict[LogLevel, int] = {
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.OFF: logging.CRITICAL + 1,
}


def parse_log_level(value: str | None) -> LogLevel:
    """Map a user-supplied level name onto a LogLevel.

    Empty or missing values give the default. Unknown values also give the
    default, with a warning.

    Examples:
        >>> parse_log_level("WARN")
        <LogLevel.WARNING: 'warning'>
    """
    text = (value or "").lower().strip()

    if text == "":
        return _DEFAULT_LEVEL
    if text == "warn":
        return LogLevel.WARNING
    try:
        return LogLevel(text)
    except ValueError:
        logger.warning(
            "Unknown log level '%s'. Valid values: %s. Defaulting to %s.",
            text,
            ", ".join(level.value for level in LogLevel),
            _DEFAULT_LEVEL.value,
        )
        return _DEFAULT_LEVEL


def get_log_level() -> LogLevel:
    """Get the configured level from PORTHSIM_LOG."""
    return parse_log_level(os.environ.get(PORTHSIM_LOG_VAR))


def configure_logging(level: str | None = None) -> LogLevel:
    """Install a stderr handler (if none exists) and set the porthsim log level.

    Args:
        level: Explicit level name; falls back to PORTHSIM_LOG when None.

    Returns:
        The level that was applied.
    """
    resolved = parse_log_level(level) if level is not None else get_log_level()
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger(PACKAGE_LOGGER).setLevel(_LOGGING_LEVELS[resolved])
    return resolved
