"""Centralized logging for the Pick & Go client.

Four verbosity levels:
- QUIET (0): Warnings + errors
- NORMAL (1): Info + warnings + errors
- VERBOSE (2): Detailed info
- DEBUG (3): Everything including request/response detail

Usage:
    from pickandgo.core.logging import get_logger, set_verbosity

    logger = get_logger(__name__)
    set_verbosity(2)  # VERBOSE

    logger.verbose("Uploading front photo")
    logger.warning("Agreement service unavailable, using default template")
    logger.error("Error uploading registration document: Network error")

Every emitted record is also published to the LogBus, regardless of whether
the console is attached.
"""

from __future__ import annotations

import sys
from enum import IntEnum

from pickandgo.core.log_bus import LogRecord, get_log_bus


class VerbosityLevel(IntEnum):
    """Verbosity levels."""

    QUIET = 0  # Warnings + errors
    NORMAL = 1  # Info + warnings + errors
    VERBOSE = 2  # Detailed info
    DEBUG = 3  # Everything


_LEVEL_NAMES: dict[str, VerbosityLevel] = {
    "quiet": VerbosityLevel.QUIET,
    "normal": VerbosityLevel.NORMAL,
    "verbose": VerbosityLevel.VERBOSE,
    "debug": VerbosityLevel.DEBUG,
}

_VERBOSITY: VerbosityLevel = VerbosityLevel.NORMAL

_USE_COLORS: bool = True


def set_verbosity(level: int | str | VerbosityLevel) -> None:
    """Set global verbosity level.

    Args:
        level: 0-3, a VerbosityLevel, or one of quiet/normal/verbose/debug
    """
    global _VERBOSITY

    if isinstance(level, str):
        level = _LEVEL_NAMES[level.strip().lower()]
    elif isinstance(level, int):
        level = VerbosityLevel(level)

    _VERBOSITY = level


def get_verbosity() -> VerbosityLevel:
    """Get current verbosity level."""
    return _VERBOSITY


def set_colors(enabled: bool) -> None:
    """Enable or disable colored console output."""
    global _USE_COLORS
    _USE_COLORS = enabled


class PickAndGoLogger:
    """Logger with verbosity support."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "VERBOSE": "\033[34m",  # Blue
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "RESET": "\033[0m",
    }

    def __init__(self, name: str):
        self.name = name

    def _format_message(self, level: str, message: str) -> str:
        if _USE_COLORS and sys.stdout.isatty():
            color = self.COLORS.get(level, "")
            reset = self.COLORS["RESET"]
            return f"{color}[{level.lower()}]{reset} {message}"
        return f"[{level.lower()}] {message}"

    def _log(self, level: VerbosityLevel, level_name: str, message: str) -> None:
        """Publish to the LogBus and print if the verbosity allows it."""
        if level > _VERBOSITY:
            return

        get_log_bus().publish(
            LogRecord(level_name=level_name, message=message, logger_name=self.name)
        )

        formatted = self._format_message(level_name, message)
        stream = sys.stderr if level_name in ("WARNING", "ERROR") else sys.stdout
        print(formatted, file=stream)

    def debug(self, message: str) -> None:
        self._log(VerbosityLevel.DEBUG, "DEBUG", message)

    def verbose(self, message: str) -> None:
        self._log(VerbosityLevel.VERBOSE, "VERBOSE", message)

    def info(self, message: str) -> None:
        self._log(VerbosityLevel.NORMAL, "INFO", message)

    def warning(self, message: str) -> None:
        self._log(VerbosityLevel.QUIET, "WARNING", message)

    def error(self, message: str) -> None:
        """Log error message (always shown)."""
        self._log(VerbosityLevel.QUIET, "ERROR", message)


_LOGGERS: dict[str, PickAndGoLogger] = {}


def get_logger(name: str = __name__) -> PickAndGoLogger:
    """Get logger instance for module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    if name not in _LOGGERS:
        _LOGGERS[name] = PickAndGoLogger(name)

    return _LOGGERS[name]
