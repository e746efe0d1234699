"""
Logging configuration — console and optional file output for a run.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` sits under the ``shellstrap``
logger and inherits this config.

Levels are resolved in precedence order:
    --debug / --verbose / --quiet  >  SHELLSTRAP_LOG_LEVEL  >  WARNING

Optional file output via SHELLSTRAP_LOG_FILE / SHELLSTRAP_LOG_FILE_LEVEL;
the file always gets the full diagnostic format.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

ROOT_LOGGER = "shellstrap"

# ── Format strings ──────────────────────────────────────────────

# Default: one tagged line per warning or error
_FMT_CONSOLE = "[%(levelname)s] %(message)s"

# --verbose: per-step progress
_FMT_PROGRESS = "%(asctime)s %(message)s"
_DATEFMT_PROGRESS = "%H:%M:%S"

# --debug and log files: logger name and line number
_FMT_DETAIL = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DETAIL = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    if env and env.get("SHELLSTRAP_LOG_LEVEL"):
        return env["SHELLSTRAP_LOG_LEVEL"]
    return "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Configure the ``shellstrap`` logger hierarchy.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file (appended to).
        log_file_level: Level for the log file. Defaults to DEBUG so the
            file can explain a failed run even when the console was quiet.

    Returns:
        The configured ``shellstrap`` logger.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DETAIL, _DATEFMT_DETAIL
    elif console_level <= logging.INFO:
        fmt, datefmt = _FMT_PROGRESS, _DATEFMT_PROGRESS
    else:
        fmt, datefmt = _FMT_CONSOLE, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(console)
    logger.propagate = False

    effective_level = console_level
    if log_file:
        file_level = _parse_level(log_file_level, default=logging.DEBUG)
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_DETAIL))
        logger.addHandler(fh)

    logger.setLevel(effective_level)
    logging.raiseExceptions = False
    return logger


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Convert a level name to its numeric constant; unknown names get ``default``."""
    if not level:
        return default
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        return default
    return numeric
