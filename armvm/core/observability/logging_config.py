"""
Logging configuration for the armvm CLI.

``setup_logging`` runs once, from ``main.cli``. Modules log through
``logging.getLogger(__name__)``; anything the user is meant to read
(step banners, results) goes through click instead.

Level precedence:
    --debug  >  --verbose  >  --quiet  >  ARMVM_LOG_LEVEL  >  WARNING

A second, file-only handler is added when ARMVM_LOG_FILE is set;
ARMVM_LOG_FILE_LEVEL gives it its own level.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "ARMVM_LOG_LEVEL"
ENV_FILE = "ARMVM_LOG_FILE"
ENV_FILE_LEVEL = "ARMVM_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

_FMT_CONSOLE = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Libraries that get chatty below WARNING
_NOISY_LOGGERS = ("asyncio", "urllib3")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> str:
    """Pick the console level from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a log file that always gets full detail.
        log_file_level: Level for the file handler; defaults to *level*.
        quiet_third_party: Hold third-party loggers at WARNING unless
            the console is at DEBUG.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_SHORT)
    elif console_level <= logging.INFO:
        formatter = logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_SHORT)
    else:
        formatter = logging.Formatter(_FMT_CONSOLE)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_FILE))
        root.addHandler(file_handler)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
