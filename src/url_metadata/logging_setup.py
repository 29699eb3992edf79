"""Logging configuration for the command-line entry point."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _normalise_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = level.strip().upper()
        if value.isdigit():
            return int(value)
        if value in logging._nameToLevel:  # type: ignore[attr-defined]
            return logging._nameToLevel[value]
    return logging.WARNING


def configure_logging(level: str | int | None = None) -> int:
    """
    Route log records to stderr so stdout stays clean for the JSON output.

    Existing root handlers are replaced. Returns the effective level.
    """
    log_level = _normalise_level(level)

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    return log_level
