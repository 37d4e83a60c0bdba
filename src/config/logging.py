"""Logging configuration for the command-line tool."""

from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure Python logging for the process.

    Build progress is reported through log records; the CLI has no other output channel. Calling
    this again (e.g. several `main()` runs in one process) replaces the previous configuration.
    """

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format=_DEBUG_FORMAT if log_level == "DEBUG" else _FORMAT,
        force=True,
    )
