"""Structured logging setup for the photomesh service."""

from __future__ import annotations

import logging
import sys

# Chatty at DEBUG/INFO and irrelevant to session diagnostics.
_QUIET_LOGGERS = ("multipart", "python_multipart", "httpx", "uvicorn.access")


def setup_logging(level: str = "INFO") -> None:
    """Configure structured logging with consistent format.

    Session log lines carry the session id, so one request can be
    followed across steps with grep.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
