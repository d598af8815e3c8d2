"""Logging utilities for puzzle generation and solving."""

from __future__ import annotations

import logging
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
ROOT_LOGGER_NAME = "nonogram"


def configure_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> logging.Handler:
    """Install a single timestamped handler on the root logger.

    Generation runs many rejected attempts, so per-candidate detail is kept
    at DEBUG and only attempt progress and outcomes are emitted at INFO.
    ``stream`` defaults to stderr, which keeps stdout free for the CLI's
    report and JSON output. Returns the installed handler.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``nonogram`` namespace, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    if not name or name == "__main__":
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
