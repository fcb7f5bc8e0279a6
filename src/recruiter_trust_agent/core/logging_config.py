"""Logging setup shared by the CLI and library entry points."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
import time

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "recruiter_trust_agent"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    root = logging.getLogger("recruiter_trust_agent")
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    if not any(getattr(item, "name", "") == _HANDLER_NAME for item in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root


def elapsed_ms(started: float) -> int:
    return max(0, int(round((time.perf_counter() - started) * 1000)))


@contextmanager
def log_duration(logger: logging.Logger, label: str) -> Iterator[None]:
    """Log how long the wrapped block took at DEBUG level."""
    started = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("%s finished in %d ms", label, elapsed_ms(started))
