"""Logging setup for the ``preview`` command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stderr handler to the root logger and set its level.

    Calling this more than once only updates the level. Unknown level names
    fall back to ``INFO``.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    resolved = logging.getLevelName(level.upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)


__all__ = ["LOG_FORMAT", "configure_logging"]
