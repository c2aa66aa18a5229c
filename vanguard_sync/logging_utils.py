"""Logging helpers."""
from __future__ import annotations

import logging

_LOGGING_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger, once per process."""
    global _LOGGING_CONFIGURED

    root = logging.getLogger()
    root.setLevel(level)
    if _LOGGING_CONFIGURED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    _LOGGING_CONFIGURED = True


__all__ = ["configure_logging"]
