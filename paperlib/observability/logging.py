"""Logger factory shared by every paperlib module."""

from __future__ import annotations

import logging
import os
from typing import Final

_HANDLER_ATTACHED: bool = False
_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def _resolve_level(override: str | None = None) -> int:
    level_name = (override or os.getenv("PAPERLIB_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging(level: str | None = None) -> None:
    """Attach the stream handler to the root logger once and set its level."""
    global _HANDLER_ATTACHED

    root = logging.getLogger()
    if not _HANDLER_ATTACHED:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        root.addHandler(handler)
        _HANDLER_ATTACHED = True
    root.setLevel(_resolve_level(level))


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; the root handler is configured on first use."""
    configure_logging()
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level())
    return logger
