"""Logging setup shared by the API process and tests."""
from __future__ import annotations

import logging

from aplus_voice.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging() -> None:
    """
    Configure the root logger once per process

    ``force=True`` replaces uvicorn's default handlers so every module's
    ``[Tag]`` lines end up in the same stream.
    """
    settings = get_settings()
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    # httpx logs every request at INFO; the store client logs its own summary
    logging.getLogger("httpx").setLevel(logging.WARNING)
