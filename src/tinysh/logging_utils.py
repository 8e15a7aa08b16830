"""Runtime logging helpers."""

from __future__ import annotations

import os
import sys
from typing import Literal

from loguru import logger

LogProfile = Literal["default", "shell"]

_PROFILE_FORMATS: dict[LogProfile, str] = {
    "shell": "tinysh: {message}",
    "default": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | pid={process} | {name}:{function}:{line} | {message}",
}
_CONFIGURED: tuple[LogProfile, str] | None = None


def configure_logging(*, profile: LogProfile = "default", level: str | None = None) -> None:
    """Configure process-level logging once.

    Logs always go to stderr. The core never rebinds stderr, so messages
    from forked children reach the terminal even while stdout is redirected.
    """
    global _CONFIGURED
    level = (level or os.getenv("TINYSH_LOG_LEVEL", "WARNING")).upper()
    if (profile, level) == _CONFIGURED:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=_PROFILE_FORMATS[profile],
        colorize=False,
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED = (profile, level)
