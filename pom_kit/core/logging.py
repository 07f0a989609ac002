"""
Loguru sink setup shared by the CLI and test sessions.
"""
# @file purpose: Configure loguru once per process.

from __future__ import annotations

import sys

from loguru import logger

from .settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_configured = False


def configure_logging(level: str | None = None, *, force: bool = False) -> None:
    """
    Replace loguru's default handler with a stderr sink at the configured level.
    Subsequent calls are no-ops unless force=True.
    """
    global _configured

    if _configured and not force:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=(level or settings.log_level).upper(),
        colorize=True,
    )
    _configured = True
