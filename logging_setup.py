"""Logging configuration shared by the whole machine."""

from __future__ import annotations

import sys

from loguru import logger

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)


def setup_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=_FMT,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )


__all__ = ["logger", "setup_logging"]
