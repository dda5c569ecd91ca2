"""Logging via loguru. The package logger stays disabled until the CLI enables it."""

from __future__ import annotations

import sys

from loguru import logger


PACKAGE = "border_days"


def get_logger():
    return logger.bind(name=PACKAGE)


def configure_logging(level: str = "WARNING") -> None:
    """Install a single stderr sink at `level` and enable package logs."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}",
    )
    logger.enable(PACKAGE)
