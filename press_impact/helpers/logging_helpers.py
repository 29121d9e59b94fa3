"""Logging helpers for press_impact."""

import sys
from pathlib import Path

from loguru import logger

from ..config import settings

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level:^7} | {file.name}:{line} | {message}"


def configure_logger(
    source: str, level: str | None = None, log_dir: str | None = None
) -> Path:
    """Configure Loguru logging and return the file sink path."""
    # Clear any previously added handlers
    logger.remove()

    logger.add(sink=sys.stderr, level=level or settings.log_level, format=_FORMAT)

    # File handler: DEBUG+, rotated daily, keep 7 days, zipped
    logs_dir = Path(log_dir or settings.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    log_path = logs_dir / f"{source}_{'{time:YYYYMMDD}'}.log"

    logger.add(
        sink=str(log_path),
        level="DEBUG",
        format=_FORMAT,
        rotation="00:00",
        retention="7 days",
        compression="zip",
    )

    logger.info(f"Logger configured for source '{source}' (file sink at '{log_path}')")
    return log_path
