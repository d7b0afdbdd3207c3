from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from goalplanner.config import Settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def setup_logging(config: Settings | None = None) -> None:
    """Route loguru to stdout and to the rotating planner log file."""
    if config is None:
        from goalplanner.config import settings as config

    log_file = Path(config.log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(sys.stdout, level=config.log_level, format=LOG_FORMAT)
    logger.add(
        log_file,
        level=config.log_level,
        format=LOG_FORMAT,
        rotation=config.log_rotation,
        retention=config.log_retention,
        encoding="utf-8",
    )
