"""Centralized logging configuration for the bookmark organizer."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_file_prefix: str = "organizer",
    log_dir: Path = Path("./logs"),
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure logging for the application.

    Console output goes to stdout, and a rotating file under ``log_dir`` keeps
    at most 4 previous files. Does nothing when the root logger already has
    handlers, so the CLI and the API can both call it safely.

    Args:
        log_file_prefix: Prefix for the log file name (default: "organizer")
        log_dir: Directory for the log file
        level: Level for the root logger and both handlers

    Returns:
        Logger instance for this module
    """
    root_logger = logging.getLogger()

    if root_logger.handlers:
        return logging.getLogger(__name__)

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{log_file_prefix}.log"

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # 5MB per file, 4 backups
    file_handler = RotatingFileHandler(
        log_file,
        mode="a",
        maxBytes=5 * 1024 * 1024,
        backupCount=4,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    return logging.getLogger(__name__)
