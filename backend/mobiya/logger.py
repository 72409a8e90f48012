"""
Logger
======
Centralized logging configuration for the API server and the importer CLI
"""

import logging
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

CONSOLE_FORMAT = '%(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)-8s - %(message)s'


def setup_logger(
    name: str = "mobiya",
    log_dir: Optional[Union[str, Path]] = None,
    level: Union[int, str] = logging.INFO,
    file_level: int = logging.DEBUG
) -> logging.Logger:
    """
    Setup a logger with a console handler and an optional file handler

    Args:
        name: Logger name; child loggers (`mobiya.services.*`) inherit it
        log_dir: Directory for a timestamped log file; no file when empty
        level: Level for console output
        file_level: Level for file output

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers (avoid duplicates)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{name}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)
        logger.info(f"Log file: {log_file}")

    return logger


def truncate(text: str, limit: int = 50) -> str:
    """Shorten user text for log lines"""
    if text is None:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."
