"""Logging configuration for the verification engine."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for the ``ib_verify`` package.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO)
        log_file: Optional path to a rotating log file
        log_format: Optional custom log format string

    Returns:
        The configured package logger
    """
    if log_format is None:
        log_format = DEFAULT_LOG_FORMAT

    logger = logging.getLogger("ib_verify")
    logger.setLevel(level)

    # Repeated calls (one per test worker, one per CLI run) must not stack handlers
    logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
            )
        )
        logger.addHandler(file_handler)

    return logger


def resolve_level(level_name: str, verbose: bool = False) -> int:
    """
    Map a configured level name to a logging level.

    ``verbose`` forces DEBUG; unknown names fall back to INFO.
    """
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else logging.INFO
