"""
Centralized logging configuration.

Every module obtains its logger through ``get_logger(__name__)`` so output
format and handlers stay consistent across the parser, the upload handler
and the front ends.
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str, log_file: str = None, level: int = logging.INFO) -> logging.Logger:
    """
    Get or create a configured logger instance.

    Args:
        name: Logger name, typically __name__ from calling module
        log_file: Optional path to log file. If None, only logs to console
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance

    Example:
        >>> from src.utils.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Parsing upload")
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_global_log_level(level: int):
    """
    Set logging level for the root logger and every logger created by
    ``get_logger`` in the ``src`` package.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO)
    """
    logging.root.setLevel(level)
    for handler in logging.root.handlers:
        handler.setLevel(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith("src.") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
