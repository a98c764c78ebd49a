"""Logging configuration for the ProfWords service."""

import logging
import sys
from datetime import datetime

import config

LOGGER_NAME = "profwords"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(level: int | str | None) -> int:
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        return resolved
    return level


def is_configured(name: str = LOGGER_NAME) -> bool:
    """Whether setup_logger already attached handlers to this logger."""
    return bool(logging.getLogger(name).handlers)


def setup_logger(
    name: str = LOGGER_NAME,
    log_prefix: str = "run",
    level: int | str | None = None,
    log_to_file: bool = True,
    force: bool = False,
) -> logging.Logger:
    """
    Attach console and file handlers to the package logger.

    Child loggers ("profwords.api", "profwords.pipeline", ...) propagate to it,
    so this is called once per process. A second call returns the logger
    unchanged unless force is set.

    Args:
        name: Logger name
        log_prefix: File name prefix; the file is logs/<prefix>_<timestamp>.log
        level: Level as int or name. Defaults to config.LOG_LEVEL.
        log_to_file: Also write to a timestamped file under config.LOGS_DIR
        force: Replace handlers already attached

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if logger.handlers and not force:
        return logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = _level(level)
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_to_file:
        config.LOGS_DIR.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = config.LOGS_DIR / f"{log_prefix}_{timestamp}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)
        logger.debug(f"Log file: {log_path}")

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get a logger by name.

    Args:
        name: Logger name, or a dotted child such as "profwords.api"

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_server_logger() -> logging.Logger:
    """Logger for the HTTP app; a no-op if the CLI already configured logging."""
    return setup_logger(log_prefix="server")
