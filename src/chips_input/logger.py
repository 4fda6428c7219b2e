"""Logging configuration for the chips input controller using loguru."""

import sys
from loguru import logger
from typing import Optional

PACKAGE_NAME = "chips_input"


def setup_logger(
    log_file: Optional[str] = None,
    log_level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "7 days",
    compression: str = "zip",
    console_output: bool = True,
) -> None:
    """
    Configure loguru sinks and enable logging for this package.

    The package is silent by default (it is embedded in a host UI), so
    applications opt in by calling this function once at startup.

    Args:
        log_file: Optional path to a log file. No file sink is added when None.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        rotation: Log rotation size
        retention: How long to keep old logs
        compression: Compression format for old logs
        console_output: Whether to output to stderr
    """
    # Remove default handler
    logger.remove()

    if console_output:
        logger.add(
            sys.stderr,
            level=log_level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            colorize=True,
            filter=_with_default_name,
        )

    if log_file is not None:
        logger.add(
            log_file,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}",
            rotation=rotation,
            retention=retention,
            compression=compression,
            encoding="utf-8",
            filter=_with_default_name,
        )

    logger.enable(PACKAGE_NAME)


def _with_default_name(record) -> bool:
    record["extra"].setdefault("name", record["name"])
    return True


def get_logger(name: Optional[str] = None):
    """
    Get a logger bound to a component name.

    Args:
        name: Optional name for the logger

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


# Library default: stay quiet until the host application calls setup_logger()
logger.disable(PACKAGE_NAME)
