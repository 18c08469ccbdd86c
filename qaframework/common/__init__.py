"""
================================================================================
QA Framework Common Utilities
================================================================================

This module provides shared configuration access and logging setup for the
page-object framework and its test suites.

Exports:
    - TestProperties: YAML/env backed test configuration
    - init_logger: Function to initialize loguru logger with standard settings
    - ensure_directory: Create an output directory if needed

Usage:
    from qaframework.common import TestProperties, init_logger

    init_logger()
    lab_url = TestProperties.instance().lab_url

================================================================================
"""

import os
import sys
from typing import Optional

from loguru import logger

from .test_properties import ConfigurationError, TestProperties


# ============================================================
# Logging Setup
# ============================================================

DEFAULT_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    properties: Optional[TestProperties] = None,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.
        properties: Configuration source. Defaults to the shared TestProperties.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/ui.log")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    properties = properties or TestProperties.instance()

    # Remove default handler
    logger.remove()

    level = level or properties.get("logging.level", "INFO")
    format_string = format_string or properties.get("logging.format", DEFAULT_LOG_FORMAT)

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or properties.get("logging.file")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=properties.get("logging.rotation", "10 MB"),
            retention=properties.get("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


__all__ = [
    "ConfigurationError",
    "TestProperties",
    "init_logger",
    "ensure_directory",
]
