"""Logging configuration.

Sets up console logging for applications hosting the object store client.
"""

import logging

from services.settings_helpers import get_setting

PACKAGE_LOGGER = "storage"


def setup_console_logging() -> logging.Logger:
    """Set up console logging.

    The level comes from S3_SERVICE_LOG_LEVEL (default: WARNING).

    Returns:
        The storage package logger.
    """
    console_level = get_setting("S3_SERVICE_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, console_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return logging.getLogger(PACKAGE_LOGGER)
