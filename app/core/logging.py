"""
Logging setup for the ordering backend.
"""

import logging
import sys
from typing import Optional


def setup_logging(level: Optional[str] = None, format_string: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``app`` logger hierarchy.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string for log messages

    Returns:
        The configured ``app`` logger
    """
    log_level = level or "INFO"
    level_num = getattr(logging, log_level.upper(), logging.INFO)

    if format_string is None:
        format_string = (
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )

    logger = logging.getLogger("app")
    logger.setLevel(level_num)

    # Clear existing handlers so repeated startups don't duplicate output
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level_num)
    console_handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(console_handler)

    return logger
