"""
Logging utilities for the seed recommender backend.

Provides standardized logger configuration.

SECURITY RULES:
- NEVER log the Gemini API key or any other secret
- NEVER log full model output (log a preview of at most 500 characters)
- NEVER return upstream error text to the caller; log it here instead

Acceptable logging:
- High-level events (e.g., "Recommendation requested", "Gemini attempt 2 failed")
- Non-sensitive metadata (e.g., "domain=songs seeds=3 count=10")
- Rate limit decisions keyed by client address
"""

import logging
from typing import Optional

from recommender.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from recommender.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler only when nothing upstream will print the record
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
