"""
Logging configuration for the listing indexer.

Background indexing runs after the caller has already received its answer,
so these logs are the only place where per-listing indexing failures are
visible. Every module logs through get_logger(__name__), which places it
under the "listing_indexer" logger; that package logger can be made more
verbose than the rest of the process.

Usage:
    from listing_indexer.config.logging_config import setup_logging, get_logger

    # At startup; show our debug messages, keep libraries at INFO
    setup_logging(package_level=logging.DEBUG)

    # In each module
    logger = get_logger(__name__)
    logger.info("Extracted 12 listings")

Author: Leonardo Pacciani-Mori
License: MIT
"""

import logging
import sys
from typing import Optional


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================

# Timestamp, logger name, level, message
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_LEVEL = logging.INFO

# Parent of every module logger in this package
PACKAGE_LOGGER_NAME = "listing_indexer"

# Libraries that are noisy below WARNING
THIRD_PARTY_LOGGERS = (
    "urllib3",
    "aiohttp",
    "aiohttp.client",
    "aiohttp.access",
    "asyncio",
    "pymongo",
    # Markup-resembles-URL warnings for plain text pages
    "bs4",
)


# =============================================================================
# FUNCTION DEFINITIONS
# =============================================================================

def setup_logging(
    level: int = DEFAULT_LOG_LEVEL,
    package_level: Optional[int] = None,
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    suppress_third_party: bool = True
) -> None:
    """
    Configure logging for a scraping run.

    Log records go to stdout. Call once at startup, before the first
    page is fetched.

    Args:
        level: Root logging level. Defaults to INFO.
        package_level: Optional separate level for the listing_indexer
            loggers, e.g. DEBUG to see per-card extraction details without
            turning on debug output for every library.
        log_format: The format string for log messages.
        date_format: The strftime format string for timestamps.
        suppress_third_party: If True, the loggers in THIRD_PARTY_LOGGERS
            only report warnings and errors.

    Example:
        >>> setup_logging(package_level=logging.DEBUG)
        >>> get_logger("listing_indexer.scraping").debug("now visible")
    """
    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    if package_level is not None:
        set_log_level(package_level, PACKAGE_LOGGER_NAME)

    if suppress_third_party:
        for logger_name in THIRD_PARTY_LOGGERS:
            set_log_level(logging.WARNING, logger_name)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get the logger for a module, typically called with __name__.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Indexed %d listings", 12)
        2026-01-15 10:30:45 - listing_indexer.indexing.dispatcher - INFO - Indexed 12 listings
    """
    return logging.getLogger(name)


def set_log_level(level: int, logger_name: Optional[str] = None) -> None:
    """
    Change the level of one logger, or of the root logger if no name is given.

    Example:
        >>> set_log_level(logging.DEBUG, "listing_indexer.scraping")
    """
    logging.getLogger(logger_name).setLevel(level)
