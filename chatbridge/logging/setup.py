"""Logging configuration for the bridge."""

import logging
import sys

LOGGER_NAME = "chatbridge"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up logging with proper handlers and formatters."""
    resolved_level = logging.getLevelName(str(level).upper())
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved_level)
    
    # Clear any existing handlers
    logger.handlers.clear()
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(console_handler)
    
    # Propagate to the root logger so test capture and uvicorn see records
    logger.propagate = True
    
    return logger
