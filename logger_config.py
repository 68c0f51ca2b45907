"""
Logging configuration for the AWIS client.

Every module logs through a named logger that writes to stdout, so request
ids and response statuses show up on the console (or in CloudWatch Logs when
running under Lambda).
"""
import logging
import os
import sys

from config import is_truthy


def is_verbose() -> bool:
    """Return True when AWIS_VERBOSE is set to a truthy value."""
    return is_truthy(os.environ.get('AWIS_VERBOSE', ''))


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (defaults to this module's name if not provided)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or __name__)

    if logger.handlers:
        return logger

    if is_verbose():
        logger.setLevel(logging.DEBUG)
    else:
        log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
        logger.setLevel(getattr(logging, log_level, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(handler)

    # Prevent duplicate lines through the root logger
    logger.propagate = False

    return logger
