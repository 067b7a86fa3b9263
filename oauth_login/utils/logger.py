"""
Logging for the web server and the Lambda handlers

Every module logs through ``setup_logger(__name__)``. Records go to stdout,
which uvicorn and CloudWatch both collect.
"""
import logging
import sys
from typing import Optional

from .config import get_config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def resolve_log_level() -> int:
    """
    Level from LOG_LEVEL when it names a standard level, else DEBUG or INFO from the DEBUG flag
    """
    config = get_config()
    if config.LOG_LEVEL:
        level = logging.getLevelName(config.LOG_LEVEL.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if config.DEBUG else logging.INFO


def setup_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with a single stdout handler

    Args:
        name: Logger name, normally the calling module's __name__

    Returns:
        logging.Logger: Logger that does not propagate to the root logger
    """
    logger = logging.getLogger(name or "oauth_login")

    # Lambda containers and uvicorn reload import modules more than once
    if logger.handlers:
        return logger

    log_level = resolve_log_level()
    logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    # The Lambda runtime installs its own root handler; avoid printing twice
    logger.propagate = False

    return logger
