"""
Logging Helpers

Components log through module loggers (logging.getLogger(__name__)) under
the "transit_intel" namespace. setup_logger attaches one console handler
for applications embedding the engine; log_execution_time wraps the
public per-cycle operations to report how long each one took.
"""

import logging
import time
from functools import wraps
from typing import Callable

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str = "transit_intel", level: int = logging.INFO) -> logging.Logger:
    """
    Configure a console logger for the engine

    Calling it again for the same name only updates the level; the
    handler is attached once.

    Args:
        name: Logger name (the package root by default)
        level: Logging level

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def log_execution_time(logger: logging.Logger):
    """Decorator logging a call's duration at debug level, and failures at error level"""
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{func.__name__} failed: {e}", exc_info=True)
                raise
            elapsed = time.perf_counter() - start
            logger.debug(f"{func.__name__} executed in {elapsed:.3f}s")
            return result
        return wrapper
    return decorator
