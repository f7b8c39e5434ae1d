"""
Logging setup for kopy.

All loggers live under the 'kopy' namespace. The library never configures
handlers on import; applications call configure_logging() once.

Example:
    >>> import logging
    >>> from kopy.core.logging_config import configure_logging, get_logger
    >>> configure_logging(level=logging.DEBUG)
    >>> get_logger("cloning").debug("cloner ready")
"""

import logging
from typing import Optional

LOGGER_NAME = "kopy"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a kopy logger.

    Args:
        name: Optional sub-logger name, e.g. 'cloning' gives 'kopy.cloning'.
              If None, returns the package logger.
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(
    level: int = logging.WARNING,
    format_string: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Configure the kopy logger.

    Args:
        level: Log level for the 'kopy' logger. Defaults to WARNING.
        format_string: Format used when a default StreamHandler is created.
        handler: Handler to attach. If None and the logger has no handler yet,
                 a StreamHandler with format_string is added.

    Returns:
        The configured package logger.
    """
    logger = get_logger()
    logger.setLevel(level)

    if not logger.handlers:
        if handler is None:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(handler)

    return logger
