"""
Logging setup for command-line use.

Library modules only create module loggers; handlers are installed here,
once, by the entry point.
"""

import logging
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO,
                  fmt: Optional[str] = None) -> logging.Logger:
    """
    Configure the gridnav logger hierarchy.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or number
        fmt: Log format, DEFAULT_FORMAT if None

    Returns:
        The package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"unknown log level: {level}")

    logger = logging.getLogger("gridnav")
    logger.setLevel(level)

    if not any(getattr(h, "_gridnav", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        handler._gridnav = True
        logger.addHandler(handler)
    return logger
