"""Console logging for the blog client and its page controllers."""

import logging
import sys

from .config import LOG_LEVEL


def setup_logger(name: str = "supablog", level: str = LOG_LEVEL) -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Module loggers (``supablog.store.posts``, ``supablog.pages``...) propagate
    here, so calling this once from the CLI covers the whole package.

    Args:
        name: Logger name (default: supablog)
        level: Level name such as DEBUG; unknown names fall back to INFO

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    # Already configured by an earlier call
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)

    return logger
