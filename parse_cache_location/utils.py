"""Miscellaneous utility helpers."""
import logging

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger("parse_cache_location")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger
