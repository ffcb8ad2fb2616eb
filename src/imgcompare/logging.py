import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVEL_ENV = "IMGCOMPARE_LOG_LEVEL"


def _default_level(name: str) -> int:
    # The CLI reports progress; library modules stay quiet.
    return logging.INFO if name.endswith(".cli") else logging.WARNING


def resolve_level(name: str) -> int:
    """Level for a logger: IMGCOMPARE_LOG_LEVEL if it names a level, else the default."""
    default = _default_level(name)
    requested = os.getenv(LOG_LEVEL_ENV)
    if not requested:
        return default
    level = logging.getLevelName(requested.strip().upper())
    return level if isinstance(level, int) else default


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(resolve_level(name))
    return logger
