"""Logging utilities."""
import logging
import sys
from typing import Optional, Union

from ..config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: Union[int, str, None] = None) -> int:
    """Turn a level name or number into a logging level.

    None falls back to DEBUG in debug mode, else LOG_LEVEL.
    """
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = "studio-site", level: Union[int, str, None] = None
) -> logging.Logger:
    """Set up and configure a logger.

    Builders, the FitDegree client and the pack mounter all log through
    the same handler, tagging messages with [BUILD], [FITDEGREE] or
    [GIZMOS].

    Args:
        name: Logger name
        level: Level name or number (defaults from settings)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = resolve_level(level)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Child of the application logger, e.g. "studio-site.gizmos"."""
    return logger.getChild(component) if component else logger


# Global logger instance
logger = setup_logger()
