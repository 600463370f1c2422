import sys
from loguru import logger
from .config import settings


def setup_logging():
    """Configure the loguru stderr sink once and return the shared logger."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}"
        ),
    )
    return logger.bind(app=settings.app_name, env=settings.app_env)
