import sys

from loguru import logger

from .config import Settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with stderr (and optionally file) sinks."""
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)

    log_file = settings.absolute_log_file
    if log_file:
        logger.add(
            log_file,
            level=settings.LOG_LEVEL.upper(),
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )
