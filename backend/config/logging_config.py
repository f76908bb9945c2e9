"""Logging configuration for the Character Builder."""
import sys
from datetime import datetime
from loguru import logger

from config.builder_settings import LOG_LEVEL, LOG_TO_FILE, LOG_FILTER


SESSION_ID = datetime.now().strftime("%Y%m%d_%H%M%S")

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:{line} - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


def configure_logging():
    """Configure Loguru logging."""
    logger.remove()

    if LOG_FILTER:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format=CONSOLE_FORMAT,
            filter=lambda record: LOG_FILTER in record["name"]
        )
    else:
        logger.add(
            sys.stderr,
            level=LOG_LEVEL,
            format=CONSOLE_FORMAT
        )

    if LOG_TO_FILE:
        from utils.paths import get_writable_dir
        log_dir = get_writable_dir("logs")

        logger.add(
            log_dir / f"app_{SESSION_ID}.log",
            rotation="5 MB",
            retention=5,
            level="DEBUG",
            format=FILE_FORMAT
        )

        logger.add(
            log_dir / "error.log",
            rotation="10 MB",
            retention="14 days",
            level="ERROR",
            format=FILE_FORMAT
        )

    return logger
