import logging
import sys
from logging.config import fileConfig

from loguru import logger

from .config import settings


class InterceptHandler(logging.Handler):
    """Routes stdlib logging records (aiogram, aiohttp, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str | None = None, log_file: str | None = None):
    level = (level or settings.LOG_LEVEL).upper()
    log_file = settings.LOG_FILE if log_file is None else log_file

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )
    if log_file:
        logger.add(log_file, level=level, rotation="10 MB", retention="14 days", enqueue=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return logger


def configure_alembic_logging(config):
    """Applies alembic.ini logging only when alembic runs standalone, not inside the bot."""
    if config.config_file_name is None or config.attributes.get("configure_logger", True) is False:
        return
    fileConfig(config.config_file_name, disable_existing_loggers=False)


setup_logging()
