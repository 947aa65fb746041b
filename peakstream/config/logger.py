"""Logging configuration"""
import logging
import sys

from peakstream.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console only, no file
logging.basicConfig(
    level=settings.log_level.upper(),
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger("peakstream")


def set_log_level(level: str) -> None:
    """Apply a log level to the application logger and quiet uvicorn's per-request access lines"""
    logger.setLevel(level.upper())
    logging.getLogger("uvicorn.access").setLevel(max(logging.WARNING, logger.level))


set_log_level(settings.log_level)
