import sys

from loguru import logger

from config import LOG_FILE, LOG_FORMAT, LOG_LEVEL

# Remove default handler
logger.remove()

logger.add(
    sys.stdout,
    format=LOG_FORMAT,
    level=LOG_LEVEL,
    colorize=True,
)

if LOG_FILE:
    logger.add(
        LOG_FILE,
        format=LOG_FORMAT,
        level=LOG_LEVEL,
        rotation="00:00",
        retention="7 days",
        compression="zip",
    )


def get_logger():
    return logger
