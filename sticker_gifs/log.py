import sys

from loguru import logger

LOG_FORMAT = (
    "<g>{time:MM-DD HH:mm:ss}</g> "
    "[<lvl>{level}</lvl>] "
    "<c><u>{name}</u></c> | "
    "{message}"
)


def setup_logger(level: str = "INFO") -> int:
    logger.remove()
    return logger.add(
        sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        diagnose=False,
    )
