import sys

from loguru import logger

_DEV_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def setup_logging(environment: str = "development", level: str | None = None) -> None:
    """Route loguru output to stdout.

    Production gets one JSON record per line; everything else gets the colorized
    format. ``level`` overrides the per-environment default.
    """
    logger.remove()
    if level is None:
        level = "INFO" if environment == "production" else "DEBUG"

    if environment == "production":
        logger.add(sys.stdout, level=level, serialize=True)
    else:
        logger.add(sys.stdout, format=_DEV_FORMAT, level=level)
    logger.debug(f"Logging configured for {environment} at {level}")
