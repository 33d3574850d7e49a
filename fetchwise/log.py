import sys

from loguru import logger

from fetchwise.settings import global_settings


def setup_logging(level: str | None = None) -> int:
    """Route loguru output to stderr at the configured level. Returns the sink id."""
    logger.remove()
    return logger.add(
        sys.stderr,
        level=(level or global_settings.log_level).upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}",
    )
