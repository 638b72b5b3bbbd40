import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO", log_filename: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``petrikit`` logger with a single handler.

    Calling it again replaces the handler installed by the previous call.

    :param log_level: Level name, e.g. ``"DEBUG"`` or ``"INFO"``.
    :type log_level: str
    :param log_filename: Write to this file instead of standard error.
    :type log_filename: Optional[str]
    :returns: The configured package logger.
    :rtype: logging.Logger
    :raises ValueError: If ``log_level`` is not a known level name.
    """
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    logger = logging.getLogger("petrikit")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_filename:
        handler = logging.FileHandler(log_filename, mode="w")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
