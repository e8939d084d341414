"""
PawTrack - Logging Configuration
Stdout logging for the API server and the map script.
"""

import logging
import sys
from typing import Optional, Iterable

from pawtrack.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP client internals log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "multipart")


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """
    Configure stdout logging and return the "pawtrack" logger.

    Module loggers (pawtrack.reports.submission, pawtrack.backend.*, ...)
    propagate to it, so one call at process start covers the package.

    Args:
        level: Log level name, settings.log_level if None
        format_string: Custom format string for log messages
        quiet: Third-party loggers held at WARNING
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=format_string or LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logger = logging.getLogger("pawtrack")
    logger.setLevel(logging.DEBUG if settings.debug and level is None else log_level)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
