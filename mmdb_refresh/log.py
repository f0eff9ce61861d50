"""Logging setup.

All components log through loguru. Named loggers are created with
``logger.bind`` so every record carries the component that produced it.

Functions:
    setup_logging: Configure the loguru sink and route stdlib logging into it.
    system_logger: Logger for process-level components.
    task_logger: Logger for scheduled routines.
    fetcher_logger: Logger for database acquisition (remote and local).
"""

import inspect
import logging
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)

logger.configure(extra={"component": "mmdb"})


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records (httpx, apscheduler) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.bind(component=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(level: str = "INFO") -> None:
    """Replace the default sink with one at ``level``.

    Args:
        level: Minimum level name, e.g. ``"DEBUG"``.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, colorize=True)
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("httpx", "httpcore", "apscheduler"):
        logging.getLogger(name).setLevel(logging.WARNING)


def system_logger(name: str):
    return logger.bind(component=f"System:{name}")


def task_logger(name: str):
    return logger.bind(component=f"Task:{name}")


def fetcher_logger(name: str):
    return logger.bind(component=f"Fetcher:{name}")
