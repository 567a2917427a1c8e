"""
Console logging through uvicorn's formatters: informational lines go to
stdout, warnings and errors to stderr.
"""
import logging
import logging.config
import sys

from uvicorn.config import LOG_LEVELS
from uvicorn.logging import DefaultFormatter


class StdoutFormatter(DefaultFormatter):
    """DefaultFormatter decides on colours from stderr; this one looks at stdout."""

    def should_use_colors(self) -> bool:
        return sys.stdout.isatty()


class MaxLevelFilter(logging.Filter):
    """Lets through records strictly below ``level``."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def build_logging_config(log_level: str = "info", use_colors: bool | None = None) -> dict:
    level = LOG_LEVELS[log_level.lower()]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "below_warning": {
                "()": MaxLevelFilter,
                "level": logging.WARNING,
            },
        },
        "formatters": {
            "stdout": {
                "()": StdoutFormatter,
                "fmt": "%(levelprefix)s %(message)s",
                "use_colors": use_colors,
            },
            "stderr": {
                "()": DefaultFormatter,
                "fmt": "%(levelprefix)s %(message)s",
                "use_colors": use_colors,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "stdout",
                "filters": ["below_warning"],
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "stderr",
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "echo_server": {"handlers": ["stdout", "stderr"], "level": level, "propagate": False},
        },
    }


def configure_logging(log_level: str = "info", use_colors: bool | None = None) -> None:
    logging.config.dictConfig(build_logging_config(log_level, use_colors))
