"""Logging configuration for the generator CLI."""

import logging
from logging.config import dictConfig


def build_logging_config(level: str = "INFO") -> dict:
    """Return the dictConfig used by the CLI."""

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            "metagen": {
                "level": level.upper(),
                "handlers": ["console"],
                "propagate": False,
            }
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Configure logging for the metagen package."""

    dictConfig(build_logging_config(level))
    logging.getLogger(__name__).debug("Logging configured at %s level", level.upper())
