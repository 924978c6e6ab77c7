import logging
import logging.config
import os
import sys
from typing import Optional

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)-6s %(name)s:%(lineno)d %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": sys.stdout,
        },
    },
    "loggers": {
        "liberdus_sdk": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        # Request lines from the HTTP stack are noise at INFO
        "httpx": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
        "httpcore": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"],
    },
}


def setup_logging(level: Optional[str] = None):
    """ Apply the logging configuration. """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    config = dict(LOGGING_CONFIG)
    config["loggers"] = dict(LOGGING_CONFIG["loggers"])
    config["loggers"]["liberdus_sdk"] = dict(LOGGING_CONFIG["loggers"]["liberdus_sdk"], level=level)
    logging.config.dictConfig(config)
