from __future__ import annotations

import logging.config

from pythonjsonlogger import jsonlogger

# "timeclock" when installed, "src.timeclock.timeclock" when run from a checkout.
PACKAGE_LOGGER = __name__.rsplit(".common.", 1)[0]


def build_logging_config(*, level: str = "INFO", fmt: str = "standard") -> dict:
    formatter = "json" if fmt == "json" else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "level": level,
            },
        },
        "loggers": {
            name: {"handlers": ["console"], "level": level, "propagate": False}
            for name in sorted({"timeclock", PACKAGE_LOGGER})
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(*, level: str = "INFO", fmt: str = "standard") -> None:
    logging.config.dictConfig(build_logging_config(level=level.upper(), fmt=fmt))
