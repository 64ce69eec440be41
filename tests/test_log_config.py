from __future__ import annotations

from pythonjsonlogger import jsonlogger

from src.timeclock.timeclock.common.log_config import PACKAGE_LOGGER, build_logging_config


def test_standard_format_by_default():
    config = build_logging_config()

    assert config["handlers"]["console"]["formatter"] == "standard"
    assert config["loggers"]["timeclock"]["level"] == "INFO"


def test_json_format_uses_json_formatter():
    config = build_logging_config(level="DEBUG", fmt="json")

    assert config["handlers"]["console"]["formatter"] == "json"
    assert config["formatters"]["json"]["()"] is jsonlogger.JsonFormatter
    assert config["handlers"]["console"]["level"] == "DEBUG"


def test_package_loggers_are_configured_for_either_import_path():
    config = build_logging_config()

    assert PACKAGE_LOGGER == "src.timeclock.timeclock"
    assert set(config["loggers"]) == {"timeclock", "src.timeclock.timeclock"}
