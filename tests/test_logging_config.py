"""Tests for the CLI logging configuration."""

import os

from cortexlab.logging_config import PROVIDER_LOGGERS, build_logging_config


def test_default_levels(tmp_path):
    config = build_logging_config(str(tmp_path))
    assert config["handlers"]["console"]["level"] == "INFO"
    assert config["root"]["level"] == "INFO"
    assert config["handlers"]["forecast_file"]["filename"] == os.path.join(str(tmp_path), "cortexlab.log")


def test_verbose_lowers_console_and_package():
    config = build_logging_config(verbose=True)
    assert config["handlers"]["console"]["level"] == "DEBUG"
    assert config["loggers"]["cortexlab"]["level"] == "DEBUG"


def test_provider_loggers_stay_quiet_when_verbose():
    config = build_logging_config(verbose=True)
    for name in PROVIDER_LOGGERS:
        assert config["loggers"][name]["level"] == "WARNING"
