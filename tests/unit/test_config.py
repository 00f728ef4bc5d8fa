"""Tests for middleflow settings."""

import pytest

from middleflow import MiddleflowConfig, get_config
from middleflow.common.exceptions import ConfigurationError
from middleflow.constants import (
    DEFAULT_EXCEPTION_FRONT_WINDOW,
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BRANCH_DEPTH,
)


class TestMiddleflowConfig:
    def test_defaults(self):
        config = MiddleflowConfig()

        assert config.exception_front_window == DEFAULT_EXCEPTION_FRONT_WINDOW == 3
        assert config.max_branch_depth == DEFAULT_MAX_BRANCH_DEPTH == 32
        assert config.log_level == DEFAULT_LOG_LEVEL
        assert config.json_indent == DEFAULT_JSON_INDENT == 2

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MIDDLEFLOW_EXCEPTION_FRONT_WINDOW", "5")
        monkeypatch.setenv("MIDDLEFLOW_MAX_BRANCH_DEPTH", "8")
        monkeypatch.setenv("MIDDLEFLOW_LOG_LEVEL", "debug")
        monkeypatch.setenv("MIDDLEFLOW_JSON_INDENT", "0")

        config = MiddleflowConfig.from_env()

        assert config.exception_front_window == 5
        assert config.max_branch_depth == 8
        assert config.log_level == "DEBUG"
        assert config.json_indent == 0

    def test_unparseable_integers_fall_back(self, monkeypatch):
        monkeypatch.setenv("MIDDLEFLOW_MAX_BRANCH_DEPTH", "deep")

        assert get_config().max_branch_depth == DEFAULT_MAX_BRANCH_DEPTH

    def test_get_config_reads_environment_each_call(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("MIDDLEFLOW_JSON_INDENT", "4")

        assert first.json_indent == 2
        assert get_config().json_indent == 4

    @pytest.mark.parametrize(
        "kwargs,key",
        [
            ({"exception_front_window": -1}, "exception_front_window"),
            ({"max_branch_depth": 0}, "max_branch_depth"),
            ({"log_level": "LOUD"}, "log_level"),
            ({"json_indent": -2}, "json_indent"),
        ],
    )
    def test_invalid_values(self, kwargs, key):
        with pytest.raises(ConfigurationError) as exc_info:
            MiddleflowConfig(**kwargs)

        assert exc_info.value.config_key == key

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("MIDDLEFLOW_MAX_BRANCH_DEPTH", "0")

        with pytest.raises(ConfigurationError):
            get_config()

    def test_dict_round_trip(self):
        config = MiddleflowConfig.from_dict({"max_branch_depth": 4, "log_level": "info"})

        assert config.log_level == "INFO"
        assert MiddleflowConfig.from_dict(config.to_dict()) == config

    def test_frozen(self):
        config = MiddleflowConfig()

        with pytest.raises(AttributeError):
            config.json_indent = 4
