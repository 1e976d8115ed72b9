"""Tests for environment-driven settings."""

import importlib
from collections.abc import Iterator

import pytest

from commentforest import config


@pytest.fixture()
def reload_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    yield monkeypatch
    monkeypatch.undo()
    importlib.reload(config)


class TestParseLogLevel:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("debug", "DEBUG"),
            (" Warning ", "WARNING"),
            ("ERROR", "ERROR"),
            ("VERBOSE", "INFO"),
            ("", "INFO"),
            (None, "INFO"),
        ],
    )
    def test_values(self, raw: str | None, expected: str) -> None:
        assert config.parse_log_level(raw) == expected


class TestEnvironment:
    def test_invalid_log_level_from_env(self, reload_config: pytest.MonkeyPatch) -> None:
        reload_config.setenv("COMMENTFOREST_LOG_LEVEL", "VERBOSE")
        importlib.reload(config)
        assert config.LOG_LEVEL == "INFO"

    def test_valid_log_level_from_env(self, reload_config: pytest.MonkeyPatch) -> None:
        reload_config.setenv("COMMENTFOREST_LOG_LEVEL", "debug")
        importlib.reload(config)
        assert config.LOG_LEVEL == "DEBUG"

    def test_slim_format_from_env(self, reload_config: pytest.MonkeyPatch) -> None:
        reload_config.setenv("COMMENTFOREST_SLIM_FORMAT", "off")
        reload_config.setenv("COMMENTFOREST_MAX_COMMENTS", "25")
        importlib.reload(config)
        assert config.SLIM_FORMAT is False
        assert config.MAX_COMMENTS == 25
