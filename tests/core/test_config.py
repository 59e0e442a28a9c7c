"""Unit tests for src/core/config.py"""

from unittest.mock import patch

import pytest

from src.core.config import DEFAULT_LOG_FORMAT, Settings, configure_logging
from src.core.exceptions import InvalidRequestError


def test_defaults() -> None:
    settings = Settings()
    assert settings.log_level == "INFO"
    assert settings.log_format == DEFAULT_LOG_FORMAT


@pytest.mark.parametrize("level", ["debug", " Warning ", "ERROR"])
def test_log_level_is_normalized(level: str) -> None:
    assert Settings(log_level=level).log_level == level.strip().upper()


def test_unknown_log_level() -> None:
    with pytest.raises(InvalidRequestError):
        Settings(log_level="chatty")


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_RULES_LOG_LEVEL", "debug")
    monkeypatch.setenv("CHESS_RULES_LOG_FORMAT", "%(message)s")
    settings = Settings.from_env()
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "%(message)s"


def test_from_env_falls_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CHESS_RULES_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CHESS_RULES_LOG_FORMAT", raising=False)
    assert Settings.from_env() == Settings()


def test_configure_logging() -> None:
    with patch("src.core.config.logging.basicConfig") as mock_basic_config:
        configure_logging(Settings(log_level="warning"))
    mock_basic_config.assert_called_once_with(
        level="WARNING", format=DEFAULT_LOG_FORMAT
    )
