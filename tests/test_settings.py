"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from config.settings import Settings
from src.chat.client import DEFAULT_CHAT_URL

SETTINGS_ENV = (
    "PUMP_FUN_TOKEN",
    "CHAT_USERNAME",
    "PUMP_CHAT_URL",
    "MESSAGE_HISTORY_LIMIT",
    "MESSAGE_BUFFER_CAPACITY",
    "INGEST_MESSAGE_HISTORY",
    "MAX_RECONNECT_ATTEMPTS",
    "RECONNECT_DELAY",
    "LOG_LEVEL",
    "LOG_FILE",
    "MCP_STDIO_MODE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.room_id is None
    assert settings.chat_username == "mcp-client"
    assert settings.chat_url == DEFAULT_CHAT_URL
    assert settings.message_history_limit == 100
    assert settings.message_buffer_capacity == 1000
    assert settings.ingest_message_history is True
    assert settings.max_reconnect_attempts == 5
    assert settings.reconnect_delay == 1.0
    assert settings.log_level == "INFO"
    assert settings.mcp_stdio_mode is True


def test_token_from_environment(monkeypatch):
    monkeypatch.setenv("PUMP_FUN_TOKEN", "y31hFyYbrVW4R53Zfka8WJfQpwpMLfCcAjVKAonpump")
    monkeypatch.setenv("MAX_RECONNECT_ATTEMPTS", "2")
    monkeypatch.setenv("INGEST_MESSAGE_HISTORY", "false")

    settings = Settings(_env_file=None)

    assert settings.room_id == "y31hFyYbrVW4R53Zfka8WJfQpwpMLfCcAjVKAonpump"
    assert settings.max_reconnect_attempts == 2
    assert settings.ingest_message_history is False


@pytest.mark.parametrize("value", ["", "   "])
def test_blank_token_is_missing(monkeypatch, value):
    monkeypatch.setenv("PUMP_FUN_TOKEN", value)
    assert Settings(_env_file=None).room_id is None


def test_log_level_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert Settings(_env_file=None).log_level == "DEBUG"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_buffer_capacity_must_be_positive(monkeypatch):
    monkeypatch.setenv("MESSAGE_BUFFER_CAPACITY", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
