"""Tests for the server entry point."""

from unittest.mock import MagicMock, patch

import pytest

from config.settings import Settings
from src.chat.client import PumpChatClient
from src.core.error_handling import ConfigurationError
from src.main import build_supervisor, main


def make_settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def no_token(monkeypatch):
    monkeypatch.delenv("PUMP_FUN_TOKEN", raising=False)


def test_build_supervisor_requires_token():
    with pytest.raises(ConfigurationError) as exc_info:
        build_supervisor(make_settings())
    assert exc_info.value.context["config_key"] == "PUMP_FUN_TOKEN"


def test_build_supervisor_applies_settings():
    settings = make_settings(
        room_id="ROOM",
        chat_username="watcher",
        message_history_limit=20,
        message_buffer_capacity=50,
        max_reconnect_attempts=2,
        reconnect_delay=0.5,
    )

    supervisor = build_supervisor(settings)

    assert supervisor.room_id == "ROOM"
    assert supervisor.username == "watcher"
    assert supervisor.history_limit == 20
    assert supervisor._buffer.capacity == 50
    assert supervisor._client_factory.func is PumpChatClient
    assert supervisor._client_factory.keywords["max_reconnect_attempts"] == 2
    assert supervisor._client_factory.keywords["reconnect_delay"] == 0.5


def test_main_exits_without_token(capsys):
    with patch("src.main.get_settings", return_value=make_settings()), patch(
        "src.main.setup_logging"
    ) as mock_setup_logging, patch("src.main.asyncio.run") as mock_run:
        with pytest.raises(SystemExit) as exc_info:
            main()

    assert exc_info.value.code == 1
    mock_setup_logging.assert_called_once()
    mock_run.assert_not_called()
    err = capsys.readouterr().err
    assert "Error: PUMP_FUN_TOKEN environment variable is required" in err
    assert "Example: PUMP_FUN_TOKEN=" in err


def test_main_runs_server_for_configured_room():
    settings = make_settings(room_id="ROOM")
    with patch("src.main.get_settings", return_value=settings), patch(
        "src.main.setup_logging"
    ), patch("src.main.serve", new_callable=MagicMock) as mock_serve, patch(
        "src.main.asyncio.run"
    ) as mock_run:
        main()

    mock_run.assert_called_once_with(mock_serve.return_value)
    called_settings, supervisor = mock_serve.call_args.args
    assert called_settings is settings
    assert supervisor.room_id == "ROOM"
