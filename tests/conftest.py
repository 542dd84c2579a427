"""Shared fixtures for the chat bridge tests."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from src.chat.events import EventChannel
from src.chat.models import ChatMessage

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_message(index: int, username: Optional[str] = None, text: Optional[str] = None) -> ChatMessage:
    """Message number ``index``, one second after message ``index - 1``."""
    return ChatMessage(
        username=username or f"user{index}",
        message=text or f"message {index}",
        timestamp=(BASE_TIME + timedelta(seconds=index)).isoformat(),
    )


class FakeChatClient:
    """In-memory stand-in for PumpChatClient."""

    instances: List["FakeChatClient"] = []

    def __init__(self, **kwargs: Any):
        self.options: Dict[str, Any] = kwargs
        self.events = EventChannel()
        self.sent: List[str] = []
        self.connect_calls = 0
        self.disconnect_calls = 0
        FakeChatClient.instances.append(self)

    async def connect(self) -> None:
        self.connect_calls += 1

    async def disconnect(self) -> None:
        self.disconnect_calls += 1

    def send_message(self, text: str) -> None:
        self.sent.append(text)

    def get_messages(self, limit: Optional[int] = None) -> List[ChatMessage]:
        return []

    def get_latest_message(self) -> Optional[ChatMessage]:
        return None

    def is_active(self) -> bool:
        return False


@pytest.fixture
def fake_client_factory():
    """Client factory recording every FakeChatClient it builds."""
    FakeChatClient.instances = []
    yield FakeChatClient
    FakeChatClient.instances = []


@pytest.fixture
def messages() -> List[ChatMessage]:
    return [make_message(i) for i in range(1, 6)]


@pytest.fixture
def message_factory():
    """Build numbered messages with strictly increasing timestamps."""
    return make_message
