"""
Chat connection layer for the pump.fun chat bridge.
"""

from .client import DEFAULT_CHAT_URL, ChatClient, PumpChatClient
from .events import (
    ChatEvent,
    ClientError,
    Connected,
    Disconnected,
    EventChannel,
    MaxReconnectAttemptsReached,
    MessageHistory,
    MessageReceived,
    ServerError,
)
from .message_buffer import MessageBuffer
from .models import BridgeSnapshot, ChatMessage, ConnectionState
from .supervisor import ConnectionSupervisor

__all__ = [
    # Models
    "ChatMessage",
    "ConnectionState",
    "BridgeSnapshot",
    # Events
    "ChatEvent",
    "Connected",
    "MessageReceived",
    "MessageHistory",
    "ClientError",
    "ServerError",
    "Disconnected",
    "MaxReconnectAttemptsReached",
    "EventChannel",
    # Components
    "MessageBuffer",
    "ConnectionSupervisor",
    "ChatClient",
    "PumpChatClient",
    "DEFAULT_CHAT_URL",
]
