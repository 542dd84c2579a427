"""Events emitted by the chat connection and the channel that carries them."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Optional, Tuple, Union

from .models import ChatMessage


@dataclass(frozen=True)
class Connected:
    """Room join confirmed."""


@dataclass(frozen=True)
class MessageReceived:
    message: ChatMessage


@dataclass(frozen=True)
class MessageHistory:
    """Recent messages replayed by the server after joining."""

    messages: Tuple[ChatMessage, ...] = ()


@dataclass(frozen=True)
class ClientError:
    """Transport or client-side failure."""

    error: BaseException


@dataclass(frozen=True)
class ServerError:
    """Error reported by the chat server, e.g. ``{"error": "Authentication required"}``."""

    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return str(self.payload.get("error", self.payload))

    @property
    def is_auth_required(self) -> bool:
        return self.payload.get("error") == "Authentication required"


@dataclass(frozen=True)
class Disconnected:
    """Socket closed. The client may reconnect on its own."""


@dataclass(frozen=True)
class MaxReconnectAttemptsReached:
    """The client gave up reconnecting."""


ChatEvent = Union[
    Connected,
    MessageReceived,
    MessageHistory,
    ClientError,
    ServerError,
    Disconnected,
    MaxReconnectAttemptsReached,
]


class EventChannel:
    """Single-consumer FIFO of chat events.

    The chat client publishes without blocking; one consumer drains events in
    emission order with ``async for``. Closing the channel ends iteration once
    the already-queued events have been delivered.
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, event: ChatEvent) -> None:
        if self._closed:
            return
        self._queue.put_nowait(event)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(self._CLOSED)

    async def get(self) -> Optional[ChatEvent]:
        """Next event, or None once the channel is closed and drained."""
        item = await self._queue.get()
        if item is self._CLOSED:
            return None
        return item

    def __aiter__(self) -> AsyncIterator[ChatEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ChatEvent]:
        while True:
            event = await self.get()
            if event is None:
                return
            yield event
