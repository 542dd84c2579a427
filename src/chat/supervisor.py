"""Supervision of the chat connection for the lifetime of the bridge."""

import asyncio
from typing import Callable, List, Optional, Sequence

from structlog import get_logger

from .client import ChatClient, PumpChatClient
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
from .message_buffer import DEFAULT_CAPACITY, MessageBuffer
from .models import BridgeSnapshot, ChatMessage, ConnectionState

logger = get_logger(__name__)

DEFAULT_BOT_USERNAME = "mcp-client"
DEFAULT_HISTORY_LIMIT = 100

ClientFactory = Callable[..., ChatClient]


class ConnectionSupervisor:
    """Owns the chat client and turns its events into bridge state.

    The supervisor is the only writer of the connection state and the message
    buffer. Events are handled one at a time on the event loop, so tool
    handlers reading the state never observe a half-applied event.
    """

    def __init__(
        self,
        room_id: str,
        *,
        client_factory: ClientFactory = PumpChatClient,
        username: str = DEFAULT_BOT_USERNAME,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        buffer_capacity: int = DEFAULT_CAPACITY,
        ingest_history: bool = True,
    ):
        self.room_id = room_id
        self.username = username
        self.history_limit = history_limit
        self.ingest_history = ingest_history
        self._client_factory = client_factory
        self._client: Optional[ChatClient] = None
        self._consumer: Optional[asyncio.Task] = None
        self._buffer = MessageBuffer(buffer_capacity)
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def client(self) -> Optional[ChatClient]:
        return self._client

    @property
    def buffered_count(self) -> int:
        return len(self._buffer)

    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    async def start(self) -> None:
        """Create the chat client, subscribe to its events and connect."""
        if self._client is not None:
            raise RuntimeError(f"Supervisor for room {self.room_id} already started")

        logger.info("Connecting to pump.fun chat", room_id=self.room_id, username=self.username)
        self._client = self._client_factory(
            room_id=self.room_id,
            username=self.username,
            message_history_limit=self.history_limit,
        )
        self._consumer = asyncio.create_task(
            self._consume(self._client.events), name=f"chat-events-{self.room_id}"
        )
        await self._client.connect()

    async def stop(self) -> None:
        """Disconnect the client and drain remaining events."""
        if self._client is None:
            return
        try:
            await self._client.disconnect()
        finally:
            self._client.events.close()
            if self._consumer is not None:
                await self._consumer
                self._consumer = None
        logger.info("Chat supervisor stopped", room_id=self.room_id)

    async def _consume(self, channel: EventChannel) -> None:
        async for event in channel:
            try:
                self.handle_event(event)
            except Exception as e:
                logger.error(
                    "Failed to handle chat event",
                    event_type=type(event).__name__,
                    error=str(e),
                )

    def handle_event(self, event: ChatEvent) -> None:
        """Apply one chat event to the bridge state."""
        match event:
            case Connected():
                self._state = ConnectionState.CONNECTED
                logger.info("Successfully connected to chat room", room_id=self.room_id)
            case MessageReceived(message=message):
                self._buffer.append(message)
                logger.info("New message", username=message.username, message=message.message)
            case MessageHistory(messages=messages):
                logger.info("Received historical messages", count=len(messages))
                if self.ingest_history:
                    self._ingest_history(messages)
            case ServerError() as error:
                logger.error("Server error", error=error.message, payload=error.payload)
                if error.is_auth_required:
                    logger.warning("Note: Sending messages requires authentication with pump.fun")
            case ClientError(error=error):
                logger.error("Chat error", error=str(error), error_type=type(error).__name__)
            case Disconnected():
                self._state = ConnectionState.DISCONNECTED
                logger.warning("Disconnected from chat room", room_id=self.room_id)
            case MaxReconnectAttemptsReached():
                logger.error("Chat client gave up reconnecting", room_id=self.room_id)
            case _:
                logger.warning("Ignoring unknown chat event", event_type=type(event).__name__)

    def _ingest_history(self, messages: Sequence[ChatMessage]) -> int:
        """Merge replayed messages that are not buffered yet.

        Entries older than everything buffered go ahead of it, so history that
        arrives after the first live messages is not lost. The rest follow the
        buffered messages in timestamp order.
        """
        known = {message.dedup_key for message in self._buffer}
        fresh: List[ChatMessage] = []
        for message in messages:
            if message.dedup_key not in known:
                known.add(message.dedup_key)
                fresh.append(message)
        if not fresh:
            return 0

        fresh.sort(key=lambda m: (m.sent_at is None, m.sent_at.timestamp() if m.sent_at else 0.0))
        buffered = list(self._buffer)
        head = buffered[0].sent_at if buffered else None
        older: List[ChatMessage] = []
        newer: List[ChatMessage] = []
        for message in fresh:
            sent_at = message.sent_at
            if sent_at is not None and (not buffered or (head is not None and sent_at < head)):
                older.append(message)
            else:
                newer.append(message)

        self._buffer.clear()
        for message in older + buffered + newer:
            self._buffer.append(message)

        logger.debug(
            "Buffered historical messages",
            added=len(fresh),
            skipped=len(messages) - len(fresh),
            ahead_of_live=len(older),
        )
        return len(fresh)

    # Reads for the tool router

    def latest_message(self) -> Optional[ChatMessage]:
        return self._buffer.latest()

    def recent_messages(self, limit: Optional[int] = None) -> List[ChatMessage]:
        return self._buffer.recent(limit)

    def snapshot(self) -> BridgeSnapshot:
        return BridgeSnapshot(
            room=self.room_id,
            connected=self.is_connected(),
            buffered_count=len(self._buffer),
        )

    def send(self, text: str) -> None:
        """Forward a chat message to the client without waiting for delivery."""
        if self._client is None:
            raise RuntimeError("Chat client not started")
        self._client.send_message(text)
        logger.info("Forwarded chat message", room_id=self.room_id, length=len(text))
