"""Realtime connection to a pump.fun token chat room."""

import asyncio
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Protocol

import aiohttp
from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from ..core.error_handling import NetworkError, ProtocolError, RetryConfig
from .events import (
    ClientError,
    Connected,
    Disconnected,
    EventChannel,
    MaxReconnectAttemptsReached,
    MessageHistory,
    MessageReceived,
    ServerError,
)
from .models import ChatMessage
from .protocol import (
    CONNECT_FRAME,
    ENGINE_CLOSE,
    ENGINE_MESSAGE,
    ENGINE_OPEN,
    ENGINE_PING,
    PONG_FRAME,
    SOCKET_ACK,
    SOCKET_CONNECT,
    SOCKET_CONNECT_ERROR,
    SOCKET_DISCONNECT,
    SOCKET_EVENT,
    Packet,
    decode_packet,
    encode_event,
)

logger = get_logger(__name__)

DEFAULT_CHAT_URL = "wss://livechat.pump.fun/socket.io/?EIO=4&transport=websocket"
DEFAULT_HEADERS = {
    "Origin": "https://pump.fun",
    "User-Agent": "pump-fun-chat-mcp/1.0",
}


class ChatClient(Protocol):
    """What the bridge needs from a chat connection."""

    events: EventChannel

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    def send_message(self, text: str) -> None: ...

    def get_messages(self, limit: Optional[int] = None) -> List[ChatMessage]: ...

    def get_latest_message(self) -> Optional[ChatMessage]: ...

    def is_active(self) -> bool: ...


class PumpChatClient:
    """Socket.IO chat client for a single pump.fun room.

    ``connect()`` starts a background task that owns the websocket, answers
    keep-alive pings, joins the room and reconnects with exponential backoff.
    Everything observable is published on ``events``.
    """

    def __init__(
        self,
        room_id: str,
        username: str,
        message_history_limit: int = 100,
        *,
        url: str = DEFAULT_CHAT_URL,
        max_reconnect_attempts: int = 5,
        reconnect_delay: float = 1.0,
        session_factory: Optional[Callable[..., aiohttp.ClientSession]] = None,
    ):
        self.room_id = room_id
        self.username = username
        self.message_history_limit = message_history_limit
        self.url = url
        self.events = EventChannel()

        self._messages: Deque[ChatMessage] = deque(maxlen=max(message_history_limit, 0))
        self._retry = RetryConfig(max_attempts=max_reconnect_attempts, initial_delay=reconnect_delay)
        self._session_factory = session_factory or aiohttp.ClientSession
        self._outbound: "asyncio.Queue[str]" = asyncio.Queue()
        self._pending_acks: Dict[int, str] = {}
        self._next_ack_id = 0
        self._attempt = 0
        self._joined = False
        self._socket_open = False
        self._stopping = False
        self._run_task: Optional[asyncio.Task] = None

    # Lifecycle

    async def connect(self) -> None:
        """Start the connection task. Returns without waiting for the join."""
        if self._run_task is not None and not self._run_task.done():
            return
        self._stopping = False
        self._attempt = 0
        logger.info("Connecting to pump.fun chat", room_id=self.room_id, url=self.url)
        self._run_task = asyncio.create_task(self._run(), name=f"pump-chat-{self.room_id}")

    async def disconnect(self) -> None:
        """Close the socket and stop reconnecting."""
        self._stopping = True
        if self._run_task is not None:
            self._run_task.cancel()
            try:
                await self._run_task
            except asyncio.CancelledError:
                pass
            self._run_task = None
        self._socket_open = False
        if self._joined:
            self._joined = False
            self.events.publish(Disconnected())
        logger.info("Disconnected from pump.fun chat", room_id=self.room_id)

    def is_active(self) -> bool:
        return self._joined

    # Messages

    def send_message(self, text: str) -> None:
        """Queue a chat message. Delivery is reported asynchronously, if at all."""
        if not self._socket_open or not self._joined:
            self.events.publish(
                ClientError(NetworkError("Cannot send message while not connected", endpoint=self.url))
            )
            return
        payload = {"roomId": self.room_id, "message": text, "username": self.username}
        self._outbound.put_nowait(
            encode_event("sendMessage", payload, ack_id=self._register_ack("sendMessage"))
        )

    def get_messages(self, limit: Optional[int] = None) -> List[ChatMessage]:
        messages = list(self._messages)
        if limit is None:
            return messages
        return messages[-limit:] if limit > 0 else []

    def get_latest_message(self) -> Optional[ChatMessage]:
        return self._messages[-1] if self._messages else None

    # Connection loop

    async def _run(self) -> None:
        async with self._session_factory(headers=DEFAULT_HEADERS) as session:
            while not self._stopping:
                try:
                    async with session.ws_connect(self.url) as ws:
                        self._socket_open = True
                        await self._serve(ws)
                except asyncio.CancelledError:
                    raise
                except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                    logger.warning("Chat connection failed", error=str(e), attempt=self._attempt)
                    self.events.publish(ClientError(NetworkError(str(e), endpoint=self.url)))
                except Exception as e:
                    logger.error("Chat connection task failed", error=str(e), exc_info=True)
                    self.events.publish(ClientError(e))
                finally:
                    self._socket_open = False

                self._reset_connection_state()
                if self._stopping:
                    break
                if not self._retry.has_attempts_left(self._attempt):
                    logger.error("Giving up on chat reconnection", attempts=self._attempt)
                    self.events.publish(MaxReconnectAttemptsReached())
                    break

                delay = self._retry.calculate_delay(self._attempt)
                self._attempt += 1
                logger.info(
                    "Reconnecting to chat",
                    attempt=self._attempt,
                    max_attempts=self._retry.max_attempts,
                    delay=round(delay, 2),
                )
                await asyncio.sleep(delay)

    async def _serve(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        writer = asyncio.create_task(self._write_loop(ws))
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self._handle_frame(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    error = ws.exception() or NetworkError("Websocket error", endpoint=self.url)
                    self.events.publish(ClientError(error))
                    break
        finally:
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass

    async def _write_loop(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        while True:
            frame = await self._outbound.get()
            await ws.send_str(frame)

    def _reset_connection_state(self) -> None:
        if self._joined:
            self._joined = False
            self.events.publish(Disconnected())
        self._pending_acks.clear()
        # Frames queued for a dead socket must not leak into the next one
        while not self._outbound.empty():
            self._outbound.get_nowait()

    def _register_ack(self, kind: str) -> int:
        ack_id = self._next_ack_id
        self._next_ack_id += 1
        self._pending_acks[ack_id] = kind
        return ack_id

    # Frame handling

    def _handle_frame(self, frame: str) -> None:
        try:
            packet = decode_packet(frame)
        except ProtocolError as e:
            logger.warning("Dropping malformed chat frame", error=e.message)
            self.events.publish(ClientError(e))
            return

        if packet.engine_type == ENGINE_OPEN:
            self._outbound.put_nowait(CONNECT_FRAME)
        elif packet.engine_type == ENGINE_PING:
            self._outbound.put_nowait(PONG_FRAME)
        elif packet.engine_type == ENGINE_CLOSE:
            logger.info("Chat server closed the session", room_id=self.room_id)
        elif packet.engine_type == ENGINE_MESSAGE:
            self._handle_socket_packet(packet)
        else:
            logger.debug("Ignoring engine packet", engine_type=packet.engine_type)

    def _handle_socket_packet(self, packet: Packet) -> None:
        if packet.socket_type == SOCKET_CONNECT:
            self._on_namespace_connected()
        elif packet.socket_type == SOCKET_CONNECT_ERROR:
            self.events.publish(ServerError(_as_error_payload(packet.data)))
        elif packet.socket_type == SOCKET_DISCONNECT:
            logger.info("Chat server ended the namespace session", room_id=self.room_id)
            if self._joined:
                self._joined = False
                self.events.publish(Disconnected())
        elif packet.socket_type == SOCKET_EVENT:
            args = packet.args
            self._handle_event(packet.event, args[0] if args else None)
        elif packet.socket_type == SOCKET_ACK:
            args = packet.args
            self._handle_ack(packet.ack_id, args[0] if args else None)

    def _on_namespace_connected(self) -> None:
        self._joined = True
        self._attempt = 0
        self.events.publish(Connected())

        room = {"roomId": self.room_id, "username": self.username}
        self._outbound.put_nowait(encode_event("joinRoom", room, ack_id=self._register_ack("joinRoom")))
        history = {"roomId": self.room_id, "before": None, "limit": self.message_history_limit}
        self._outbound.put_nowait(
            encode_event("getMessageHistory", history, ack_id=self._register_ack("getMessageHistory"))
        )

    def _handle_event(self, name: Optional[str], payload: Any) -> None:
        match name:
            case "newMessage":
                message = self._parse_message(payload)
                if message is not None:
                    self._messages.append(message)
                    self.events.publish(MessageReceived(message))
            case "error":
                self.events.publish(ServerError(_as_error_payload(payload)))
            case "userLeft":
                username = payload.get("username") if isinstance(payload, dict) else payload
                logger.debug("User left chat", username=username)
            case _:
                logger.debug("Unhandled chat event", chat_event=name)

    def _handle_ack(self, ack_id: Optional[int], payload: Any) -> None:
        kind = self._pending_acks.pop(ack_id, None) if ack_id is not None else None

        if isinstance(payload, dict) and "error" in payload:
            self.events.publish(ServerError(payload))
            return

        if kind == "getMessageHistory":
            if isinstance(payload, dict):
                payload = payload.get("messages", [])
            items = payload if isinstance(payload, list) else []
            messages = [m for m in (self._parse_message(item) for item in items) if m is not None]
            self._messages.extend(messages)
            self.events.publish(MessageHistory(tuple(messages)))
        elif kind is None:
            logger.debug("Unexpected acknowledgement", ack_id=ack_id)
        else:
            logger.debug("Chat request acknowledged", request=kind)

    def _parse_message(self, payload: Any) -> Optional[ChatMessage]:
        try:
            return ChatMessage.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning("Skipping malformed chat message", error=str(e))
            return None


def _as_error_payload(data: Any) -> Dict[str, Any]:
    if isinstance(data, dict):
        return data
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return {"error": str(data)}
