"""Socket.IO v5 over Engine.IO v4 text packet codec.

Only the subset the pump.fun chat server uses is supported: text frames,
the default namespace, events and acknowledgements. Binary packets are
rejected.
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional

from ..core.error_handling import ProtocolError

# Engine.IO packet types
ENGINE_OPEN = 0
ENGINE_CLOSE = 1
ENGINE_PING = 2
ENGINE_PONG = 3
ENGINE_MESSAGE = 4

# Socket.IO packet types, carried inside ENGINE_MESSAGE
SOCKET_CONNECT = 0
SOCKET_DISCONNECT = 1
SOCKET_EVENT = 2
SOCKET_ACK = 3
SOCKET_CONNECT_ERROR = 4

PONG_FRAME = str(ENGINE_PONG)
CONNECT_FRAME = f"{ENGINE_MESSAGE}{SOCKET_CONNECT}"


@dataclass(frozen=True)
class Packet:
    """A decoded text frame."""

    engine_type: int
    socket_type: Optional[int] = None
    ack_id: Optional[int] = None
    data: Any = None

    @property
    def is_event(self) -> bool:
        return self.engine_type == ENGINE_MESSAGE and self.socket_type == SOCKET_EVENT

    @property
    def event(self) -> Optional[str]:
        if self.is_event and isinstance(self.data, list) and self.data:
            return self.data[0]
        return None

    @property
    def args(self) -> List[Any]:
        """Event arguments, or acknowledgement arguments."""
        if not isinstance(self.data, list):
            return []
        if self.is_event:
            return self.data[1:]
        return self.data


def _loads(body: str, frame: str) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid JSON payload: {e.msg}", frame=frame) from e


def decode_packet(frame: str) -> Packet:
    """Decode one websocket text frame into a Packet."""
    if not frame or not frame[0].isdigit():
        raise ProtocolError("Frame does not start with a packet type", frame=frame)

    engine_type = int(frame[0])
    body = frame[1:]

    if engine_type == ENGINE_OPEN:
        return Packet(engine_type, data=_loads(body, frame))
    if engine_type != ENGINE_MESSAGE:
        # ping/pong may carry a plain-text probe
        return Packet(engine_type, data=body or None)

    if not body or not body[0].isdigit():
        raise ProtocolError("Message frame without socket packet type", frame=frame)

    socket_type = int(body[0])
    if socket_type > SOCKET_CONNECT_ERROR:
        raise ProtocolError("Binary socket packets are not supported", frame=frame)

    rest = body[1:]
    if rest.startswith("/"):
        _namespace, _, rest = rest.partition(",")

    digits = 0
    while digits < len(rest) and rest[digits].isdigit():
        digits += 1
    ack_id = int(rest[:digits]) if digits else None

    return Packet(engine_type, socket_type, ack_id, _loads(rest[digits:], frame))


def encode_event(event: str, *args: Any, ack_id: Optional[int] = None) -> str:
    """Encode an event emit, optionally requesting an acknowledgement."""
    payload = json.dumps([event, *args], separators=(",", ":"), default=str)
    ack = "" if ack_id is None else str(ack_id)
    return f"{ENGINE_MESSAGE}{SOCKET_EVENT}{ack}{payload}"
