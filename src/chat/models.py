"""Data models for the pump.fun chat bridge."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConnectionState(Enum):
    """Coarse connection state observed by the bridge."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ChatMessage(BaseModel):
    """A chat message received from the room. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    username: str
    message: str
    timestamp: str
    id: Optional[str] = None
    room_id: Optional[str] = Field(default=None, alias="roomId")
    user_address: Optional[str] = Field(default=None, alias="userAddress")

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize_timestamp(cls, v: Any) -> Any:
        """Accept epoch milliseconds as well as ISO strings."""
        match v:
            case bool():
                return v
            case int() | float():
                try:
                    return datetime.fromtimestamp(v / 1000, tz=timezone.utc).isoformat()
                except (OverflowError, OSError, ValueError) as e:
                    raise ValueError(f"timestamp out of range: {v}") from e
            case _:
                return v

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @property
    def dedup_key(self) -> Tuple[str, ...]:
        """Upstream id when present, otherwise the visible content."""
        if self.id:
            return ("id", self.id)
        return ("content", self.timestamp, self.username, self.message)

    @property
    def sent_at(self) -> Optional[datetime]:
        """Parsed timestamp, or None when the upstream value is not ISO-8601."""
        raw = self.timestamp.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def format_time(self) -> str:
        sent_at = self.sent_at
        if sent_at is None:
            return self.timestamp
        return sent_at.astimezone().strftime("%H:%M:%S")

    def format_line(self) -> str:
        """Render as ``[time] username: text``."""
        return f"[{self.format_time()}] {self.username}: {self.message}"


@dataclass(frozen=True)
class BridgeSnapshot:
    """Point-in-time view of the bridge state."""

    room: str
    connected: bool
    buffered_count: int

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.CONNECTED if self.connected else ConnectionState.DISCONNECTED
