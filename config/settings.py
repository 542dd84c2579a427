"""Application settings and configuration."""

from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.chat.client import DEFAULT_CHAT_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Application
    app_name: Annotated[str, Field(default="pump-fun-chat", alias="MCP_SERVER_NAME")]
    app_version: Annotated[str, Field(default="1.0.0", alias="MCP_SERVER_VERSION")]

    # Chat room
    room_id: Annotated[Optional[str], Field(default=None, alias="PUMP_FUN_TOKEN")]
    chat_username: Annotated[str, Field(default="mcp-client", min_length=1, alias="CHAT_USERNAME")]
    chat_url: Annotated[str, Field(default=DEFAULT_CHAT_URL, alias="PUMP_CHAT_URL")]
    message_history_limit: Annotated[int, Field(default=100, ge=0, alias="MESSAGE_HISTORY_LIMIT")]
    message_buffer_capacity: Annotated[int, Field(default=1000, ge=1, alias="MESSAGE_BUFFER_CAPACITY")]
    ingest_message_history: Annotated[bool, Field(default=True, alias="INGEST_MESSAGE_HISTORY")]

    # Reconnection
    max_reconnect_attempts: Annotated[int, Field(default=5, ge=0, alias="MAX_RECONNECT_ATTEMPTS")]
    reconnect_delay: Annotated[float, Field(default=1.0, gt=0, alias="RECONNECT_DELAY")]

    # Logging
    log_level: Annotated[
        str,
        Field(
            default="INFO",
            pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
            alias="LOG_LEVEL",
        ),
    ]
    log_file: Annotated[Optional[str], Field(default=None, alias="LOG_FILE")]

    # MCP Server
    mcp_stdio_mode: Annotated[bool, Field(default=True, alias="MCP_STDIO_MODE")]

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("room_id", mode="before")
    @classmethod
    def blank_room_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


# Global settings instance with lazy initialization
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
