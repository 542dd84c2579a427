"""MCP tool definitions for the pump.fun chat room."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from config.logging_config import get_logger
from src.chat.models import ChatMessage
from src.chat.supervisor import ConnectionSupervisor
from src.core.error_handling import InvalidToolArgumentsError, UnknownToolError

logger = get_logger(__name__)

TOOL_PREFIX = "PumpFunChat_"


# Schema definitions using Pydantic for validation
class ReadMessagesInput(BaseModel):
    """Input schema for reading buffered messages."""

    model_config = ConfigDict(extra="ignore")

    limit: Optional[int] = Field(
        default=None,
        description="Number of messages to retrieve (default: all stored messages)",
        ge=0,
    )


class SendMessageInput(BaseModel):
    """Input schema for sending a chat message."""

    model_config = ConfigDict(extra="ignore")

    message: str = Field(
        ...,
        description="The message to send to the chat",
        min_length=1,
    )


class NoInput(BaseModel):
    """Tools without parameters."""

    model_config = ConfigDict(extra="ignore")


def _format_lines(messages: List[ChatMessage]) -> str:
    return "\n".join(message.format_line() for message in messages)


class ChatTool(ABC):
    """Base class for chat tools. Subclasses set name, description and input_model."""

    name: str = ""
    description: str = ""
    input_model: Type[BaseModel] = NoInput

    def describe(self, room_id: str) -> str:
        return self.description.format(room=room_id)

    def get_schema(self, room_id: str) -> Dict[str, Any]:
        """Get JSON schema for the tool."""
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        schema.pop("description", None)
        schema.setdefault("properties", {})
        return {
            "name": self.name,
            "description": self.describe(room_id),
            "input_schema": schema,
        }

    @abstractmethod
    def execute(self, supervisor: ConnectionSupervisor, params: BaseModel) -> str:
        """Run the tool against the current bridge state and return its text."""


class ReadMessagesTool(ChatTool):
    name = f"{TOOL_PREFIX}ReadMessages"
    description = "Read messages from the pump.fun chat room for token {room}"
    input_model = ReadMessagesInput

    def execute(self, supervisor: ConnectionSupervisor, params: ReadMessagesInput) -> str:
        if not supervisor.is_connected():
            return (
                "Not connected to the chat room. "
                "The connection may still be establishing or has failed."
            )

        messages = supervisor.recent_messages(params.limit)
        if not messages:
            return "No messages available. The chat might be quiet or still loading."

        return (
            f"Messages from {supervisor.room_id} (showing {len(messages)} messages):\n\n"
            f"{_format_lines(messages)}"
        )


class GetLatestMessageTool(ChatTool):
    name = f"{TOOL_PREFIX}GetLatestMessage"
    description = "Get the most recent message from the pump.fun chat room for token {room}"

    def execute(self, supervisor: ConnectionSupervisor, params: NoInput) -> str:
        if not supervisor.is_connected():
            return "Not connected to the chat room."

        latest = supervisor.latest_message()
        if latest is None:
            return "No messages available."

        return f"Latest message:\n{latest.format_line()}"


class SendMessageTool(ChatTool):
    name = f"{TOOL_PREFIX}SendMessage"
    description = "Send a message to the pump.fun chat room for token {room}"
    input_model = SendMessageInput

    def execute(self, supervisor: ConnectionSupervisor, params: SendMessageInput) -> str:
        if not supervisor.is_connected():
            return "Cannot send message - not connected to the chat room."

        supervisor.send(params.message)
        return (
            f'Message sent: "{params.message}"\n'
            "Note: Messages require pump.fun authentication to be delivered."
        )


class GetStatusTool(ChatTool):
    name = f"{TOOL_PREFIX}GetStatus"
    description = "Get the connection status and token information"

    def execute(self, supervisor: ConnectionSupervisor, params: NoInput) -> str:
        snapshot = supervisor.snapshot()
        return (
            f"Token: {snapshot.room}\n"
            f"Connection Status: {snapshot.state.label}\n"
            f"Messages in buffer: {snapshot.buffered_count}"
        )


CHAT_TOOLS: Dict[str, Type[ChatTool]] = {
    ReadMessagesTool.name: ReadMessagesTool,
    GetLatestMessageTool.name: GetLatestMessageTool,
    SendMessageTool.name: SendMessageTool,
    GetStatusTool.name: GetStatusTool,
}


class ChatToolRouter:
    """Tool catalog and dispatch table for one chat room.

    Holds no state of its own: every call reads the supervisor at the moment
    it runs.
    """

    def __init__(self, supervisor: ConnectionSupervisor, room_id: Optional[str] = None):
        self.supervisor = supervisor
        self.room_id = room_id or supervisor.room_id
        self._tools: Dict[str, ChatTool] = {name: cls() for name, cls in CHAT_TOOLS.items()}

    def list_tools(self) -> List[Dict[str, Any]]:
        """List the tool catalog with JSON input schemas."""
        return [tool.get_schema(self.room_id) for tool in self._tools.values()]

    def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> str:
        """
        Run a tool and return its text result.

        Args:
            name: Tool name from the catalog
            arguments: Raw tool arguments

        Returns:
            Result text

        Raises:
            UnknownToolError: If the tool is not in the catalog
            InvalidToolArgumentsError: If the arguments do not match the schema
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Unknown tool requested", tool=name)
            raise UnknownToolError(name)

        try:
            params = tool.input_model.model_validate(dict(arguments or {}))
        except PydanticValidationError as e:
            detail = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            logger.warning("Invalid tool arguments", tool=name, detail=detail)
            raise InvalidToolArgumentsError(name, detail) from e

        logger.debug("Tool call", tool=name)
        return tool.execute(self.supervisor, params)
