"""MCP (Model Context Protocol) tools for the pump.fun chat room.

This module provides the tool catalog exposed to AI assistants and the
router that dispatches tool calls against the live chat connection.
"""

from .chat_tools import (
    CHAT_TOOLS,
    ChatTool,
    ChatToolRouter,
    GetLatestMessageTool,
    GetStatusTool,
    NoInput,
    ReadMessagesInput,
    ReadMessagesTool,
    SendMessageInput,
    SendMessageTool,
)

__all__ = [
    # Tools
    "ChatTool",
    "ReadMessagesTool",
    "GetLatestMessageTool",
    "SendMessageTool",
    "GetStatusTool",

    # Registry and routing
    "CHAT_TOOLS",
    "ChatToolRouter",

    # Input schemas
    "ReadMessagesInput",
    "SendMessageInput",
    "NoInput",
]
