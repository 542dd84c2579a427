"""
MCP server exposing the pump.fun chat tools over stdio.

Tool results are always a single text block. Unknown tools and malformed
arguments are reported as JSON-RPC errors rather than tool results.
"""

from typing import List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from config.logging_config import get_logger
from src.core.error_handling import InvalidToolArgumentsError, UnknownToolError
from src.mcp_tools.chat_tools import ChatToolRouter

logger = get_logger(__name__)

SERVER_NAME = "pump-fun-chat"
SERVER_VERSION = "1.0.0"


def create_server(
    router: ChatToolRouter,
    name: str = SERVER_NAME,
    version: str = SERVER_VERSION,
) -> Server:
    """
    Build a low-level MCP server backed by the chat tool router.

    Args:
        router: Tool router for the chat room
        name: Server name announced during initialization
        version: Server version announced during initialization

    Returns:
        Configured MCP server with the tools capability
    """
    server: Server = Server(name, version=version)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=entry["name"],
                description=entry["description"],
                inputSchema=entry["input_schema"],
            )
            for entry in router.list_tools()
        ]

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        name = request.params.name
        try:
            text = router.dispatch(name, request.params.arguments)
        except UnknownToolError as e:
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=e.message)) from e
        except InvalidToolArgumentsError as e:
            raise McpError(
                types.ErrorData(code=types.INVALID_PARAMS, message=e.message, data=e.context)
            ) from e

        return types.ServerResult(
            types.CallToolResult(content=[types.TextContent(type="text", text=text)])
        )

    # Errors raised here surface as JSON-RPC errors, not as tool results
    server.request_handlers[types.CallToolRequest] = call_tool

    return server


async def run_stdio(server: Server) -> None:
    """Serve MCP requests on stdin/stdout until the client closes the stream."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP server listening on stdio", server=server.name)
        await server.run(read_stream, write_stream, server.create_initialization_options())
