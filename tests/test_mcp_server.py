"""Tests for the MCP server wiring."""

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError

from src.chat.events import Connected, MessageReceived
from src.chat.supervisor import ConnectionSupervisor
from src.mcp_server import SERVER_NAME, create_server
from src.mcp_tools.chat_tools import ChatToolRouter


@pytest.fixture
def supervisor(fake_client_factory) -> ConnectionSupervisor:
    return ConnectionSupervisor("R", client_factory=fake_client_factory)


@pytest.fixture
def server(supervisor):
    return create_server(ChatToolRouter(supervisor))


async def call_tool(server, name, arguments=None):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return await handler(request)


class TestListTools:
    """Test tools/list."""

    @pytest.mark.asyncio
    async def test_lists_catalog(self, server):
        handler = server.request_handlers[types.ListToolsRequest]
        result = await handler(types.ListToolsRequest(method="tools/list"))

        tools = result.root.tools
        assert [tool.name for tool in tools] == [
            "PumpFunChat_ReadMessages",
            "PumpFunChat_GetLatestMessage",
            "PumpFunChat_SendMessage",
            "PumpFunChat_GetStatus",
        ]
        send = next(tool for tool in tools if tool.name == "PumpFunChat_SendMessage")
        assert send.inputSchema["required"] == ["message"]

    def test_server_identity_and_capabilities(self, server):
        assert server.name == SERVER_NAME
        options = server.create_initialization_options()
        assert options.capabilities.tools is not None


class TestCallTool:
    """Test tools/call."""

    @pytest.mark.asyncio
    async def test_status_is_single_text_block(self, server):
        result = await call_tool(server, "PumpFunChat_GetStatus", {})

        content = result.root.content
        assert len(content) == 1
        assert content[0].type == "text"
        assert content[0].text == "Token: R\nConnection Status: Disconnected\nMessages in buffer: 0"
        assert not result.root.isError

    @pytest.mark.asyncio
    async def test_not_connected_is_a_result_not_an_error(self, server):
        result = await call_tool(server, "PumpFunChat_ReadMessages")
        assert result.root.content[0].text.startswith("Not connected to the chat room.")
        assert not result.root.isError

    @pytest.mark.asyncio
    async def test_latest_message(self, server, supervisor, message_factory):
        supervisor.handle_event(Connected())
        message = message_factory(7, username="bob", text="lfg")
        supervisor.handle_event(MessageReceived(message))

        result = await call_tool(server, "PumpFunChat_GetLatestMessage", {})

        assert result.root.content[0].text == f"Latest message:\n{message.format_line()}"

    @pytest.mark.asyncio
    async def test_unknown_tool_is_rpc_error(self, server):
        with pytest.raises(McpError) as exc_info:
            await call_tool(server, "PumpFunChat_Nope", {})
        assert exc_info.value.error.code == types.METHOD_NOT_FOUND
        assert "PumpFunChat_Nope" in exc_info.value.error.message

    @pytest.mark.asyncio
    async def test_bad_arguments_are_rpc_error(self, server):
        with pytest.raises(McpError) as exc_info:
            await call_tool(server, "PumpFunChat_SendMessage", {})
        assert exc_info.value.error.code == types.INVALID_PARAMS
