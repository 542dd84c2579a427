"""Main entry point for the pump.fun chat MCP server."""

import asyncio
import functools
import sys

from config.logging_config import get_logger, setup_logging
from config.settings import Settings, get_settings
from src.chat.client import PumpChatClient
from src.chat.supervisor import ConnectionSupervisor
from src.core.error_handling import ConfigurationError
from src.mcp_server import create_server, run_stdio
from src.mcp_tools.chat_tools import ChatToolRouter

logger = get_logger(__name__)

EXAMPLE_TOKEN = "y31hFyYbrVW4R53Zfka8WJfQpwpMLfCcAjVKAonpump"


def build_supervisor(settings: Settings) -> ConnectionSupervisor:
    """Create the connection supervisor for the configured room."""
    if not settings.room_id:
        raise ConfigurationError(
            "PUMP_FUN_TOKEN environment variable is required",
            config_key="PUMP_FUN_TOKEN",
        )

    client_factory = functools.partial(
        PumpChatClient,
        url=settings.chat_url,
        max_reconnect_attempts=settings.max_reconnect_attempts,
        reconnect_delay=settings.reconnect_delay,
    )
    return ConnectionSupervisor(
        settings.room_id,
        client_factory=client_factory,
        username=settings.chat_username,
        history_limit=settings.message_history_limit,
        buffer_capacity=settings.message_buffer_capacity,
        ingest_history=settings.ingest_message_history,
    )


async def serve(settings: Settings, supervisor: ConnectionSupervisor) -> None:
    """Connect to the chat room and serve MCP requests until stdin closes."""
    router = ChatToolRouter(supervisor)
    server = create_server(router, name=settings.app_name, version=settings.app_version)

    await supervisor.start()
    try:
        logger.info("Pump.fun Chat MCP server running", room_id=supervisor.room_id)
        await run_stdio(server)
    finally:
        await supervisor.stop()


def main():
    """Main entry point."""
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        stdio_mode=settings.mcp_stdio_mode,
    )

    try:
        supervisor = build_supervisor(settings)
    except ConfigurationError as e:
        logger.error("Server failed to start", error=e.message, config_key=e.context["config_key"])
        print(f"Error: {e.message}", file=sys.stderr)
        print(f"Example: PUMP_FUN_TOKEN={EXAMPLE_TOKEN} pump-fun-chat-mcp", file=sys.stderr)
        sys.exit(1)

    logger.info(
        "Starting pump.fun chat MCP server",
        version=settings.app_version,
        room_id=settings.room_id,
        stdio_mode=settings.mcp_stdio_mode,
    )

    try:
        asyncio.run(serve(settings, supervisor))
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error("Server stopped unexpectedly", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
