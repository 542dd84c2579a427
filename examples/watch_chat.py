"""
Pump.fun Chat Watcher Example

This example connects to a token's chat room with PumpChatClient and prints
the traffic to the console:
- Connection and disconnection notices
- Replayed message history after joining
- New messages as they arrive
- Server errors (e.g. sending without pump.fun authentication)

Usage:
    python examples/watch_chat.py [TOKEN]

The token defaults to PUMP_FUN_TOKEN, then to a sample coin. The watcher exits
with status 1 when the client gives up reconnecting.
"""

import asyncio
import os
import sys

from rich.console import Console

from src.chat import (
    ClientError,
    Connected,
    Disconnected,
    MaxReconnectAttemptsReached,
    MessageHistory,
    MessageReceived,
    PumpChatClient,
    ServerError,
)

SAMPLE_COIN = "y31hFyYbrVW4R53Zfka8WJfQpwpMLfCcAjVKAonpump"

console = Console()


async def watch(coin: str) -> int:
    """Print chat events until interrupted. Returns the process exit status."""
    client = PumpChatClient(
        room_id=coin,
        username="codingbutter",
        message_history_limit=20,  # Keep only the last 20 messages in memory
    )

    console.print(f"Connecting to pump.fun chat for token: {coin}")
    await client.connect()

    try:
        async for event in client.events:
            match event:
                case Connected():
                    console.print("[green]Connected to pump.fun chat![/green]")
                    console.print(f"Monitoring token: {coin}")
                    console.print("Waiting for messages...")
                case MessageHistory(messages=messages):
                    console.print(f"\n=== Received {len(messages)} historical messages ===")
                    for message in messages:
                        console.print(message.format_line(), markup=False)
                    console.print("=== End of history ===\n")
                case MessageReceived(message=message):
                    console.print(message.format_line(), markup=False)
                case ServerError() as error:
                    console.print(f"[red]Server error:[/red] {error.message}")
                    if error.is_auth_required:
                        console.print("Note: sending requires pump.fun authentication")
                case ClientError(error=error):
                    console.print(f"[red]Connection error:[/red] {error}")
                case Disconnected():
                    console.print("Disconnected from chat")
                    console.print("Attempting to reconnect...")
                case MaxReconnectAttemptsReached():
                    console.print("[red]Failed to reconnect after maximum attempts[/red]")
                    console.print("Please check your connection and restart the application")
                    return 1
    finally:
        await client.disconnect()
    return 0


def main() -> None:
    coin = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("PUMP_FUN_TOKEN", SAMPLE_COIN)
    try:
        status = asyncio.run(watch(coin))
    except KeyboardInterrupt:
        console.print("\nShutting down...")
        console.print("Goodbye!")
        status = 0
    sys.exit(status)


if __name__ == "__main__":
    main()
