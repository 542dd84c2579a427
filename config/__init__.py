"""Configuration for the pump.fun chat MCP bridge."""
