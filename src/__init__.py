"""Pump.fun chat MCP bridge."""

__version__ = "1.0.0"
