"""Core infrastructure components."""

from .error_handling import (
    BaseError,
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    InvalidToolArgumentsError,
    MCPProtocolError,
    NetworkError,
    ProtocolError,
    RetryConfig,
    UnknownToolError,
)

__all__ = [
    "BaseError",
    "ConfigurationError",
    "ErrorCategory",
    "ErrorSeverity",
    "InvalidToolArgumentsError",
    "MCPProtocolError",
    "NetworkError",
    "ProtocolError",
    "RetryConfig",
    "UnknownToolError",
]
