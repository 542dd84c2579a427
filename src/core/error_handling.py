"""
Error handling for the pump.fun chat MCP bridge.

This module provides hierarchical error classification for the bridge and the
backoff configuration used by the chat client when it reconnects.
"""

import random
import time
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    CRITICAL = auto()  # Process cannot continue
    HIGH = auto()  # Request failed
    MEDIUM = auto()  # Recoverable, may retry
    LOW = auto()  # Caller mistake, logged and reported


class ErrorCategory(Enum):
    """Error categories for classification and routing."""

    NETWORK = auto()  # Chat connection errors
    PROTOCOL = auto()  # Malformed chat frames
    CONFIGURATION = auto()  # Bootstrap configuration errors
    MCP_PROTOCOL = auto()  # MCP request errors


class BaseError(Exception):
    """Base exception class with enhanced error information."""

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.NETWORK,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """
        Initialize base error with classification metadata.

        Args:
            message: Human-readable error message
            severity: Error severity level
            category: Error category for classification
            error_code: Unique error code for tracking
            context: Additional context information
            recoverable: Whether error is recoverable
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.category = category
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.recoverable = recoverable
        self.timestamp = datetime.now(timezone.utc)

    def _generate_error_code(self) -> str:
        """Generate unique error code based on category and timestamp."""
        timestamp = int(time.time() * 1000) % 100000
        return f"{self.category.name[:3]}-{self.severity.name[:3]}-{timestamp}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.name,
            "category": self.category.name,
            "context": self.context,
            "recoverable": self.recoverable,
            "timestamp": self.timestamp.isoformat(),
        }


class NetworkError(BaseError):
    """Chat connection errors."""

    def __init__(self, message: str, endpoint: str, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        context["endpoint"] = endpoint
        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.NETWORK,
            context=context,
            **kwargs,
        )


class ProtocolError(BaseError):
    """Chat frame could not be decoded."""

    def __init__(self, message: str, frame: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        if frame is not None:
            context["frame"] = frame[:200]
        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.PROTOCOL,
            context=context,
            **kwargs,
        )


class ConfigurationError(BaseError):
    """Configuration errors."""

    def __init__(self, message: str, config_key: str, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        context["config_key"] = config_key
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            context=context,
            recoverable=False,
            **kwargs,
        )


class MCPProtocolError(BaseError):
    """MCP protocol-specific errors."""

    def __init__(self, message: str, tool_name: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        if tool_name:
            context["tool_name"] = tool_name
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(
            message,
            category=ErrorCategory.MCP_PROTOCOL,
            context=context,
            recoverable=False,
            **kwargs,
        )


class UnknownToolError(MCPProtocolError):
    """Tool call named a tool that is not in the catalog."""

    def __init__(self, tool_name: str, **kwargs: Any) -> None:
        super().__init__(f"Unknown tool: {tool_name}", tool_name=tool_name, **kwargs)


class InvalidToolArgumentsError(MCPProtocolError):
    """Tool call arguments do not match the tool's input schema."""

    def __init__(self, tool_name: str, detail: str, **kwargs: Any) -> None:
        context = kwargs.pop("context", {})
        context["detail"] = detail
        super().__init__(
            f"Invalid arguments for {tool_name}: {detail}",
            tool_name=tool_name,
            severity=ErrorSeverity.LOW,
            context=context,
            **kwargs,
        )


class RetryConfig:
    """Configuration for retry logic."""

    def __init__(
        self,
        max_attempts: int = 5,
        initial_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
    ) -> None:
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum number of retry attempts
            initial_delay: Initial delay in seconds
            max_delay: Maximum delay in seconds
            exponential_base: Base for exponential backoff
            jitter: Add random jitter to delays
        """
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for given attempt number with exponential backoff."""
        delay = min(self.initial_delay * (self.exponential_base ** attempt), self.max_delay)
        if self.jitter:
            delay = delay * (0.5 + random.random())
        return delay

    def has_attempts_left(self, attempt: int) -> bool:
        """Check whether a zero-indexed attempt is still allowed."""
        return attempt < self.max_attempts
