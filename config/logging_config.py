"""Logging configuration for the pump.fun chat MCP server."""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

LOG_DIR = Path(__file__).parent.parent / "logs"

# Check if running in MCP stdio mode - stdout is reserved for JSON-RPC
MCP_STDIO_MODE = os.environ.get("MCP_STDIO_MODE", "true").lower() in ("true", "1", "yes")

# Configure structlog IMMEDIATELY at import time to use stderr in stdio mode
# This ensures any early logging doesn't corrupt stdout JSON-RPC communication
if MCP_STDIO_MODE:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,  # Allow reconfiguration later
    )


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    stdio_mode: Optional[bool] = None,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file name, written under ``logs/``
        stdio_mode: Keep stdout clean for JSON-RPC; defaults to MCP_STDIO_MODE
    """
    if stdio_mode is None:
        stdio_mode = MCP_STDIO_MODE

    renderer = (
        structlog.dev.ConsoleRenderer()
        if sys.stderr.isatty() and not stdio_mode
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # In MCP stdio mode, use a plain stderr handler instead of RichHandler
    if stdio_mode:
        console_handler: Dict[str, Any] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "default",
            "stream": "ext://sys.stderr",
        }
    else:
        console_handler = {
            "class": "rich.logging.RichHandler",
            "level": level,
            "formatter": "default",
            "rich_tracebacks": True,
            "markup": False,
        }

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": console_handler,
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "src": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "aiohttp": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "mcp": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    # Add file handler if log file is specified
    if log_file:
        LOG_DIR.mkdir(exist_ok=True)
        logging_config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "detailed",
            "filename": str(LOG_DIR / log_file),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
        }
        logging_config["root"]["handlers"].append("file")
        logging_config["loggers"]["src"]["handlers"].append("file")

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)
