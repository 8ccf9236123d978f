"""Core module exports."""

from convexgen.core.errors import (
    ConfigError,
    ConvexGenError,
    ErrorCode,
    GenerateError,
    ParseError,
)
from convexgen.core.logging import configure_logging, get_logger
from convexgen.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "ConvexGenError",
    "ErrorCode",
    "GenerateError",
    "ParseError",
    # Logging
    "configure_logging",
    "get_logger",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
