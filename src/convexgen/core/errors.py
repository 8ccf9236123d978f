"""convex-gen error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 4xxx: Generate
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Parse (3xxx)
    PARSE_FILE_UNREADABLE = 3001

    # Generate (4xxx)
    GENERATE_OUTPUT_FAILED = 4001


@dataclass(frozen=True, slots=True)
class ConvexGenError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ConvexGenError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str, hint: str = "") -> "ConfigError":
        message = f"Missing required config field: {field}"
        if hint:
            message = f"{message} ({hint})"
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=message,
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ParseError(ConvexGenError):
    """A single source file could not be parsed. Non-fatal for a run."""

    @classmethod
    def file_unreadable(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_FILE_UNREADABLE,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class GenerateError(ConvexGenError):
    """Output directory creation, cleaning or writing failed."""

    @classmethod
    def output_failed(cls, path: str, operation: str, reason: str) -> "GenerateError":
        return cls(
            code=ErrorCode.GENERATE_OUTPUT_FAILED,
            message=f"Failed to {operation} {path}: {reason}",
            details={"path": path, "operation": operation, "reason": reason},
        )
