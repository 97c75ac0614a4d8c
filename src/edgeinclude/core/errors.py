"""edgeinclude error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Placeholder (codec, dispatch, rendering)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Placeholder (3xxx)
    MALFORMED_IDENTIFIER = 3001
    UNENCODABLE_ARGUMENT = 3002
    UNKNOWN_CALLBACK = 3003
    RENDER_FAILURE = 3004


@dataclass(frozen=True, slots=True)
class EdgeIncludeError(Exception):
    """Base error with structured context for logs and HTTP responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'MALFORMED_IDENTIFIER')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(EdgeIncludeError):
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
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class PlaceholderError(EdgeIncludeError):
    """Errors building or resolving a placeholder."""

    @classmethod
    def unencodable_argument(cls, callback_name: str, reason: str) -> "PlaceholderError":
        return cls(
            code=ErrorCode.UNENCODABLE_ARGUMENT,
            message=f"Cannot encode placeholder for '{callback_name}': {reason}",
            details={"callback": callback_name, "reason": reason},
        )

    @classmethod
    def unknown_callback(cls, callback_name: str) -> "PlaceholderError":
        return cls(
            code=ErrorCode.UNKNOWN_CALLBACK,
            message=f"No callback registered as '{callback_name}'",
            details={"callback": callback_name},
        )


class MalformedIdentifier(PlaceholderError):
    """Identifier does not decode to a callback and argument list."""

    @classmethod
    def from_reason(cls, identifier: str, reason: str) -> "MalformedIdentifier":
        return cls(
            code=ErrorCode.MALFORMED_IDENTIFIER,
            message=f"Malformed placeholder identifier: {reason}",
            details={"identifier": identifier[:200], "reason": reason},
        )


class RenderFailure(PlaceholderError):
    """The invoked callback failed while producing fragment output."""

    @classmethod
    def from_exception(cls, callback_name: str, exc: BaseException) -> "RenderFailure":
        return cls(
            code=ErrorCode.RENDER_FAILURE,
            message=f"Callback '{callback_name}' failed: {exc}",
            details={"callback": callback_name, "exception": type(exc).__name__},
        )
