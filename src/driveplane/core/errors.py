"""DrivePlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index
- 4xxx: Request
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003

    # Index (3xxx)
    INDEX_BUILD_FAILED = 3001
    INDEX_KEY_ORDER = 3002

    # Request (4xxx)
    REQUEST_INVALID = 4001
    REINDEX_THROTTLED = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DrivePlaneError(Exception):
    """Base error with structured context for REST responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INDEX_BUILD_FAILED')."""
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


class ConfigError(DrivePlaneError):
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


class BuildError(DrivePlaneError):
    """Search index construction failed.

    Raised only by a full rebuild. The previously published generation is
    never touched, so the caller may simply retry.
    """

    @classmethod
    def key_order(cls, key: str, previous: str, reason: str) -> "BuildError":
        return cls(
            code=ErrorCode.INDEX_KEY_ORDER,
            message=f"Index keys out of order at {key!r}: {reason}",
            retryable=True,
            details={"key": key, "previous": previous, "reason": reason},
        )

    @classmethod
    def construction_failed(cls, reason: str, **details: Any) -> "BuildError":
        return cls(
            code=ErrorCode.INDEX_BUILD_FAILED,
            message=f"Failed to build search index: {reason}",
            retryable=True,
            details=details,
        )


class RequestError(DrivePlaneError):
    """Client request rejected before reaching the index."""

    @classmethod
    def invalid_field(cls, field: str, reason: str) -> "RequestError":
        return cls(
            code=ErrorCode.REQUEST_INVALID,
            message=f"Validation error: {field}: {reason}",
            details={"field": field, "reason": reason},
        )

    @classmethod
    def reindex_throttled(cls, elapsed_ms: int, cooldown_ms: int) -> "RequestError":
        return cls(
            code=ErrorCode.REINDEX_THROTTLED,
            message="Reindex was performed recently. Use 'force: true' to override.",
            retryable=True,
            details={"elapsed_ms": elapsed_ms, "cooldown_ms": cooldown_ms},
        )


class InternalError(DrivePlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
