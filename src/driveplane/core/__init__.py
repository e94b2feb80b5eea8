"""Core module exports."""

from driveplane.core.errors import (
    BuildError,
    ConfigError,
    DrivePlaneError,
    ErrorCode,
    InternalError,
    RequestError,
)
from driveplane.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    index_context,
    set_request_id,
)

__all__ = [
    # Errors
    "BuildError",
    "ConfigError",
    "DrivePlaneError",
    "ErrorCode",
    "InternalError",
    "RequestError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "index_context",
    "set_request_id",
]
