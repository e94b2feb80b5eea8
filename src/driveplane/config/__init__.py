"""Config module exports."""

from driveplane.config.loader import load_config
from driveplane.config.models import (
    DirectoryConfig,
    DrivePlaneConfig,
    LoggingConfig,
    SearchConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "DirectoryConfig",
    "DrivePlaneConfig",
    "LoggingConfig",
    "SearchConfig",
    "ServerConfig",
]
