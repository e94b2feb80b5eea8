"""DrivePlane HTTP server."""

from driveplane.daemon.app import create_app
from driveplane.daemon.lifecycle import build_coordinator, run_server

__all__ = [
    "build_coordinator",
    "create_app",
    "run_server",
]
