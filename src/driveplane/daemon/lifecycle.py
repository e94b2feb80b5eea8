"""Server lifecycle: composition root and uvicorn runner."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

import structlog
import uvicorn

from driveplane.config.models import DrivePlaneConfig
from driveplane.core.errors import BuildError
from driveplane.directory import DirectoryTree, load_snapshot
from driveplane.index.ops import SearchCoordinator

logger = structlog.get_logger()


def build_coordinator(
    config: DrivePlaneConfig,
    clock: Callable[[], float] = time.time,
) -> SearchCoordinator:
    """Load the directory tree and wire a coordinator around it.

    Builds the first generation when search.reindex_on_startup is set. A
    failed startup build is logged and the server starts with no index;
    search then returns [] until a reindex succeeds.

    Raises:
        ConfigError: the configured snapshot cannot be loaded.
    """
    snapshot_path = config.directory.snapshot_path
    if snapshot_path:
        tree = load_snapshot(Path(snapshot_path), clock=clock)
    else:
        logger.warning("no_snapshot_configured", message="Starting with an empty drive")
        tree = DirectoryTree(clock=clock)

    coordinator = SearchCoordinator(tree, clock=clock)
    if config.search.reindex_on_startup:
        try:
            coordinator.reindex()
        except BuildError as e:
            logger.error("startup_reindex_failed", error=e.error_name, message=e.message)
    return coordinator


def run_server(config: DrivePlaneConfig, coordinator: SearchCoordinator) -> None:
    """Serve the REST API until interrupted."""
    from driveplane.daemon.app import create_app

    app = create_app(coordinator, config.search)

    base_url = f"http://{config.server.host}:{config.server.port}"
    logger.info(
        "server starting",
        url=base_url,
        log_outputs=[output.destination for output in config.logging.outputs],
    )
    logger.info("endpoint", name="health", url=f"{base_url}/health")
    logger.info("endpoint", name="status", url=f"{base_url}/status")
    logger.info("endpoint", name="search", url=f"{base_url}/organization/search")
    logger.info("endpoint", name="reindex", url=f"{base_url}/organization/reindex")

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",  # Use structlog instead
        ws="none",
    )
    uvicorn.Server(uvicorn_config).run()
    logger.info("server stopped")
