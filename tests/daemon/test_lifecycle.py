"""Tests for daemon/lifecycle.py and daemon/app.py."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from starlette.applications import Starlette

from driveplane.config.models import DirectoryConfig, DrivePlaneConfig, SearchConfig
from driveplane.core.errors import BuildError, ConfigError
from driveplane.daemon.app import create_app
from driveplane.daemon.lifecycle import build_coordinator, run_server
from driveplane.index.ops import SearchCoordinator


def _config(snapshot: Path | None = None, **search: Any) -> DrivePlaneConfig:
    return DrivePlaneConfig(
        directory=DirectoryConfig(snapshot_path=str(snapshot) if snapshot else None),
        search=SearchConfig(**search),
    )


class TestCreateApp:
    """Tests for create_app function."""

    def test_returns_starlette_app(self, coordinator: SearchCoordinator) -> None:
        """The factory returns a Starlette app holding the coordinator."""
        app = create_app(coordinator, SearchConfig())

        assert isinstance(app, Starlette)
        assert app.state.coordinator is coordinator


class TestBuildCoordinator:
    """Tests for build_coordinator function."""

    def test_loads_snapshot_and_indexes(self, tmp_path: Path, clock: Any) -> None:
        """The snapshot is loaded and indexed on startup."""
        snapshot = tmp_path / "snapshot.yaml"
        snapshot.write_text("files:\n  - id: f1\n    path: /Drive::/a.txt\n")

        coordinator = build_coordinator(_config(snapshot), clock=clock)

        assert [r.resource_ref.id for r in coordinator.search("a", 10)] == ["f1"]
        assert coordinator.last_index_update_time() == int(clock.now * 1000)

    def test_no_snapshot_gives_empty_drive(self, clock: Any) -> None:
        """Without a snapshot the drive starts empty."""
        coordinator = build_coordinator(_config(), clock=clock)

        assert len(coordinator.tree) == 0
        assert coordinator.status().built

    def test_skip_startup_reindex(self, clock: Any) -> None:
        """reindex_on_startup=False leaves the index unbuilt."""
        coordinator = build_coordinator(_config(reindex_on_startup=False), clock=clock)

        assert coordinator.last_index_update_time() == 0

    def test_missing_snapshot_raises(self, tmp_path: Path) -> None:
        """A configured snapshot that does not exist is a config error."""
        with pytest.raises(ConfigError):
            build_coordinator(_config(tmp_path / "missing.yaml"))

    def test_startup_build_failure_is_not_fatal(self, clock: Any) -> None:
        """A failed startup build leaves the server running without an index."""
        with patch.object(
            SearchCoordinator,
            "reindex",
            side_effect=BuildError.construction_failed("boom"),
        ):
            coordinator = build_coordinator(_config(), clock=clock)

        assert coordinator.store.current() is None


class TestRunServer:
    """Tests for run_server function."""

    def test_runs_uvicorn_with_configured_address(self, coordinator: SearchCoordinator) -> None:
        """uvicorn is started on the configured host and port."""
        config = _config()
        config.server.port = 9123

        with (
            patch("driveplane.daemon.lifecycle.uvicorn.Config") as mock_config,
            patch("driveplane.daemon.lifecycle.uvicorn.Server") as mock_server,
        ):
            mock_server.return_value = MagicMock()
            run_server(config, coordinator)

        kwargs = mock_config.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9123
        mock_server.return_value.run.assert_called_once()
