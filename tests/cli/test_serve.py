"""Tests for dpl serve command."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from driveplane.cli.main import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path) -> Generator[None, None, None]:
    """Keep the user's config out of these tests."""
    with patch("driveplane.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield


@pytest.fixture
def mock_run_server() -> Generator[MagicMock, None, None]:
    """Stop serve from actually binding a port."""
    with patch("driveplane.cli.serve.run_server") as mock:
        yield mock


class TestServeCommand:
    """Tests for serve command."""

    def test_serves_snapshot(self, tmp_path: Path, mock_run_server: MagicMock) -> None:
        """The snapshot is indexed before the server starts."""
        snapshot = tmp_path / "snapshot.yaml"
        snapshot.write_text("files:\n  - id: f1\n    path: /Drive::/a.txt\n")

        result = runner.invoke(cli, ["serve", "--snapshot", str(snapshot), "--port", "9001"])

        assert result.exit_code == 0, result.output
        config, coordinator = mock_run_server.call_args.args
        assert config.server.port == 9001
        assert config.directory.snapshot_path == str(snapshot)
        assert coordinator.status().indexed_count == 1

    def test_config_file(self, tmp_path: Path, mock_run_server: MagicMock) -> None:
        """--config values are applied and CLI flags win over them."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("server:\n  host: 0.0.0.0\n  port: 8000\n")

        result = runner.invoke(cli, ["serve", "--config", str(config_file), "--port", "8001"])

        assert result.exit_code == 0, result.output
        config, _ = mock_run_server.call_args.args
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8001

    def test_invalid_config(self, tmp_path: Path, mock_run_server: MagicMock) -> None:
        """Config errors exit without starting the server."""
        result = runner.invoke(cli, ["serve", "--port", "70000"])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output
        mock_run_server.assert_not_called()

    def test_invalid_snapshot(self, tmp_path: Path, mock_run_server: MagicMock) -> None:
        """A snapshot that fails to load exits without starting the server."""
        snapshot = tmp_path / "snapshot.yaml"
        snapshot.write_text("files: [unclosed\n")

        result = runner.invoke(cli, ["serve", "--snapshot", str(snapshot)])

        assert result.exit_code == 1
        assert "CONFIG_PARSE_ERROR" in result.output
        mock_run_server.assert_not_called()
