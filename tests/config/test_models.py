"""Tests for config/models.py module.

Covers:
- ServerConfig port validation
- SearchConfig limits and cross-field validation
- DrivePlaneConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from driveplane.config.constants import PAGE_SIZE_MAX, QUERY_LENGTH_MAX
from driveplane.config.models import (
    DirectoryConfig,
    DrivePlaneConfig,
    LogOutputConfig,
    SearchConfig,
    ServerConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        """Default values."""
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_expands_home(self) -> None:
        """~ in file destinations is expanded."""
        config = LogOutputConfig(destination="~/drive.log")
        assert not config.destination.startswith("~")


class TestServerConfig:
    """Tests for ServerConfig model."""

    def test_defaults(self) -> None:
        """Binds to localhost by default."""
        config = ServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 7655

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_rejects_bad_port(self, port: int) -> None:
        """Ports outside 0-65535 are rejected."""
        with pytest.raises(ValidationError):
            ServerConfig(port=port)


class TestSearchConfig:
    """Tests for SearchConfig model."""

    def test_defaults(self) -> None:
        """Defaults match the REST limits."""
        config = SearchConfig()
        assert config.default_page_size == 50
        assert config.max_page_size == PAGE_SIZE_MAX
        assert config.max_query_length == QUERY_LENGTH_MAX
        assert config.reindex_cooldown_sec == 300.0
        assert config.reindex_on_startup is True

    def test_max_page_size_capped(self) -> None:
        """max_page_size cannot exceed the hard cap."""
        with pytest.raises(ValidationError):
            SearchConfig(max_page_size=PAGE_SIZE_MAX + 1)

    def test_default_must_fit_max(self) -> None:
        """default_page_size must not exceed max_page_size."""
        with pytest.raises(ValidationError, match="exceeds"):
            SearchConfig(default_page_size=100, max_page_size=10)

    def test_negative_cooldown_rejected(self) -> None:
        """Cooldown cannot be negative."""
        with pytest.raises(ValidationError):
            SearchConfig(reindex_cooldown_sec=-1)


class TestDrivePlaneConfig:
    """Tests for root config."""

    def test_sections_present(self) -> None:
        """Every section has defaults."""
        config = DrivePlaneConfig()
        assert config.logging.level == "INFO"
        assert config.directory == DirectoryConfig()
