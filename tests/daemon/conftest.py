"""Shared fixtures for daemon tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.testclient import TestClient

from driveplane.config.models import SearchConfig
from driveplane.daemon.app import create_app
from driveplane.directory.tree import DirectoryTree
from driveplane.index.ops import SearchCoordinator


@pytest.fixture
def tree(clock: Any) -> DirectoryTree:
    """Two files and a folder under /Drive::/."""
    tree = DirectoryTree(clock=clock)
    tree.add_file("f1", "/Drive::/report.pdf")
    tree.add_file("f2", "/Drive::/Reports/q1.pdf")
    tree.add_folder("d1", "/Drive::/Reports/")
    return tree


@pytest.fixture
def coordinator(tree: DirectoryTree, clock: Any) -> SearchCoordinator:
    """Coordinator with one generation already published."""
    coordinator = SearchCoordinator(tree, clock=clock)
    coordinator.reindex()
    return coordinator


@pytest.fixture
def search_config() -> SearchConfig:
    """Default search limits."""
    return SearchConfig()


@pytest.fixture
def client(coordinator: SearchCoordinator, search_config: SearchConfig) -> TestClient:
    """Test client over the full app."""
    return TestClient(create_app(coordinator, search_config), raise_server_exceptions=False)
