"""Shared fixtures for index tests."""

from __future__ import annotations

import pytest

from driveplane.index.models import IndexEntry, ResourceRef


@pytest.fixture
def report_entries() -> list[IndexEntry]:
    """Two files and a folder under /Drive::/."""
    return [
        IndexEntry("/Drive::/report.pdf", ResourceRef.file("f1")),
        IndexEntry("/Drive::/Reports/q1.pdf", ResourceRef.file("f2")),
        IndexEntry("/Drive::/Reports/", ResourceRef.folder("d1")),
    ]
