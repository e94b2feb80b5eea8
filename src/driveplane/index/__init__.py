"""Index module - path search over the drive's live files and folders.

This module provides:
- Normalization shared by indexed paths and queries
- Full, all-or-nothing builds into immutable generations
- Subsequence (fuzzy) search streamed over the sorted key map
- Freshness tracking of the last successful build

Public API is in `driveplane.index.ops`:
- SearchCoordinator: High-level orchestration
- ReindexStats, IndexStatus: Result types

Internal structures are in `driveplane.index._internal/`.
"""

from driveplane.index.builder import BuildResult, build_generation, rebuild
from driveplane.index.models import (
    IndexEntry,
    ResourceKind,
    ResourceRef,
    SearchCategory,
    SearchResult,
)
from driveplane.index.normalize import normalize_path, normalize_query
from driveplane.index.ops import IndexStatus, ReindexStats, SearchCoordinator
from driveplane.index.query import search, search_generation
from driveplane.index.store import IndexStore, SearchIndexGeneration

__all__ = [
    # Models
    "IndexEntry",
    "ResourceKind",
    "ResourceRef",
    "SearchCategory",
    "SearchResult",
    # Normalization
    "normalize_path",
    "normalize_query",
    # Build
    "BuildResult",
    "build_generation",
    "rebuild",
    # Store
    "IndexStore",
    "SearchIndexGeneration",
    # Query
    "search",
    "search_generation",
    # Coordinator
    "IndexStatus",
    "ReindexStats",
    "SearchCoordinator",
]
