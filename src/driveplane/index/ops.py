"""High-level orchestration of the path search index.

This module implements the SearchCoordinator - the entry point for all index
operations and the single owner of the IndexStore. The REST layer and CLI
talk to the coordinator only.

Pipeline: DirectoryTree.iter_entries -> build_generation -> IndexStore.publish
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol

import structlog

from driveplane.core.errors import BuildError
from driveplane.core.logging import index_context
from driveplane.index.builder import rebuild
from driveplane.index.models import IndexEntry, ResourceRef, SearchCategory, SearchResult
from driveplane.index.query import search
from driveplane.index.store import IndexStore

logger = structlog.get_logger()


class TreeRecord(Protocol):
    @property
    def created_ms(self) -> int: ...

    @property
    def last_changed_ms(self) -> int: ...


class EntrySource(Protocol):
    """What the coordinator needs from the directory tree."""

    def iter_entries(self) -> Iterator[IndexEntry]: ...

    def get(self, ref: ResourceRef) -> TreeRecord | None: ...

    @property
    def last_mutation_ms(self) -> int: ...

    @property
    def version(self) -> int: ...

    def __len__(self) -> int: ...


@dataclass
class ReindexStats:
    """Statistics from one successful reindex."""

    indexed_count: int
    skipped_deleted: int
    collisions: int
    timestamp_ms: int
    duration_seconds: float


@dataclass
class IndexStatus:
    """Snapshot of index freshness for status reporting."""

    built: bool
    indexed_count: int
    last_index_update_ms: int
    tree_last_mutation_ms: int
    tree_size: int
    stale: bool


class SearchCoordinator:
    """Owns the index store and coordinates rebuilds and queries.

    Calls are expected one at a time (a single event loop). A rebuild
    finishes and publishes, or fails and leaves the live generation as it was.
    """

    def __init__(
        self,
        tree: EntrySource,
        store: IndexStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.tree = tree
        self.store = store if store is not None else IndexStore()
        self._clock = clock

    def reindex(self) -> ReindexStats:
        """Rebuild the whole index from the current tree.

        Raises:
            BuildError: construction failed; the previous generation stays live.
        """
        start = time.perf_counter()
        version = self.tree.version
        with index_context(tree_version=version):
            logger.info("reindex_started", tree_size=len(self.tree))
            try:
                result = rebuild(
                    self.store, self.tree.iter_entries(), clock=self._clock, source_version=version
                )
            except BuildError as e:
                logger.error("reindex_failed", error=e.error_name, message=e.message)
                raise

            stats = ReindexStats(
                indexed_count=result.indexed_count,
                skipped_deleted=result.skipped_deleted,
                collisions=result.collisions,
                timestamp_ms=result.generation.built_at_ms,
                duration_seconds=time.perf_counter() - start,
            )
            logger.info(
                "reindex_completed",
                indexed=stats.indexed_count,
                skipped_deleted=stats.skipped_deleted,
                collisions=stats.collisions,
                duration_seconds=round(stats.duration_seconds, 3),
            )
        return stats

    def search(
        self,
        query: str,
        limit: int,
        categories: Iterable[SearchCategory] | None = None,
    ) -> list[SearchResult]:
        """Fuzzy path search. Never raises; returns [] before the first reindex."""
        with index_context(query=query, generation=self.store.publish_count):
            results = search(self.store, query, limit, categories)
            logger.debug("search_completed", limit=limit, hits=len(results))
        return results

    def indexed_count(self) -> int:
        """Number of keys in the live generation, 0 before the first build."""
        current = self.store.current()
        return 0 if current is None else len(current)

    def last_index_update_time(self) -> int:
        """Milliseconds since epoch of the last successful build, or 0."""
        return self.store.last_build_time() or 0

    def ms_since_last_index(self) -> int | None:
        """Age of the live generation, or None if nothing was built yet."""
        built = self.store.last_build_time()
        if built is None:
            return None
        return max(0, int(self._clock() * 1000) - built)

    def is_stale(self) -> bool:
        """True when the tree was written to after the live generation read it."""
        current = self.store.current()
        if current is None:
            return len(self.tree) > 0
        return self.tree.version != current.source_version

    def status(self) -> IndexStatus:
        current = self.store.current()
        return IndexStatus(
            built=current is not None,
            indexed_count=self.indexed_count(),
            last_index_update_ms=self.last_index_update_time(),
            tree_last_mutation_ms=self.tree.last_mutation_ms,
            tree_size=len(self.tree),
            stale=self.is_stale(),
        )
