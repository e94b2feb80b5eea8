"""Full index builds from a snapshot of directory entries.

Pipeline: drop deleted -> normalize -> dedupe (last write wins) -> sort ->
insert into KeyMapBuilder -> freeze -> stamp -> publish.

A build is all-or-nothing. Any failure raises BuildError before the store
is touched, so the previously published generation stays live.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from driveplane.config.constants import SCORE_DEFAULT
from driveplane.core.errors import BuildError
from driveplane.index._internal.keymap import (
    DuplicateKeyError,
    KeyMapBuilder,
    KeyMapError,
    OutOfOrderError,
)
from driveplane.index.models import IndexEntry, ResourceRef
from driveplane.index.normalize import normalize_path
from driveplane.index.store import IndexStore, SearchIndexGeneration

logger = structlog.get_logger()

EntryLike = IndexEntry | tuple[str, ResourceRef, bool]


@dataclass(frozen=True, slots=True)
class BuildResult:
    """A finished generation plus counters from the pass that built it."""

    generation: SearchIndexGeneration
    live_entries: int
    skipped_deleted: int
    collisions: int

    @property
    def indexed_count(self) -> int:
        return len(self.generation)


def _coerce(entry: EntryLike, position: int) -> IndexEntry:
    if isinstance(entry, IndexEntry):
        return entry
    try:
        return IndexEntry(*entry)
    except TypeError as e:
        raise BuildError.construction_failed(
            f"malformed entry at position {position}", position=position, error=str(e)
        ) from e


def _collect_live(entries: Iterable[EntryLike]) -> tuple[dict[str, ResourceRef], int, int, int]:
    """Normalize live entries into key -> ref, later entries overwriting earlier ones."""
    lookup: dict[str, ResourceRef] = {}
    live = 0
    skipped = 0
    collisions = 0

    for position, raw in enumerate(entries):
        entry = _coerce(raw, position)
        if entry.deleted:
            skipped += 1
            continue
        if not isinstance(entry.path, str):
            raise BuildError.construction_failed(
                f"path at position {position} is not a string",
                position=position,
                path_type=type(entry.path).__name__,
            )
        key = normalize_path(entry.path)
        live += 1
        if key in lookup:
            collisions += 1
            logger.debug(
                "index_key_collision",
                key=key,
                replaced=lookup[key].id,
                replacement=entry.ref.id,
            )
        lookup[key] = entry.ref

    return lookup, live, skipped, collisions


def build_generation(
    entries: Iterable[EntryLike],
    *,
    clock: Callable[[], float] = time.time,
    builder_factory: Callable[[], KeyMapBuilder] = KeyMapBuilder,
    source_version: int = 0,
) -> BuildResult:
    """Build one immutable generation from directory entries.

    Args:
        entries: (path, ref, deleted) triples or IndexEntry values.
        clock: Seconds since epoch; stamped onto the generation.
        builder_factory: Creates the empty key map builder to insert into.
        source_version: Version of the tree the entries were read from.

    Raises:
        BuildError: on malformed input or any key ordering failure.
    """
    lookup, live, skipped, collisions = _collect_live(entries)

    builder = builder_factory()
    try:
        for key in sorted(lookup):
            builder.insert(key, SCORE_DEFAULT)
    except (OutOfOrderError, DuplicateKeyError) as e:
        raise BuildError.key_order(e.key, e.previous, str(e)) from e
    except KeyMapError as e:
        raise BuildError.construction_failed(str(e)) from e

    keymap = builder.finish()
    generation = SearchIndexGeneration(
        keymap=keymap,
        lookup=MappingProxyType(lookup),
        built_at_ms=int(clock() * 1000),
        source_version=source_version,
    )
    return BuildResult(
        generation=generation,
        live_entries=live,
        skipped_deleted=skipped,
        collisions=collisions,
    )


def rebuild(
    store: IndexStore,
    entries: Iterable[EntryLike],
    *,
    clock: Callable[[], float] = time.time,
    source_version: int = 0,
) -> BuildResult:
    """Build a generation and publish it. On failure the store is unchanged."""
    result = build_generation(entries, clock=clock, source_version=source_version)
    store.publish(result.generation)
    return result
