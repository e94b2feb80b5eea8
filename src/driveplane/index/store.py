"""Index generations and the store that publishes them.

A generation is one immutable build of the search index. The store holds
exactly one current generation; publishing replaces the reference in a
single assignment, so a reader that fetched the previous generation keeps
a consistent view until it is done with it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from driveplane.index._internal.keymap import KeyMap
from driveplane.index.models import ResourceRef

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class SearchIndexGeneration:
    """One immutable index build.

    keymap and lookup always hold the same key set. source_version is the
    directory tree version the entries were read at.
    """

    keymap: KeyMap
    lookup: Mapping[str, ResourceRef]
    built_at_ms: int
    source_version: int = 0

    def __len__(self) -> int:
        return len(self.keymap)

    def resolve(self, key: str) -> ResourceRef | None:
        return self.lookup.get(key)


class IndexStore:
    """Owns the currently published generation."""

    def __init__(self) -> None:
        self._current: SearchIndexGeneration | None = None
        self._publish_count = 0

    def publish(self, generation: SearchIndexGeneration) -> None:
        """Replace the current generation."""
        self._current = generation
        self._publish_count += 1
        logger.debug(
            "index_generation_published",
            keys=len(generation),
            built_at_ms=generation.built_at_ms,
            generation=self._publish_count,
        )

    def current(self) -> SearchIndexGeneration | None:
        """Return the live generation, or None if nothing was ever published."""
        return self._current

    def last_build_time(self) -> int | None:
        """Build timestamp (ms since epoch) of the live generation."""
        current = self._current
        return None if current is None else current.built_at_ms

    @property
    def publish_count(self) -> int:
        return self._publish_count
