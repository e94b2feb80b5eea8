"""Tests for index/builder.py module.

Covers:
- build_generation() filtering, normalization and collisions
- rebuild() publishing semantics
- BuildError on malformed input
"""

from __future__ import annotations

from typing import Any

import pytest

from driveplane.core.errors import BuildError, ErrorCode
from driveplane.index._internal.keymap import KeyMapBuilder
from driveplane.index.builder import build_generation, rebuild
from driveplane.index.models import IndexEntry, ResourceRef
from driveplane.index.store import IndexStore


class TestBuildGeneration:
    """Tests for build_generation function."""

    def test_keys_are_normalized(self, report_entries: list[IndexEntry], clock: Any) -> None:
        """Every stored key is the normalized path."""
        result = build_generation(report_entries, clock=clock)

        assert list(result.generation.keymap) == [
            "/drive::/report.pdf",
            "/drive::/reports/",
            "/drive::/reports/q1.pdf",
        ]

    def test_lookup_matches_keymap(self, report_entries: list[IndexEntry], clock: Any) -> None:
        """The lookup table and key map hold the same key set."""
        generation = build_generation(report_entries, clock=clock).generation

        assert set(generation.lookup) == set(generation.keymap)
        assert generation.resolve("/drive::/reports/") == ResourceRef.folder("d1")

    def test_deleted_entries_dropped(self, clock: Any) -> None:
        """Deleted entries never reach the index."""
        entries = [
            IndexEntry("/Drive::/keep.txt", ResourceRef.file("f1")),
            IndexEntry("/Drive::/gone.txt", ResourceRef.file("f2"), deleted=True),
        ]

        result = build_generation(entries, clock=clock)

        assert list(result.generation.keymap) == ["/drive::/keep.txt"]
        assert result.skipped_deleted == 1
        assert result.live_entries == 1

    def test_accepts_plain_tuples(self, clock: Any) -> None:
        """(path, ref, deleted) tuples are accepted as entries."""
        entries = [("/Drive::/a", ResourceRef.file("f1"), False)]

        result = build_generation(entries, clock=clock)

        assert result.indexed_count == 1

    def test_collision_last_write_wins(self, clock: Any) -> None:
        """Paths normalizing to the same key keep the later reference."""
        entries = [
            IndexEntry("/Drive::/Doc.txt", ResourceRef.file("first")),
            IndexEntry("/drive:://doc.txt", ResourceRef.file("second")),
        ]

        result = build_generation(entries, clock=clock)

        assert result.indexed_count == 1
        assert result.collisions == 1
        assert result.generation.resolve("/drive::/doc.txt") == ResourceRef.file("second")

    def test_deterministic(self, report_entries: list[IndexEntry], clock: Any) -> None:
        """Two builds over the same input give identical keys and scores."""
        first = build_generation(report_entries, clock=clock).generation
        second = build_generation(list(reversed(report_entries)), clock=clock).generation

        assert list(first.keymap.items()) == list(second.keymap.items())

    def test_stamps_build_time(self, report_entries: list[IndexEntry], clock: Any) -> None:
        """built_at_ms comes from the injected clock."""
        result = build_generation(report_entries, clock=clock)

        assert result.generation.built_at_ms == int(clock.now * 1000)

    def test_empty_input(self, clock: Any) -> None:
        """No entries builds an empty generation."""
        result = build_generation([], clock=clock)

        assert len(result.generation) == 0

    def test_lookup_is_read_only(self, report_entries: list[IndexEntry], clock: Any) -> None:
        """The published lookup cannot be mutated."""
        generation = build_generation(report_entries, clock=clock).generation

        with pytest.raises(TypeError):
            generation.lookup["/x"] = ResourceRef.file("x")  # type: ignore[index]

    def test_malformed_entry_raises_build_error(self, clock: Any) -> None:
        """An entry that is not a triple fails the build."""
        with pytest.raises(BuildError) as exc_info:
            build_generation([("/only-a-path",)], clock=clock)  # type: ignore[list-item]

        assert exc_info.value.code == ErrorCode.INDEX_BUILD_FAILED
        assert exc_info.value.retryable

    def test_non_string_path_raises_build_error(self, clock: Any) -> None:
        """A path that is not a string fails the build."""
        entries = [IndexEntry(42, ResourceRef.file("f1"))]  # type: ignore[arg-type]

        with pytest.raises(BuildError) as exc_info:
            build_generation(entries, clock=clock)

        assert exc_info.value.details["path_type"] == "int"

    @pytest.mark.parametrize(
        ("seeded", "previous"),
        [
            ("/zzz", "/zzz"),
            ("/drive::/report.pdf", "/drive::/report.pdf"),
        ],
    )
    def test_key_order_failure_raises_build_error(
        self, report_entries: list[IndexEntry], clock: Any, seeded: str, previous: str
    ) -> None:
        """A builder rejecting a key surfaces as an INDEX_KEY_ORDER BuildError."""

        def seeded_builder() -> KeyMapBuilder:
            builder = KeyMapBuilder()
            builder.insert(seeded, 1)
            return builder

        with pytest.raises(BuildError) as exc_info:
            build_generation(report_entries, clock=clock, builder_factory=seeded_builder)

        assert exc_info.value.code == ErrorCode.INDEX_KEY_ORDER
        assert exc_info.value.details["key"] == "/drive::/report.pdf"
        assert exc_info.value.details["previous"] == previous

    def test_finished_builder_raises_build_error(
        self, report_entries: list[IndexEntry], clock: Any
    ) -> None:
        """Any other key map failure is reported as a failed construction."""

        def finished_builder() -> KeyMapBuilder:
            builder = KeyMapBuilder()
            builder.finish()
            return builder

        with pytest.raises(BuildError) as exc_info:
            build_generation(report_entries, clock=clock, builder_factory=finished_builder)

        assert exc_info.value.code == ErrorCode.INDEX_BUILD_FAILED


class TestRebuild:
    """Tests for rebuild function."""

    def test_publishes_on_success(self, report_entries: list[IndexEntry], clock: Any) -> None:
        """A successful build becomes the current generation."""
        store = IndexStore()

        result = rebuild(store, report_entries, clock=clock)

        assert store.current() is result.generation

    def test_failure_leaves_store_untouched(
        self, report_entries: list[IndexEntry], clock: Any
    ) -> None:
        """A failed build keeps the previously published generation live."""
        store = IndexStore()
        previous = rebuild(store, report_entries, clock=clock).generation

        with pytest.raises(BuildError):
            rebuild(store, [("/bad",)], clock=clock)  # type: ignore[list-item]

        assert store.current() is previous
        assert store.publish_count == 1

    def test_old_generation_stays_usable(
        self, report_entries: list[IndexEntry], clock: Any
    ) -> None:
        """A reader holding an old generation keeps a consistent view."""
        store = IndexStore()
        rebuild(store, report_entries, clock=clock)
        held = store.current()
        assert held is not None

        rebuild(store, [IndexEntry("/Drive::/other", ResourceRef.file("x"))], clock=clock)

        assert len(held) == 3
        assert held.resolve("/drive::/report.pdf") == ResourceRef.file("f1")
