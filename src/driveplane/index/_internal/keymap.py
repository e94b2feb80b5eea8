"""Ordered, immutable key -> score map with automaton-driven streaming search.

The map is built once from keys inserted in strictly increasing order and
is never mutated afterwards. Keys are Python strings compared by code
point, which is the same order UTF-8 byte strings sort in.

Usage::

    builder = KeyMapBuilder()
    builder.insert("/drive::/a", 1)
    builder.insert("/drive::/b", 1)
    keymap = builder.finish()

    for key, score in keymap.search(Subsequence("db")):
        ...
"""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from typing import Any

from driveplane.config.constants import SCORE_MAX
from driveplane.index._internal.automaton import Automaton


class KeyMapError(Exception):
    """Base error raised while building a key map."""


class OutOfOrderError(KeyMapError):
    """A key was inserted after a larger key."""

    def __init__(self, key: str, previous: str) -> None:
        super().__init__(f"key {key!r} inserted after {previous!r}")
        self.key = key
        self.previous = previous


class DuplicateKeyError(KeyMapError):
    """The same key was inserted twice in a row."""

    def __init__(self, key: str) -> None:
        super().__init__(f"duplicate key {key!r}")
        self.key = key
        self.previous = key


class ScoreRangeError(KeyMapError):
    """A score does not fit in an unsigned 64-bit value."""

    def __init__(self, key: str, score: int) -> None:
        super().__init__(f"score {score} for key {key!r} outside 0..{SCORE_MAX}")
        self.key = key
        self.score = score


def _common_prefix_len(a: str, b: str) -> int:
    limit = min(len(a), len(b))
    i = 0
    while i < limit and a[i] == b[i]:
        i += 1
    return i


class KeyMap:
    """Immutable sorted map from key to score. Build with KeyMapBuilder."""

    __slots__ = ("_keys", "_scores")

    def __init__(self, keys: tuple[str, ...] = (), scores: tuple[int, ...] = ()) -> None:
        if len(keys) != len(scores):
            raise ValueError("keys and scores must have the same length")
        self._keys = keys
        self._scores = scores

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._find(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def _find(self, key: str) -> int | None:
        i = bisect.bisect_left(self._keys, key)
        if i < len(self._keys) and self._keys[i] == key:
            return i
        return None

    def get(self, key: str, default: int | None = None) -> int | None:
        i = self._find(key)
        return default if i is None else self._scores[i]

    def keys(self) -> tuple[str, ...]:
        return self._keys

    def items(self) -> Iterator[tuple[str, int]]:
        return zip(self._keys, self._scores, strict=True)

    def _prefix_end(self, prefix: str, lo: int) -> int:
        """Index of the first key at or after lo that does not start with prefix."""
        # Keys sharing a prefix are contiguous, so the predicate is monotonic from lo.
        return bisect.bisect_left(
            self._keys, True, lo=lo, key=lambda k: not k.startswith(prefix)
        )

    def search(self, automaton: Automaton[Any]) -> Iterator[tuple[str, int]]:
        """Stream (key, score) pairs accepted by automaton, in key order.

        Automaton states are cached per depth of the current key and reused
        for the prefix it shares with the previous key. A prefix the
        automaton can no longer match skips every key below it; a prefix it
        will always match yields every key below it without further steps.
        """
        keys = self._keys
        scores = self._scores
        count = len(keys)
        states: list[Any] = [automaton.start()]
        previous = ""
        i = 0

        while i < count:
            key = keys[i]
            depth = _common_prefix_len(previous, key)
            del states[depth + 1 :]
            state = states[depth]

            while True:
                if automaton.will_always_match(state) or not automaton.can_match(state):
                    end = self._prefix_end(key[:depth], i)
                    if automaton.is_match(state):
                        for j in range(i, end):
                            yield keys[j], scores[j]
                    i = end
                    previous = keys[end - 1]
                    break
                if depth == len(key):
                    if automaton.is_match(state):
                        yield key, scores[i]
                    i += 1
                    previous = key
                    break
                state = automaton.accept(state, key[depth])
                depth += 1
                states.append(state)


class KeyMapBuilder:
    """Accumulates strictly increasing keys, then freezes them into a KeyMap."""

    def __init__(self) -> None:
        self._keys: list[str] = []
        self._scores: list[int] = []
        self._finished = False

    def __len__(self) -> int:
        return len(self._keys)

    def insert(self, key: str, score: int) -> None:
        """Append a key.

        Raises:
            OutOfOrderError: key sorts before the previous key.
            DuplicateKeyError: key equals the previous key.
            ScoreRangeError: score is not an unsigned 64-bit value.
            KeyMapError: the builder was already finished.
        """
        if self._finished:
            raise KeyMapError("builder already finished")
        if not 0 <= score <= SCORE_MAX:
            raise ScoreRangeError(key, score)
        if self._keys:
            previous = self._keys[-1]
            if key == previous:
                raise DuplicateKeyError(key)
            if key < previous:
                raise OutOfOrderError(key, previous)
        self._keys.append(key)
        self._scores.append(score)

    def finish(self) -> KeyMap:
        """Freeze the inserted keys. The builder accepts no further inserts."""
        self._finished = True
        return KeyMap(tuple(self._keys), tuple(self._scores))
