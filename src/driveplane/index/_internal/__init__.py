"""Internal index structures. Import from driveplane.index instead."""

from driveplane.index._internal.automaton import AlwaysMatch, Automaton, Subsequence
from driveplane.index._internal.keymap import (
    DuplicateKeyError,
    KeyMap,
    KeyMapBuilder,
    KeyMapError,
    OutOfOrderError,
    ScoreRangeError,
)

__all__ = [
    "AlwaysMatch",
    "Automaton",
    "DuplicateKeyError",
    "KeyMap",
    "KeyMapBuilder",
    "KeyMapError",
    "OutOfOrderError",
    "ScoreRangeError",
    "Subsequence",
]
