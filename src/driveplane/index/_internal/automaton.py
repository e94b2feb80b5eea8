"""Automata that drive streaming search over the key map.

An automaton is stepped one character at a time along a key. The key map
asks three questions of each state so it can avoid stepping where the
outcome is already known:

- is_match: the characters consumed so far form an accepted key
- can_match: some continuation could still be accepted
- will_always_match: every continuation will be accepted
"""

from __future__ import annotations

from typing import Protocol, TypeVar

S = TypeVar("S")


class Automaton(Protocol[S]):
    """State machine over key characters."""

    def start(self) -> S: ...

    def accept(self, state: S, char: str) -> S: ...

    def is_match(self, state: S) -> bool: ...

    def can_match(self, state: S) -> bool: ...

    def will_always_match(self, state: S) -> bool: ...


class AlwaysMatch:
    """Accepts every key."""

    def start(self) -> None:
        return None

    def accept(self, state: None, char: str) -> None:  # noqa: ARG002
        return None

    def is_match(self, state: None) -> bool:  # noqa: ARG002
        return True

    def can_match(self, state: None) -> bool:  # noqa: ARG002
        return True

    def will_always_match(self, state: None) -> bool:  # noqa: ARG002
        return True


class Subsequence:
    """Accepts keys containing the needle's characters in order.

    The characters need not be contiguous: "rq1" matches "reports/q1.pdf".
    State is the count of needle characters consumed so far. Once the whole
    needle has been seen, any suffix keeps the key accepted.
    """

    __slots__ = ("needle",)

    def __init__(self, needle: str) -> None:
        self.needle = needle

    def start(self) -> int:
        return 0

    def accept(self, state: int, char: str) -> int:
        if state < len(self.needle) and self.needle[state] == char:
            return state + 1
        return state

    def is_match(self, state: int) -> bool:
        return state == len(self.needle)

    def can_match(self, state: int) -> bool:  # noqa: ARG002
        # Any state can still reach the end of the needle.
        return True

    def will_always_match(self, state: int) -> bool:
        return state == len(self.needle)

    def __repr__(self) -> str:
        return f"Subsequence({self.needle!r})"
