"""Ordered version history with a cursor and branch-on-edit truncation."""

from dataclasses import replace
from typing import Iterator, Literal

from .core import Version

Direction = Literal["previous", "next"]


class OutOfRangeError(IndexError):
    """Raised when the cursor does not point at an entry."""


class HistoryStore:
    """Versions for a single session plus the index currently displayed.

    The cursor is -1 while the history is empty and a valid index otherwise.
    Appending always lands directly after the cursor, discarding anything
    that was ahead of it.
    """

    def __init__(self) -> None:
        self._entries: list[Version] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Version]:
        return iter(self._entries)

    def __getitem__(self, position: int) -> Version:
        return self._entries[position]

    @property
    def index(self) -> int:
        return self._index

    @property
    def entries(self) -> tuple[Version, ...]:
        return tuple(self._entries)

    def current(self) -> Version | None:
        if self._index == -1:
            return None
        return self._entries[self._index]

    def append(self, entry: Version) -> Version:
        """Add ``entry`` after the cursor and move the cursor onto it."""
        if self._index == -1:
            self._entries = [entry]
        else:
            self._entries = self._entries[: self._index + 1] + [entry]
        self._index = len(self._entries) - 1
        return entry

    def update_current(self, **changes) -> Version:
        """Replace the entry at the cursor with a copy carrying ``changes``."""
        if self._index == -1:
            raise OutOfRangeError("history is empty")
        updated = replace(self._entries[self._index], **changes)
        self._entries[self._index] = updated
        return updated

    def navigate(self, direction: Direction) -> Version | None:
        """Move the cursor one step, clamping at either end.

        Returns the newly selected entry, or None if the move would leave
        the sequence (in which case nothing changes).
        """
        if direction == "previous":
            new_index = self._index - 1
        elif direction == "next":
            new_index = self._index + 1
        else:
            raise ValueError(f"Unknown direction: {direction!r}")

        if 0 <= new_index < len(self._entries):
            self._index = new_index
            return self._entries[new_index]
        return None
