"""Append-only FIFO queue with amortized compaction.

Items are never shifted individually on pull: a read offset advances instead,
and the consumed prefix is sliced off only once it makes up at least half of
the physical store.
"""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class Queue(Generic[T]):
    """Queue of pending items, pulled from the front in push order."""

    def __init__(self) -> None:
        self._items: list[T] = []
        self._offset = 0

    def __len__(self) -> int:
        return self.length()

    @property
    def offset(self) -> int:
        """Number of consumed items still held in the physical store."""
        return self._offset

    @property
    def capacity_used(self) -> int:
        """Physical length of the store, consumed prefix included."""
        return len(self._items)

    def length(self) -> int:
        """Number of items not yet pulled."""
        return len(self._items) - self._offset

    def push(self, item: T) -> None:
        """Append ``item`` to the tail."""
        self._items.append(item)

    def pull(self) -> T | None:
        """Remove and return the head item, or ``None`` once the queue is drained."""
        if not self._items:
            return None
        item = self._items[self._offset]

        self._offset += 1
        if self._offset * 2 >= len(self._items):
            self._items = self._items[self._offset :]
            self._offset = 0

        return item
