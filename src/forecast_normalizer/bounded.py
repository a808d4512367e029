"""Capacity-bounded, ordered sequence used by every model section."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar, overload

T = TypeVar("T")


class BoundedSequence(Generic[T]):
    """Keep entries in insertion order, refusing anything past capacity.

    Truncation is earliest-wins: once full, later pushes are no-ops that
    report ``False``, so the first ``capacity`` entries of a source survive.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self.capacity = capacity
        self._items: list[T] = []

    def push(self, item: T) -> bool:
        """Append ``item`` unless full; return whether it was stored."""
        if self.is_full():
            return False
        self._items.append(item)
        return True

    def clear(self) -> None:
        self._items.clear()

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def snapshot(self) -> list[T]:
        """Return a shallow copy of stored entries."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        return self._items[index]

    def __repr__(self) -> str:
        return f"BoundedSequence(capacity={self.capacity}, items={self._items!r})"
