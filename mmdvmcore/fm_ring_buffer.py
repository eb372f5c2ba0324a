"""A fixed-capacity FIFO that refuses new items when full."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """A bounded FIFO of samples or bytes with an overflow flag."""

    def __init__(self, length: int) -> None:
        if length < 1:
            raise ValueError("ring buffer length must be positive")
        self._length = length
        self._items: deque[T] = deque()
        self._overflow = False

    @property
    def capacity(self) -> int:
        return self._length

    def space(self) -> int:
        """Number of items that can still be put."""
        return self._length - len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def put(self, sample: T) -> bool:
        """Append an item; return False and note an overflow when full."""
        if len(self._items) >= self._length:
            self._overflow = True
            return False
        self._items.append(sample)
        return True

    def get(self) -> T | None:
        """Remove and return the oldest item, or None when empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def has_overflowed(self) -> bool:
        """Return whether a put was refused since the last call, clearing the flag."""
        overflow = self._overflow
        self._overflow = False
        return overflow

    def reset(self) -> None:
        self._items.clear()
        self._overflow = False