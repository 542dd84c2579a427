"""Bounded FIFO store of received chat messages."""

from typing import Iterator, List, Optional

from .models import ChatMessage

DEFAULT_CAPACITY = 1000


class MessageBuffer:
    """Fixed-capacity ring buffer of chat messages in arrival order.

    Slots are reused in place: once full, each append overwrites the oldest
    entry, so ``len(buffer) <= capacity`` always holds and eviction is strict
    FIFO. Nothing is reordered or deduplicated.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._slots: List[Optional[ChatMessage]] = [None] * capacity
        self._head = 0  # index of the oldest entry
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[ChatMessage]:
        for offset in range(self._size):
            yield self._slots[(self._head + offset) % self._capacity]

    def append(self, message: ChatMessage) -> None:
        """Add a message at the tail, evicting the oldest one when full."""
        tail = (self._head + self._size) % self._capacity
        self._slots[tail] = message
        if self._size < self._capacity:
            self._size += 1
        else:
            self._head = (self._head + 1) % self._capacity

    def latest(self) -> Optional[ChatMessage]:
        """Most recent message, or None when empty."""
        if self._size == 0:
            return None
        return self._slots[(self._head + self._size - 1) % self._capacity]

    def recent(self, limit: Optional[int] = None) -> List[ChatMessage]:
        """
        Most recent messages in chronological order.

        Args:
            limit: Number of messages to return. None returns everything,
                zero or negative returns nothing.

        Returns:
            New list, oldest of the selected window first
        """
        if limit is None or limit > self._size:
            count = self._size
        else:
            count = max(limit, 0)
        start = self._head + self._size - count
        return [self._slots[(start + offset) % self._capacity] for offset in range(count)]

    def clear(self) -> None:
        self._slots = [None] * self._capacity
        self._head = 0
        self._size = 0
