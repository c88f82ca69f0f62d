"""Bounded FIFO set used as the eviction index for preview caches."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


class RingSet(Generic[T]):
    """Ring buffer that also tracks membership to reject duplicates.

    Pushing a known key is a no-op and does not refresh its position, so
    eviction order is strict insertion order.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"RingSet capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._ring: deque[T] = deque()
        self._known: set[T] = set()

    def push(self, key: T) -> T | None:
        """Append ``key`` and return the evicted oldest key, if any."""
        if key in self._known:
            logger.debug("key already in ring set: %r", key)
            return None

        evicted = None
        if len(self._ring) >= self.capacity:
            evicted = self._pop()
        self._ring.append(key)
        self._known.add(key)
        return evicted

    def _pop(self) -> T | None:
        if not self._ring:
            return None
        key = self._ring.popleft()
        self._known.discard(key)
        logger.debug("evicting key from ring set: %r", key)
        return key

    def contains(self, key: T) -> bool:
        return key in self._known

    def __contains__(self, key: object) -> bool:
        return key in self._known

    def __len__(self) -> int:
        return len(self._ring)

    def __iter__(self) -> Iterator[T]:
        """Iterate keys oldest first."""
        return iter(tuple(self._ring))

    def clear(self) -> None:
        self._ring.clear()
        self._known.clear()


__all__ = ["RingSet"]
