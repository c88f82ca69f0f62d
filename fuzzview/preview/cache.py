"""Bounded key/value stores for computed and rendered previews.

Both caches pair a dict with a :class:`RingSet` of the same keys so memory
stays bounded no matter how many entries a session walks through. Each cache
guards its dict and ring with one lock; background preview jobs write while
the render loop reads.
"""

from __future__ import annotations

import logging
import threading
from typing import Generic, TypeVar

from .ring_set import RingSet
from .types import Preview

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_CACHE_SIZE = 100
DEFAULT_RENDERED_PREVIEW_CACHE_SIZE = 25

V = TypeVar("V")


class _BoundedCache(Generic[V]):
    def __init__(self, capacity: int) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, V] = {}
        self._ring: RingSet[str] = RingSet(capacity)

    @property
    def capacity(self) -> int:
        return self._ring.capacity

    def get(self, key: str) -> V | None:
        with self._lock:
            return self._entries.get(key)

    def insert(self, key: str, value: V) -> None:
        """Store ``value`` under ``key``, overwriting any previous value.

        When the ring is full the oldest key is evicted from both the ring
        and the dict before this call returns.
        """
        with self._lock:
            self._entries[key] = value
            evicted = self._ring.push(key)
            if evicted is not None:
                logger.debug("cache full, dropping oldest entry: %r", evicted)
                self._entries.pop(evicted, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._ring.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class PreviewCache(_BoundedCache[Preview]):
    """Computed previews keyed by ``entry.name + command.template``."""

    def __init__(self, capacity: int = DEFAULT_PREVIEW_CACHE_SIZE) -> None:
        super().__init__(capacity)


class RenderedPreviewCache(_BoundedCache[tuple[str, ...]]):
    """Rendered pane rows keyed by name, line number and command template."""

    def __init__(self, capacity: int = DEFAULT_RENDERED_PREVIEW_CACHE_SIZE) -> None:
        super().__init__(capacity)


__all__ = [
    "DEFAULT_PREVIEW_CACHE_SIZE",
    "DEFAULT_RENDERED_PREVIEW_CACHE_SIZE",
    "PreviewCache",
    "RenderedPreviewCache",
]
