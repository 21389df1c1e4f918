"""A least-recently-used cache with a fixed capacity."""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Hashable

__all__ = ["LruCache", "DEFAULT_LRU_CACHE_CAPACITY"]

DEFAULT_LRU_CACHE_CAPACITY = 10


class LruCache:
    """Cache that drops the least recently used entry once it is full."""

    def __init__(self, capacity: int = DEFAULT_LRU_CACHE_CAPACITY) -> None:
        self._nodes: OrderedDict[Hashable, Any] = OrderedDict()
        self.capacity = capacity

    @property
    def capacity(self) -> int:
        """Maximum number of entries kept before eviction."""
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        if value < 0:
            raise ValueError("capacity must not be negative")
        self._capacity = value

    def put(self, key: Hashable, value: Any) -> None:
        """Insert or refresh ``key`` as the most recently used entry."""
        if key in self._nodes:
            del self._nodes[key]
        elif len(self._nodes) >= self._capacity and self._nodes:
            self._nodes.popitem(last=False)
        self._nodes[key] = value

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the value for ``key`` and mark it as recently used, else ``default``."""
        if key not in self._nodes:
            return default
        value = self._nodes[key]
        self.put(key, value)
        return value

    def clear(self) -> None:
        """Remove every entry."""
        self._nodes.clear()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes