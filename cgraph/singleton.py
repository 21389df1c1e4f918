"""Thread-safe holder of a single shared instance."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

__all__ = ["SingletonType", "Singleton"]

T = TypeVar("T")


class SingletonType(Enum):
    """When the held instance is built."""

    LAZY = 0
    HUNGRY = 1


class Singleton(Generic[T]):
    """Holds one instance made by ``factory``.

    ``HUNGRY`` builds it at construction, ``LAZY`` on the first :meth:`get`.
    With ``auto_init`` the instance is built at once and its ``init()`` method,
    if it has one, is called.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        kind: SingletonType = SingletonType.HUNGRY,
        auto_init: bool = False,
    ) -> None:
        self._factory = factory
        self._kind = kind
        self._handle: Optional[T] = None
        self._lock = threading.Lock()

        if kind is SingletonType.HUNGRY or auto_init:
            self._create()
        if auto_init:
            self._init()

    def get(self) -> Optional[T]:
        """Return the held instance, building it first in lazy mode."""
        if self._kind is SingletonType.LAZY:
            self._create()
        return self._handle

    def clear(self) -> None:
        """Drop the held instance."""
        with self._lock:
            self._handle = None

    def _create(self) -> None:
        if self._handle is None:
            with self._lock:
                if self._handle is None:
                    self._handle = self._factory()

    def _call(self, name: str) -> Any:
        method = getattr(self.get(), name, None)
        return method() if callable(method) else None

    def _init(self) -> Any:
        return self._call("init")

    def _destroy(self) -> Any:
        return self._call("destroy")