"""Thread-safe queues used by the thread pool."""

from __future__ import annotations

import heapq
import itertools
import threading
from collections import deque
from typing import Any

from cgraph.config import DEFAULT_RINGBUFFER_SIZE

__all__ = [
    "AtomicQueue",
    "AtomicPriorityQueue",
    "AtomicRingBufferQueue",
    "WorkStealingQueue",
]


class AtomicQueue:
    """Locked FIFO queue with blocking and non-blocking pops."""

    def __init__(self) -> None:
        self._items: deque[Any] = deque()
        self._cond = threading.Condition()

    def push(self, value: Any) -> None:
        """Append ``value`` and wake one waiting consumer."""
        with self._cond:
            self._items.append(value)
            self._cond.notify()

    def wait_pop(self) -> Any:
        """Block until an item is available and return it."""
        with self._cond:
            self._cond.wait_for(lambda: bool(self._items))
            return self._items.popleft()

    def try_pop(self) -> Any:
        """Return the oldest item, or None if the queue is empty."""
        with self._cond:
            return self._items.popleft() if self._items else None

    def try_pop_batch(self, max_size: int) -> list[Any]:
        """Return up to ``max_size`` oldest items; empty if none or ``max_size <= 0``."""
        with self._cond:
            count = min(max(max_size, 0), len(self._items))
            return [self._items.popleft() for _ in range(count)]

    def empty(self) -> bool:
        """Whether the queue holds no items."""
        with self._cond:
            return not self._items


class AtomicPriorityQueue:
    """Locked queue popping the highest priority first; equal priorities in push order."""

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, Any]] = []
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def push(self, value: Any, priority: int) -> None:
        """Add ``value`` with the given ``priority``."""
        with self._lock:
            heapq.heappush(self._heap, (-priority, next(self._counter), value))

    def try_pop(self) -> Any:
        """Return the highest priority item, or None if the queue is empty."""
        with self._lock:
            return heapq.heappop(self._heap)[2] if self._heap else None

    def try_pop_batch(self, max_size: int) -> list[Any]:
        """Return up to ``max_size`` items in priority order."""
        with self._lock:
            count = min(max(max_size, 0), len(self._heap))
            return [heapq.heappop(self._heap)[2] for _ in range(count)]

    def empty(self) -> bool:
        """Whether the queue holds no items."""
        with self._lock:
            return not self._heap


class AtomicRingBufferQueue:
    """Bounded single-producer, single-consumer ring buffer.

    One slot is always left free, so it holds at most ``capacity - 1`` items.
    :meth:`push` blocks while full and :meth:`wait_pop` while empty.
    """

    def __init__(self, capacity: int = DEFAULT_RINGBUFFER_SIZE) -> None:
        self._lock = threading.Lock()
        self._push_cv = threading.Condition(self._lock)
        self._pop_cv = threading.Condition(self._lock)
        self._reset(capacity)

    def _reset(self, capacity: int) -> None:
        if capacity < 2:
            raise ValueError("capacity must be at least 2")
        self._capacity = capacity
        self._buffer: list[Any] = [None] * capacity
        self._head = 0
        self._tail = 0

    @property
    def capacity(self) -> int:
        """Number of slots in the buffer."""
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        with self._lock:
            self._reset(value)

    def _is_full(self) -> bool:
        return self._head == (self._tail + 1) % self._capacity

    def _is_empty(self) -> bool:
        return self._head == self._tail

    def push(self, value: Any) -> None:
        """Write ``value``, waiting for room if the buffer is full."""
        with self._push_cv:
            self._push_cv.wait_for(lambda: not self._is_full())
            self._buffer[self._tail] = value
            self._tail = (self._tail + 1) % self._capacity
            self._pop_cv.notify()

    def wait_pop(self) -> Any:
        """Take the oldest value, waiting until one is available."""
        with self._pop_cv:
            self._pop_cv.wait_for(lambda: not self._is_empty())
            value = self._buffer[self._head]
            self._buffer[self._head] = None
            self._head = (self._head + 1) % self._capacity
            self._push_cv.notify()
            return value

    def clear(self) -> None:
        """Drop every buffered value."""
        with self._lock:
            self._buffer = [None] * self._capacity
            self._head = 0
            self._tail = 0
            self._push_cv.notify_all()


class WorkStealingQueue:
    """Per-thread deque: the owner pops the newest task, thieves take the oldest.

    Pops and steals never wait for the lock; they return nothing if it is busy.
    """

    def __init__(self) -> None:
        self._deque: deque[Any] = deque()
        self._lock = threading.Lock()

    def push(self, task: Any) -> None:
        """Put ``task`` at the front."""
        with self._lock:
            self._deque.appendleft(task)

    def _take(self, from_front: bool, max_size: int) -> list[Any]:
        if not self._lock.acquire(blocking=False):
            return []
        try:
            pop = self._deque.popleft if from_front else self._deque.pop
            count = min(max(max_size, 0), len(self._deque))
            return [pop() for _ in range(count)]
        finally:
            self._lock.release()

    def try_pop(self) -> Any:
        """Return the front task, or None if empty or busy."""
        taken = self._take(True, 1)
        return taken[0] if taken else None

    def try_pop_batch(self, max_size: int) -> list[Any]:
        """Return up to ``max_size`` tasks from the front."""
        return self._take(True, max_size)

    def try_steal(self) -> Any:
        """Return the back task, or None if empty or busy."""
        taken = self._take(False, 1)
        return taken[0] if taken else None

    def try_steal_batch(self, max_size: int) -> list[Any]:
        """Return up to ``max_size`` tasks from the back."""
        return self._take(False, max_size)