"""Units of work for the thread pool: single tasks and task groups."""

from __future__ import annotations

from typing import Any, Callable, Iterator

__all__ = ["MAX_BLOCK_TTL", "Task", "TaskGroup"]

MAX_BLOCK_TTL = 10_000_000
"""Longest time, in milliseconds, a submitted group may block."""


class Task:
    """A callable carrying a priority; higher priorities sort first."""

    __slots__ = ("func", "priority")

    def __init__(self, func: Callable[[], Any], priority: int = 0) -> None:
        self.func = func
        self.priority = priority

    def __call__(self) -> Any:
        return self.func()

    def __lt__(self, other: "Task") -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.priority > other.priority

    def __repr__(self) -> str:
        return f"Task({self.func!r}, priority={self.priority})"


class TaskGroup:
    """A batch of callables submitted together, with a timeout and a callback."""

    def __init__(
        self,
        task: Callable[[], Any] | None = None,
        ttl: int = MAX_BLOCK_TTL,
        on_finished: Callable[[Any], Any] | None = None,
    ) -> None:
        self._tasks: list[Callable[[], Any]] = []
        self.ttl = ttl
        self.on_finished = on_finished
        if task is not None:
            self.add_task(task)

    def add_task(self, task: Callable[[], Any]) -> "TaskGroup":
        """Append ``task`` and return the group for chaining."""
        self._tasks.append(task)
        return self

    def clear(self) -> None:
        """Remove every task."""
        self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Callable[[], Any]]:
        return iter(list(self._tasks))