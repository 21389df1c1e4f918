"""A work-stealing thread pool with auxiliary threads and a process-wide shared instance."""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, wait
from typing import Any, Callable

from cgraph.config import (
    DEFAULT_TASK_STRATEGY,
    LONG_TIME_TASK_STRATEGY,
    ThreadPoolConfig,
)
from cgraph.queues import AtomicPriorityQueue, AtomicQueue
from cgraph.singleton import Singleton, SingletonType
from cgraph.task import MAX_BLOCK_TTL, TaskGroup
from cgraph.threads import PrimaryThread, SecondaryThread
from cgraph.utils import CGraphError

__all__ = ["ThreadPool", "get_thread_pool"]

_NOT_SUITABLE = "init status is not suitable"


def _wrap(func: Callable[[], Any]) -> tuple[Callable[[], None], Future]:
    """Bind ``func`` to a future that receives its result or exception."""
    future: Future = Future()

    def run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = func()
        except BaseException as exc:  # delivered through the future
            future.set_exception(exc)
        else:
            future.set_result(result)

    return run, future


class ThreadPool:
    """Pool of primary worker threads plus auxiliary threads added under load.

    Tasks go either to a primary thread's own queue, to the shared pool queue,
    or to the priority queue that only auxiliary threads serve. A monitor
    thread adds auxiliary threads when all primaries are busy and retires
    them once they have stayed idle long enough.
    """

    def __init__(
        self, auto_init: bool = True, config: ThreadPoolConfig | None = None
    ) -> None:
        self._lock = threading.RLock()
        self._index_lock = threading.Lock()
        self._is_init = False
        self._cur_index = 0
        self._input_task_num = 0
        self._config = config if config is not None else ThreadPoolConfig()
        self._task_queue = AtomicQueue()
        self._priority_task_queue = AtomicPriorityQueue()
        self._primary_threads: list[PrimaryThread] = []
        self._secondary_threads: list[SecondaryThread] = []
        self._thread_record: dict[int, int] = {}
        self._closing = threading.Event()
        self._monitor_thread: threading.Thread | None = None

        if self._config.monitor_enable:
            self._monitor_thread = threading.Thread(
                target=self._monitor, name="cgraph-monitor", daemon=True
            )
            self._monitor_thread.start()
        if auto_init:
            self.init()

    @property
    def config(self) -> ThreadPoolConfig:
        """The pool's settings; they can only be replaced before :meth:`init`."""
        return self._config

    @config.setter
    def config(self, value: ThreadPoolConfig) -> None:
        with self._lock:
            if self._is_init:
                raise CGraphError(_NOT_SUITABLE)
            self._config = value

    @property
    def is_init(self) -> bool:
        """Whether the worker threads are running."""
        return self._is_init

    @property
    def input_task_num(self) -> int:
        """Number of tasks committed so far."""
        return self._input_task_num

    def init(self) -> None:
        """Start the primary threads and the configured auxiliary threads."""
        with self._lock:
            if self._is_init:
                return
            self._thread_record.clear()
            self._primary_threads.clear()
            for index in range(self._config.default_thread_size):
                self._primary_threads.append(
                    PrimaryThread(
                        index, self._task_queue, self._primary_threads, self._config
                    )
                )
            for thread in self._primary_threads:
                thread.start()
                if thread.ident is not None:
                    self._thread_record[thread.ident] = thread.index
            self._create_secondary_threads(self._config.secondary_thread_size)
            self._is_init = True

    def destroy(self) -> None:
        """Stop every worker thread; the pool may be initialised again later."""
        with self._lock:
            if not self._is_init:
                return
            for thread in self._primary_threads:
                thread.stop()
            self._primary_threads.clear()
            for thread in self._secondary_threads:
                thread.stop()
            self._secondary_threads.clear()
            self._thread_record.clear()
            self._is_init = False

    def close(self) -> None:
        """Stop the monitor thread and then every worker thread."""
        self._closing.set()
        monitor = self._monitor_thread
        if monitor is not None and monitor is not threading.current_thread():
            monitor.join()
        self._monitor_thread = None
        self.destroy()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def commit(
        self, func: Callable[[], Any], index: int = DEFAULT_TASK_STRATEGY
    ) -> Future:
        """Schedule ``func`` and return a future of its result.

        ``index`` picks a primary thread directly; the default spreads tasks
        round-robin, and :data:`LONG_TIME_TASK_STRATEGY` sends the task to the
        priority queue served only by auxiliary threads.
        """
        with self._lock:
            if not self._is_init:
                raise CGraphError(_NOT_SUITABLE)
            run, future = _wrap(func)
            real_index = self._dispatch(index)
            if 0 <= real_index < self._config.default_thread_size:
                self._primary_threads[real_index].push(run)
            elif real_index == LONG_TIME_TASK_STRATEGY:
                self._priority_task_queue.push(run, LONG_TIME_TASK_STRATEGY)
            else:
                self._task_queue.push(run)
            self._input_task_num += 1
            return future

    def commit_with_priority(self, func: Callable[[], Any], priority: int) -> Future:
        """Schedule ``func`` on the priority queue; larger priorities run first."""
        with self._lock:
            if not self._is_init:
                raise CGraphError(_NOT_SUITABLE)
            run, future = _wrap(func)
            if not self._secondary_threads:
                self._create_secondary_threads(1)
            self._priority_task_queue.push(run, priority)
            self._input_task_num += 1
            return future

    def submit(
        self,
        task: TaskGroup | Callable[[], Any],
        ttl: int = MAX_BLOCK_TTL,
        on_finished: Callable[[CGraphError | None], Any] | None = None,
    ) -> None:
        """Run a task group (or a single callable) and wait for it to finish.

        The wait lasts at most the smaller of ``ttl`` and the group's own ttl,
        in milliseconds. The group's ``on_finished`` callback receives None on
        success or the error; on timeout :class:`CGraphError` is then raised.
        A callable is wrapped in a group with ``ttl`` and ``on_finished``.
        """
        if not isinstance(task, TaskGroup):
            task = TaskGroup(task, ttl, on_finished)
            ttl = MAX_BLOCK_TTL
        if not self._is_init:
            raise CGraphError(_NOT_SUITABLE)

        futures = [self.commit(func) for func in task]
        timeout = min(task.ttl, ttl) / 1000.0
        _, not_done = wait(futures, timeout=timeout)

        error = CGraphError("thread status timeout") if not_done else None
        if task.on_finished is not None:
            task.on_finished(error)
        if error is not None:
            raise error

    def get_thread_num(self, tid: int) -> int:
        """Return the index of the primary thread with ident ``tid``, or -1."""
        return self._thread_record.get(tid, -1)

    def _dispatch(self, orig_index: int) -> int:
        if self._config.fair_lock_enable:
            return DEFAULT_TASK_STRATEGY
        if orig_index != DEFAULT_TASK_STRATEGY:
            return orig_index
        with self._index_lock:
            real_index = self._cur_index
            self._cur_index += 1
            if self._cur_index >= self._config.max_thread_size or self._cur_index < 0:
                self._cur_index = 0
        return real_index

    def _create_secondary_threads(self, size: int) -> None:
        with self._lock:
            left = (
                self._config.max_thread_size
                - self._config.default_thread_size
                - len(self._secondary_threads)
            )
            for _ in range(min(size, left)):
                thread = SecondaryThread(
                    self._task_queue, self._priority_task_queue, self._config
                )
                thread.start()
                self._secondary_threads.append(thread)

    def _monitor(self) -> None:
        while not self._closing.is_set():
            while not self._closing.is_set() and not self._is_init:
                self._closing.wait(1.0)
            span = self._config.monitor_span
            deadline = time.monotonic() + max(span, 0)
            while not self._closing.is_set() and self._is_init:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._closing.wait(min(remaining, 1.0))
            if self._closing.is_set():
                return

            with self._lock:
                if not self._is_init:
                    continue
                busy = bool(self._primary_threads) and all(
                    thread.is_running for thread in self._primary_threads
                )
                if busy or not self._priority_task_queue.empty():
                    self._create_secondary_threads(1)

                kept = []
                for thread in self._secondary_threads:
                    if thread.freeze():
                        thread.stop()
                    else:
                        kept.append(thread)
                self._secondary_threads[:] = kept


_shared_pool: Singleton[ThreadPool] = Singleton(
    lambda: ThreadPool(auto_init=False), SingletonType.LAZY
)


def get_thread_pool(auto_init: bool = True) -> ThreadPool:
    """Return the process-wide shared pool, initialising it when ``auto_init``."""
    pool = _shared_pool.get()
    if pool is None:
        raise CGraphError("shared thread pool is unavailable")
    if auto_init:
        pool.init()
    return pool