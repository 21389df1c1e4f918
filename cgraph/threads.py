"""Worker threads of the thread pool: primary threads and short-lived secondary threads."""

from __future__ import annotations

import os
import sys
import threading
import time
from typing import Any, Callable, Sequence

from cgraph.config import (
    THREAD_MAX_PRIORITY,
    THREAD_MIN_PRIORITY,
    THREAD_SCHED_FIFO,
    THREAD_SCHED_OTHER,
    THREAD_SCHED_RR,
    THREAD_TYPE_PRIMARY,
    THREAD_TYPE_SECONDARY,
    ThreadPoolConfig,
)
from cgraph.queues import AtomicPriorityQueue, AtomicQueue, WorkStealingQueue
from cgraph.utils import CGraphError, echo

__all__ = ["PoolThread", "PrimaryThread", "SecondaryThread"]

_IDLE_SLEEP = 0.001
_LINUX = sys.platform.startswith("linux")


def _calc_policy(policy: int) -> int:
    """Unknown scheduling policies fall back to SCHED_OTHER."""
    if policy in (THREAD_SCHED_OTHER, THREAD_SCHED_RR, THREAD_SCHED_FIFO):
        return policy
    return THREAD_SCHED_OTHER


def _calc_priority(priority: int) -> int:
    """Priorities outside [min, max] fall back to the minimum."""
    if THREAD_MIN_PRIORITY <= priority <= THREAD_MAX_PRIORITY:
        return priority
    return THREAD_MIN_PRIORITY


class PoolThread:
    """Common machinery of a pool worker: task loop, counters and shutdown."""

    kind = 0

    def __init__(
        self,
        pool_task_queue: AtomicQueue | None,
        pool_priority_task_queue: AtomicPriorityQueue | None,
        config: ThreadPoolConfig | None,
    ) -> None:
        if pool_task_queue is None or config is None:
            raise CGraphError("input is nullptr")
        self._pool_task_queue = pool_task_queue
        self._pool_priority_task_queue = pool_priority_task_queue
        self._config = config
        self._active = False
        self._is_init = False
        self._is_running = False
        self._total_task_num = 0
        self._thread: threading.Thread | None = None

    @property
    def is_init(self) -> bool:
        """Whether the worker has been started and not yet stopped."""
        return self._is_init

    @property
    def is_running(self) -> bool:
        """Whether the worker is executing a task right now."""
        return self._is_running

    @property
    def total_task_num(self) -> int:
        """Number of tasks executed since the worker was started."""
        return self._total_task_num

    @property
    def ident(self) -> int | None:
        """Identifier of the underlying OS thread, or None before start."""
        return self._thread.ident if self._thread is not None else None

    def stop(self) -> None:
        """Stop the worker loop and wait for the thread to finish."""
        if not self._is_init:
            raise CGraphError("init status is not suitable")
        self._reset()

    def _reset(self) -> None:
        self._active = False
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._is_init = False
        self._is_running = False
        self._total_task_num = 0

    def _launch(self, name: str) -> None:
        if self._is_init:
            raise CGraphError("init status is not suitable")
        self._is_init = True
        self._active = True
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def _prepare(self) -> None:
        self._apply_sched_param()

    def _apply_sched_param(self) -> None:
        if not hasattr(os, "sched_setscheduler"):
            return
        if self.kind == THREAD_TYPE_PRIMARY:
            priority = self._config.primary_thread_priority
            policy = self._config.primary_thread_policy
        elif self.kind == THREAD_TYPE_SECONDARY:
            priority = self._config.secondary_thread_priority
            policy = self._config.secondary_thread_policy
        else:
            priority, policy = THREAD_MIN_PRIORITY, THREAD_SCHED_OTHER
        try:
            os.sched_setscheduler(
                0, _calc_policy(policy), os.sched_param(_calc_priority(priority))
            )
        except OSError as exc:
            echo(
                "warning : set thread sched param failed, error code is [%d]",
                exc.errno if exc.errno is not None else -1,
            )

    def _run(self) -> None:
        self._prepare()
        step = (
            self._process_tasks
            if self._config.batch_task_enabled()
            else self._process_task
        )
        while self._active:
            step()

    def _process_task(self) -> None:
        task = self._next_task()
        if task is None:
            time.sleep(_IDLE_SLEEP)
        else:
            self._run_tasks([task])

    def _process_tasks(self) -> None:
        tasks = self._next_tasks()
        if tasks:
            self._run_tasks(tasks)
        else:
            time.sleep(_IDLE_SLEEP)

    def _next_task(self) -> Callable[[], Any] | None:
        return self._pop_pool_task()

    def _next_tasks(self) -> list[Callable[[], Any]]:
        return self._pop_pool_tasks()

    def _pop_pool_task(self) -> Callable[[], Any] | None:
        task = self._pool_task_queue.try_pop()
        if (
            task is None
            and self.kind == THREAD_TYPE_SECONDARY
            and self._pool_priority_task_queue is not None
        ):
            task = self._pool_priority_task_queue.try_pop()
        return task

    def _pop_pool_tasks(self) -> list[Callable[[], Any]]:
        tasks = self._pool_task_queue.try_pop_batch(self._config.max_pool_batch_size)
        if (
            not tasks
            and self.kind == THREAD_TYPE_SECONDARY
            and self._pool_priority_task_queue is not None
        ):
            tasks = self._pool_priority_task_queue.try_pop_batch(1)
        return tasks

    def _run_tasks(self, tasks: Sequence[Callable[[], Any]]) -> None:
        self._is_running = True
        try:
            for task in tasks:
                try:
                    task()
                except Exception as exc:  # a failing task must not kill the worker
                    echo("warning : task raised [%s]", repr(exc))
            self._total_task_num += len(tasks)
        finally:
            self._is_running = False


class PrimaryThread(PoolThread):
    """Long-lived worker with its own work-stealing queue."""

    kind = THREAD_TYPE_PRIMARY

    def __init__(
        self,
        index: int,
        pool_task_queue: AtomicQueue | None,
        pool_threads: list[PrimaryThread] | None,
        config: ThreadPoolConfig | None,
    ) -> None:
        super().__init__(pool_task_queue, None, config)
        if pool_threads is None:
            raise CGraphError("input is nullptr")
        self.index = index
        self._pool_threads = pool_threads
        self._queue = WorkStealingQueue()

    def start(self) -> None:
        """Start the worker thread."""
        self._launch(f"cgraph-primary-{self.index}")

    def push(self, task: Callable[[], Any]) -> None:
        """Put ``task`` on this worker's own queue."""
        self._queue.push(task)

    def _prepare(self) -> None:
        super()._prepare()
        self._apply_affinity()

    def _apply_affinity(self) -> None:
        if not _LINUX or not hasattr(os, "sched_setaffinity"):
            return
        if not self._config.bind_cpu_enable or self.index < 0:
            return
        try:
            cpus = sorted(os.sched_getaffinity(0))
            if not cpus:
                return
            os.sched_setaffinity(0, {cpus[self.index % len(cpus)]})
        except OSError as exc:
            echo(
                "warning : set thread affinity failed, error code is [%d]",
                exc.errno if exc.errno is not None else -1,
            )

    def _run(self) -> None:
        if any(thread is None for thread in self._pool_threads):
            return
        super()._run()

    def _next_task(self) -> Callable[[], Any] | None:
        task = self._queue.try_pop()
        if task is None:
            task = self._pop_pool_task()
        if task is None:
            task = self._steal_task()
        return task

    def _next_tasks(self) -> list[Callable[[], Any]]:
        tasks = self._queue.try_pop_batch(self._config.max_local_batch_size)
        if not tasks:
            tasks = self._pop_pool_tasks()
        if not tasks:
            tasks = self._steal_tasks()
        return tasks

    def _victims(self) -> list[PrimaryThread]:
        size = self._config.default_thread_size
        if len(self._pool_threads) < size:
            return []
        victims = (
            self._pool_threads[(self.index + offset + 1) % size]
            for offset in range(self._config.steal_range())
        )
        return [victim for victim in victims if victim is not None]

    def _steal_task(self) -> Callable[[], Any] | None:
        for victim in self._victims():
            task = victim._queue.try_steal()
            if task is not None:
                return task
        return None

    def _steal_tasks(self) -> list[Callable[[], Any]]:
        for victim in self._victims():
            tasks = victim._queue.try_steal_batch(self._config.max_steal_batch_size)
            if tasks:
                return tasks
        return []


class SecondaryThread(PoolThread):
    """Auxiliary worker that also serves the priority queue and retires when idle."""

    kind = THREAD_TYPE_SECONDARY

    def __init__(
        self,
        pool_task_queue: AtomicQueue | None,
        pool_priority_task_queue: AtomicPriorityQueue | None,
        config: ThreadPoolConfig | None,
    ) -> None:
        if pool_priority_task_queue is None:
            raise CGraphError("input is nullptr")
        super().__init__(pool_task_queue, pool_priority_task_queue, config)
        self._cur_ttl = 0

    def start(self) -> None:
        """Start the worker thread with a full time-to-live."""
        if self._is_init:
            raise CGraphError("init status is not suitable")
        self._cur_ttl = self._config.secondary_thread_ttl
        self._launch("cgraph-secondary")

    def freeze(self) -> bool:
        """Age the worker by one check; return True once it should be retired."""
        if self._is_running:
            self._cur_ttl = min(self._cur_ttl + 1, self._config.secondary_thread_ttl)
        else:
            self._cur_ttl -= 1
        return self._cur_ttl <= 0