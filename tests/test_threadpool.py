import threading
import time

import pytest

from cgraph.config import LONG_TIME_TASK_STRATEGY, ThreadPoolConfig
from cgraph.task import TaskGroup
from cgraph.threadpool import ThreadPool, get_thread_pool
from cgraph.utils import CGraphError


def _config(**kwargs):
    kwargs.setdefault("default_thread_size", 2)
    kwargs.setdefault("monitor_enable", False)
    return ThreadPoolConfig(**kwargs)


@pytest.fixture
def pool():
    with ThreadPool(config=_config()) as p:
        yield p


def test_commit_returns_result(pool):
    future = pool.commit(lambda: 6 + 3)
    assert future.result(timeout=5) == 9


def test_commit_string_result(pool):
    future = pool.commit(lambda: "multiply result is : " + str(5 * 5))
    assert future.result(timeout=5) == "multiply result is : 25"


def test_commit_exception_is_delivered(pool):
    def boom():
        raise ValueError("bad")

    future = pool.commit(boom)
    with pytest.raises(ValueError):
        future.result(timeout=5)


def test_commit_many_all_run(pool):
    futures = [pool.commit(lambda i=i: i * 2) for i in range(50)]
    assert [f.result(timeout=5) for f in futures] == [i * 2 for i in range(50)]
    assert pool.input_task_num == 50


def test_commit_to_specific_primary(pool):
    future = pool.commit(lambda: pool.get_thread_num(threading.get_ident()), index=0)
    assert future.result(timeout=5) in (0, 1)


def test_get_thread_num_unknown_thread(pool):
    assert pool.get_thread_num(threading.get_ident()) == -1


def test_long_time_strategy_runs_on_secondary():
    with ThreadPool(config=_config(secondary_thread_size=1)) as p:
        future = p.commit(lambda: threading.current_thread().name, LONG_TIME_TASK_STRATEGY)
        assert future.result(timeout=5) == "cgraph-secondary"


def test_commit_with_priority_creates_secondary(pool):
    future = pool.commit_with_priority(lambda: "done", 5)
    assert future.result(timeout=5) == "done"


def test_submit_task_group_runs_all(pool):
    results = []
    lock = threading.Lock()
    group = TaskGroup()
    for i in range(10):
        def task(i=i):
            with lock:
                results.append(i)
        group.add_task(task)
    assert len(group) == 10
    pool.submit(group)
    assert pool.input_task_num == 10
    assert sorted(results) == list(range(10))


def test_submit_callable_calls_on_finished_with_none(pool):
    seen = []
    ran = []
    pool.submit(lambda: ran.append(1), on_finished=seen.append)
    assert ran == [1]
    assert seen == [None]


def test_submit_timeout_raises_and_reports(pool):
    seen = []
    group = TaskGroup(lambda: time.sleep(0.5), ttl=50, on_finished=seen.append)
    with pytest.raises(CGraphError):
        pool.submit(group)
    assert len(seen) == 1
    assert isinstance(seen[0], CGraphError)


def test_submit_uses_smaller_ttl(pool):
    group = TaskGroup(lambda: time.sleep(0.5))
    with pytest.raises(CGraphError):
        pool.submit(group, ttl=50)


def test_not_initialised_raises():
    with ThreadPool(auto_init=False, config=_config()) as p:
        assert p.is_init is False
        with pytest.raises(CGraphError):
            p.commit(lambda: 1)
        with pytest.raises(CGraphError):
            p.submit(lambda: 1)
        with pytest.raises(CGraphError):
            p.commit_with_priority(lambda: 1, 0)


def test_destroy_and_reinit(pool):
    pool.destroy()
    assert pool.is_init is False
    with pytest.raises(CGraphError):
        pool.commit(lambda: 1)
    pool.init()
    assert pool.commit(lambda: 7).result(timeout=5) == 7


def test_config_locked_after_init(pool):
    with pytest.raises(CGraphError):
        pool.config = _config()


def test_config_settable_before_init():
    with ThreadPool(auto_init=False, config=_config()) as p:
        new = _config(default_thread_size=3)
        p.config = new
        p.init()
        assert p.config.default_thread_size == 3
        assert p.commit(lambda: "ok").result(timeout=5) == "ok"


def test_fair_lock_still_runs_tasks():
    with ThreadPool(config=_config(fair_lock_enable=True)) as p:
        futures = [p.commit(lambda i=i: i) for i in range(20)]
        assert [f.result(timeout=5) for f in futures] == list(range(20))


def test_batch_mode_runs_tasks():
    with ThreadPool(config=_config(batch_task_enable=True)) as p:
        futures = [p.commit(lambda i=i: i + 1) for i in range(20)]
        assert [f.result(timeout=5) for f in futures] == list(range(1, 21))


def test_close_stops_pool():
    p = ThreadPool(config=_config(monitor_enable=True))
    p.close()
    assert p.is_init is False
    with pytest.raises(CGraphError):
        p.commit(lambda: 1)


def test_shared_pool_is_same_instance():
    first = get_thread_pool()
    second = get_thread_pool()
    assert first is second
    assert first.is_init is True
    assert first.commit(lambda: "shared").result(timeout=5) == "shared"