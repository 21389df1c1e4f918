import threading
import time

from cgraph.timer import Timer


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class _Counter:
    def __init__(self):
        self.value = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.value += 1


def test_timer_calls_task_repeatedly_until_stopped():
    timer = Timer()
    counter = _Counter()
    timer.start(20, counter)
    try:
        assert _wait_until(lambda: counter.value >= 3)
    finally:
        timer.stop()
    frozen = counter.value
    time.sleep(0.1)
    assert counter.value == frozen


def test_second_start_while_running_is_ignored():
    timer = Timer()
    first = _Counter()
    second = _Counter()
    timer.start(20, first)
    timer.start(20, second)
    try:
        assert _wait_until(lambda: first.value >= 3)
    finally:
        timer.stop()
    assert second.value == 0


def test_stop_on_idle_timer_then_start_works():
    timer = Timer()
    timer.stop()
    counter = _Counter()
    timer.start(20, counter)
    try:
        _wait_until(lambda: counter.value >= 1)
    finally:
        timer.stop()
    assert counter.value >= 1


def test_stop_before_first_interval_skips_task():
    timer = Timer()
    counter = _Counter()
    timer.start(10000, counter)
    began = time.monotonic()
    timer.stop()
    assert time.monotonic() - began < 5
    assert counter.value == 0


def test_timer_can_restart_after_stop():
    timer = Timer()
    first = _Counter()
    timer.start(20, first)
    _wait_until(lambda: first.value >= 1)
    timer.stop()
    assert first.value >= 1

    second = _Counter()
    timer.start(20, second)
    try:
        _wait_until(lambda: second.value >= 2)
    finally:
        timer.stop()
    assert second.value >= 2