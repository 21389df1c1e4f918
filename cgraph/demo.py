"""Walk-through of the utilities: thread pool, LRU cache, trie, timer and distances."""

from __future__ import annotations

import argparse
import re
from typing import Any, NamedTuple, Sequence

from cgraph.distance import Distance, DistanceCalculator, EuclideanDistance
from cgraph.lru import LruCache
from cgraph.randomgen import generate
from cgraph.task import TaskGroup
from cgraph.threadpool import ThreadPool
from cgraph.timer import Timer
from cgraph.trie import Trie
from cgraph.utils import CGraphError, echo, sleep_ms, sleep_s

__all__ = [
    "add",
    "minus_by_5",
    "MyFunction",
    "MyDistance",
    "DistanceDemo",
    "tutorial_threadpool",
    "tutorial_lru",
    "tutorial_trie",
    "tutorial_timer",
    "tutorial_distance",
    "main",
]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Parse a leading integer the way C's ``atoi`` does; 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def add(i: int, j: int) -> int:
    """Return ``i + j``."""
    return i + j


def minus_by_5(i: float) -> float:
    """Return ``i - 5.0``."""
    return i - 5.0


class MyFunction:
    """Sample callable holder used to show the kinds of tasks a pool accepts."""

    def __init__(self) -> None:
        self._power = 2

    def pow2(self, text: str) -> str:
        """Raise the integer at the start of ``text`` to the configured power."""
        base = _atoi(text)
        result = 1
        for _ in range(self._power):
            result *= base
        return f"multiply result is : {result}"

    @staticmethod
    def divide(i: int, j: int) -> int:
        """Integer division truncating toward zero; 0 when ``j`` is 0."""
        if j == 0:
            return 0
        quotient = abs(i) // abs(j)
        return -quotient if (i < 0) != (j < 0) else quotient


class MyDistance(Distance):
    """Custom, asymmetric distance: every element of ``v1`` doubled plus half of ``v2``."""

    def calc(self, v1: Sequence[float], v2: Sequence[float]) -> float:
        if len(v2) < len(v1):
            raise CGraphError("input dim error")
        return sum(a * 2 + b / 2 for a, b in zip(v1, v2))


class DistanceDemo(NamedTuple):
    """Vectors and distances produced by :func:`tutorial_distance`."""

    vec1: list[float]
    vec2: list[float]
    euclidean: float
    forward: float
    backward: float


def _threadpool_commit(pool: ThreadPool) -> list[Any]:
    i, j = 6, 3
    text = "5"
    mf = MyFunction()

    r1 = pool.commit(lambda: add(i, j))
    r2 = pool.commit(lambda: minus_by_5(8.5))
    r3 = pool.commit(lambda: mf.pow2(text))
    r4 = pool.commit(lambda: MyFunction.divide(i, j))

    results = [r1.result(), r2.result(), r3.result(), r4.result()]
    for value in results:
        print(value)
    return results


def _threadpool_group(pool: ThreadPool) -> int:
    group = TaskGroup()
    i, j, k = 1, 2, 3

    group.add_task(lambda: echo("Hello, CGraph."))

    def one_second() -> None:
        result = i + j
        sleep_ms(1000)
        echo("sleep for 1 second, [%d] + [%d] = [%d], run success.", i, j, result)

    def two_seconds() -> int:
        result = i - j + k
        sleep_ms(2000)
        echo(
            "sleep for 2 second, [%d] - [%d] + [%d] = [%d], run success.",
            i, j, k, result,
        )
        return result

    group.add_task(one_second).add_task(two_seconds)

    code = 0
    try:
        pool.submit(group, 2500)
    except CGraphError as exc:
        code = exc.code
    echo("task group run status is [%d].", code)
    return code


def _threadpool_ordering(pool: ThreadPool) -> None:
    size = 100
    echo("thread pool task submit version : ")
    for i in range(size):
        pool.submit(lambda i=i: print(i, end=" ", flush=True))
    sleep_s(1)
    print("\r")

    echo("thread pool task group submit version : ")
    group = TaskGroup()
    for i in range(size):
        group.add_task(lambda i=i: print(i, end=" ", flush=True))
    pool.submit(group)
    sleep_s(1)
    print("\r")

    echo("thread pool task commit version : ")
    for i in range(size):
        pool.commit(lambda i=i: print(i, end=" ", flush=True))
    sleep_s(1)
    print("\r")


def tutorial_threadpool(pool: ThreadPool) -> list[Any]:
    """Run the three thread pool walk-throughs; return the results of the committed tasks."""
    echo("======== tutorial_threadpool_1 begin. ========")
    results = _threadpool_commit(pool)

    echo("======== tutorial_threadpool_2 begin. ========")
    _threadpool_group(pool)

    echo("======== tutorial_threadpool_3 begin. ========")
    _threadpool_ordering(pool)
    return results


def tutorial_lru() -> str | None:
    """Fill a 3-entry LRU cache with five values and return the value for key 4."""
    lru: LruCache = LruCache()
    lru.capacity = 3

    lru.put(1, "one")
    lru.put(2, "two")
    lru.put(3, "three")
    lru.put(4, "four")
    lru.put(5, "five")

    value = lru.get(4, "")
    echo("value is : [%s]", value)
    return value


def tutorial_trie() -> list[bool]:
    """Insert, find, erase and re-insert words; return every lookup result in order."""
    trie = Trie()
    trie.insert("hello")
    trie.insert("help")
    trie.insert("cgraph")

    found: list[bool] = []
    found.append(trie.find("hello"))
    echo("find [hello] result is : [%i]", found[-1])
    found.append(trie.find("cgraph"))
    echo("find [cgraph] result is : [%i]", found[-1])

    trie.erase("hello")
    found.append(trie.find("hello"))
    echo("eraser [hello], then find it, result is : [%i]", found[-1])

    trie.insert("hello")
    found.append(trie.find("hello"))
    echo("insert [hello] again, then find it, result is : [%i]", found[-1])
    return found


def tutorial_timer() -> int:
    """Tick a one-second timer for 5.5 seconds; return how many times it fired."""
    ticks = 0

    def tick() -> None:
        nonlocal ticks
        ticks += 1
        echo("Hello, CGraph")

    timer = Timer()
    timer.start(1000, tick)
    sleep_ms(5500)
    timer.stop()
    return ticks


def tutorial_distance() -> DistanceDemo:
    """Measure two random 16-dimensional vectors with the Euclidean and custom distances."""
    dim = 16
    vec1 = generate(dim, 0.0, 1.0)
    vec2 = generate(dim, 0.0, 1.0)

    euclidean = DistanceCalculator(EuclideanDistance()).calculate(vec1, vec2)
    print(f"UDistanceEuclidean distance result is : {euclidean}")

    mine = DistanceCalculator(MyDistance())
    forward = mine.calculate(vec1, vec2)
    print(f"MyDistance distance vec1 -> vec2 result is : {forward}")
    backward = mine.calculate(vec2, vec1)
    print(f"MyDistance distance vec2 -> vec1 result is : {backward}")

    return DistanceDemo(vec1, vec2, euclidean, forward, backward)


_TUTORIALS = ("threadpool", "lru", "trie", "timer", "distance")


def main(argv: Sequence[str] | None = None) -> int:
    """Run one walk-through, or all of them in order."""
    parser = argparse.ArgumentParser(
        prog="cgraph-demo", description="Run the utility walk-throughs."
    )
    parser.add_argument(
        "tutorial",
        nargs="?",
        default="all",
        choices=(*_TUTORIALS, "all"),
        help="which walk-through to run (default: all)",
    )
    args = parser.parse_args(argv)
    chosen = _TUTORIALS if args.tutorial == "all" else (args.tutorial,)

    for name in chosen:
        if name == "threadpool":
            with ThreadPool() as pool:
                tutorial_threadpool(pool)
        elif name == "lru":
            tutorial_lru()
        elif name == "trie":
            tutorial_trie()
        elif name == "timer":
            tutorial_timer()
        elif name == "distance":
            tutorial_distance()
    return 0