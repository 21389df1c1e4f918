# cgraph

Small, self-contained building blocks for concurrent Python programs. There
are no third-party dependencies.

| Module | What it holds |
| --- | --- |
| `cgraph.threadpool` | `ThreadPool` and `get_thread_pool()` |
| `cgraph.threads` | `PoolThread`, `PrimaryThread`, `SecondaryThread`: the pool's workers |
| `cgraph.task` | `Task`, `TaskGroup`, `MAX_BLOCK_TTL` |
| `cgraph.queues` | `AtomicQueue`, `AtomicPriorityQueue`, `AtomicRingBufferQueue`, `WorkStealingQueue` |
| `cgraph.config` | `ThreadPoolConfig` and the pool's default constants |
| `cgraph.timer` | `Timer` |
| `cgraph.lru` | `LruCache` |
| `cgraph.trie` | `Trie` |
| `cgraph.distance` | `EuclideanDistance`, `CosineDistance`, `InnerProductDistance`, `DistanceCalculator` |
| `cgraph.randomgen` | `generate()`, `generate_matrix()` |
| `cgraph.singleton` | `Singleton`, `SingletonType` |
| `cgraph.utils` | `CGraphError`, `echo()`, `cgraph_sum()`, `cgraph_max()`, `container_sum()`, `container_multiply()`, `generate_session()`, `sleep_ms()`, `sleep_s()` |
| `cgraph.demo` | the walk-throughs run by `cgraph-demo` |

## Installation

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## Thread pool

`ThreadPool` starts `default_thread_size` primary threads (8 by default). Each
primary thread has its own work-stealing queue. A primary thread takes work
from its own queue first, then from the shared pool queue, and then steals
from its neighbours. The pool can also run secondary threads. These serve the
shared queue and a priority queue. A monitor thread adds secondary threads
while every primary is busy or priority work is waiting, and it retires them
once they have been idle for `secondary_thread_ttl` checks.

```python
from cgraph.threadpool import ThreadPool
from cgraph.task import TaskGroup

with ThreadPool() as pool:
    future = pool.commit(lambda: 6 + 3)      # concurrent.futures.Future
    print(future.result())                   # 9

    group = TaskGroup()
    group.add_task(lambda: print("hello")).add_task(lambda: print("world"))
    pool.submit(group, ttl=2500)             # waits up to 2.5 s for every task
```

The pool's methods:

- `commit(func, index=DEFAULT_TASK_STRATEGY)` schedules the call and returns a
  future.
  - The default spreads tasks round-robin.
  - An `index` below `default_thread_size` targets that primary thread.
  - `LONG_TIME_TASK_STRATEGY` sends the task to the priority queue, which only
    secondary threads serve.
- `commit_with_priority(func, priority)` puts the task on the priority queue.
  Larger priorities run first. It starts one secondary thread if none is
  running.
- `submit(task_or_group, ttl=MAX_BLOCK_TTL, on_finished=None)` runs a
  `TaskGroup` or a single callable and blocks until it is done.
  - The wait is capped at the smaller of `ttl` and the group's own `ttl`, in
    milliseconds.
  - The group's `on_finished` callback receives `None` on success or the
    timeout error.
  - On timeout, `CGraphError("thread status timeout")` is raised.
- `init()` and `destroy()` start and stop the workers. `close()`, which runs
  on leaving a `with` block, also stops the monitor.
- `commit` and `submit` raise `CGraphError` when the pool is not initialised.
  Replacing `pool.config` after `init()` also raises `CGraphError`.
- `get_thread_num(tid)` maps a primary thread's ident to its index. It
  returns -1 for any other thread.

`get_thread_pool(auto_init=True)` returns one process-wide pool, created on
first use.

`ThreadPoolConfig` is a dataclass. Its fields include:

- `default_thread_size`, `max_thread_size`, `secondary_thread_size`
- `max_task_steal_range`
- `batch_task_enable`, `fair_lock_enable`
- `secondary_thread_ttl`, `monitor_span`, `monitor_enable`
- `bind_cpu_enable`

With `fair_lock_enable`, every task goes through the shared queue in order.

## Queues

- `AtomicQueue`: a locked FIFO queue. It has `push`, a blocking `wait_pop`,
  `try_pop` (returns `None` when empty), `try_pop_batch` and `empty`.
- `AtomicPriorityQueue`: pops the highest priority first. Equal priorities
  come out in push order.
- `AtomicRingBufferQueue(capacity=1024)`: bounded, for one producer and one
  consumer. It holds at most `capacity - 1` items. `push` blocks while it is
  full and `wait_pop` blocks while it is empty.
- `WorkStealingQueue`: the owner pops from the front and thieves take from
  the back. Pops and steals return nothing rather than wait when the lock is
  busy.

## Timer

```python
import time
from cgraph.timer import Timer

timer = Timer()
timer.start(1000, lambda: print("tick"))   # every 1000 ms
time.sleep(3.5)
timer.stop()
```

A second `start` while the timer is running is ignored.

## LRU cache

```python
from cgraph.lru import LruCache

cache = LruCache(3)                       # default capacity is 10
for key, value in [(1, "one"), (2, "two"), (3, "three"), (4, "four")]:
    cache.put(key, value)
print(1 in cache)        # False: evicted
print(cache.get(4))      # "four"; also marks key 4 as recently used
print(cache.get(9, ""))  # "" for a missing key
```

## Trie

```python
from cgraph.trie import Trie

trie = Trie()
trie.insert("hello")
trie.insert("help")
print(trie.find("hello"))   # True
trie.erase("hello")
print(trie.find("hello"))   # False
print(trie.find("help"))    # True
```

## Distances and random vectors

```python
from cgraph.distance import DistanceCalculator, EuclideanDistance
from cgraph.randomgen import generate

v1 = generate(16, 0.0, 1.0)
v2 = generate(16, 0.0, 1.0, seed=42)      # a non-zero seed is reproducible
calc = DistanceCalculator(EuclideanDistance(), need_check=True)
print(calc.calculate(v1, v2))
print(calc.calculate_batch(v1, [v1, v2]))
print(calc.normalize(v1))                 # unit-length copy
```

- `EuclideanDistance(need_sqrt=False)` gives the squared distance.
- `CosineDistance` gives the cosine of the angle between the vectors.
- `InnerProductDistance` gives `(1 - dot) / 2`.
- With `need_check=True`, empty or `None` inputs raise `CGraphError`. For the
  Euclidean distance, vectors of different lengths raise it too.
- You can define your own measure by subclassing `Distance` and implementing
  `calc(v1, v2)`.

## Helpers

- `echo(fmt, *args)` prints a printf-style line with a millisecond timestamp
  and the prefix `[CGraph]`. Setting the environment variable
  `CGRAPH_SILENCE` to a value other than empty or `0` suppresses the output.
- `Singleton(factory, kind=SingletonType.HUNGRY, auto_init=False)` holds one
  shared instance.
  - `HUNGRY` builds the instance immediately.
  - `LAZY` builds it on the first `get()`.

## Demonstration

```
cgraph-demo                 # run every walk-through
cgraph-demo lru             # or one of: threadpool, lru, trie, timer, distance
```

## What the package does not do

- It has no graph or pipeline engine. It does not register nodes, track
  dependencies or run tasks in dependency order. It provides the scheduling
  and data-structure pieces only.
- Thread scheduling policy and priority are set only where the operating
  system exposes `os.sched_setscheduler`. CPU pinning of primary threads
  happens only on Linux. A failure to set either prints a warning through
  `echo()`.