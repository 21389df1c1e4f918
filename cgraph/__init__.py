"""Work-stealing thread pool, task groups, queues, timer, LRU cache, trie, vector distances and random vectors."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "demo",
    "distance",
    "lru",
    "queues",
    "randomgen",
    "singleton",
    "task",
    "threadpool",
    "threads",
    "timer",
    "trie",
    "utils",
]