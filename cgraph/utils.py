"""Shared helpers: console echo, small aggregate functions, sessions and sleeps."""

from __future__ import annotations

import os
import re
import threading
import time
import uuid
from datetime import datetime
from functools import reduce
from typing import Any, Iterable

__all__ = [
    "CGraphError",
    "echo",
    "container_sum",
    "container_multiply",
    "cgraph_max",
    "cgraph_sum",
    "generate_session",
    "sleep_ms",
    "sleep_s",
]

_echo_lock = threading.Lock()

# printf length modifiers (%lf, %ld, %hu, ...) have no meaning for Python's % operator.
_LENGTH_MODIFIER = re.compile(
    r"%([-+ #0]*\d*(?:\.\d+)?)(?:hh|h|ll|l|L|z|j|t)([diouxXeEfFgGcs])"
)


class CGraphError(Exception):
    """Raised where an operation reports a failed status."""

    def __init__(self, message: str = "", code: int = -1) -> None:
        super().__init__(message)
        self.code = code
        self.info = message


def _silenced() -> bool:
    return os.environ.get("CGRAPH_SILENCE", "") not in ("", "0")


def echo(fmt: str, *args: Any) -> None:
    """Print a timestamped, printf-style formatted line prefixed with ``[CGraph]``.

    Output is suppressed when the ``CGRAPH_SILENCE`` environment variable is set.
    """
    if _silenced():
        return

    message = _LENGTH_MODIFIER.sub(r"%\1\2", fmt) % args if args else fmt
    now = datetime.now()
    stamp = now.strftime("%Y-%m-%d %H:%M:%S") + f".{now.microsecond // 1000:03d}"
    with _echo_lock:
        print(f"[CGraph] [{stamp}] {message}", flush=True)


def container_sum(container: Iterable[Any]) -> Any:
    """Sum every element of ``container``, starting from 0."""
    result = 0
    for value in container:
        result += value
    return result


def container_multiply(container: Iterable[Any]) -> Any:
    """Multiply every element of ``container``, starting from 1."""
    result = 1
    for value in container:
        result *= value
    return result


def cgraph_max(value: Any, *args: Any) -> Any:
    """Return the largest of the given values."""
    return max((value, *args))


def cgraph_sum(value: Any, *args: Any) -> Any:
    """Add all given values together with ``+``; works for any addable type."""
    if not args:
        return value
    return value + reduce(lambda acc, item: item + acc, reversed(args[:-1]), args[-1])


def generate_session() -> str:
    """Return a fresh, unique session identifier (a 36 character UUID string)."""
    return str(uuid.uuid4())


def sleep_ms(ms: float) -> None:
    """Sleep the current thread for ``ms`` milliseconds."""
    time.sleep(ms / 1000.0)


def sleep_s(seconds: float) -> None:
    """Sleep the current thread for ``seconds`` seconds."""
    time.sleep(seconds)