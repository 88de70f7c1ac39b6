"""
Filename matching and result aggregation for Accio.

This module holds the leaf pieces of a search: the name predicate, the
append-only sink that collects matched paths, and the directory visit
counter used for progress feedback. Both aggregates are safe to share
between worker threads.
"""

import threading
from typing import Callable, Iterable, List, Optional


_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "abcdefghijklmnopqrstuvwxyz",
)


def ascii_lower(value: str) -> str:
    """Lower-case only the ASCII letters of ``value``."""
    return value.translate(_ASCII_LOWER)


def matches(entry_name: str, target: str) -> bool:
    """
    Check whether a directory entry name equals the search target.

    Comparison ignores ASCII letter case only; non-ASCII characters must
    match exactly.

    Args:
        entry_name: Base name of the file being tested
        target: Filename the user is looking for

    Returns:
        True if the names are equal ignoring ASCII case
    """
    if len(entry_name) != len(target):
        return False
    return ascii_lower(entry_name) == ascii_lower(target)


class ResultCollector:
    """
    Append-only, thread-safe sink for matched paths.

    Insertion order is preserved, so a single-threaded walk yields a
    deterministic sequence. Under concurrent appends the order follows
    scheduling.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._paths: List[str] = []

    def add(self, path: str) -> None:
        """Append a single matched path."""
        with self._lock:
            self._paths.append(path)

    def extend(self, paths: Iterable[str]) -> None:
        """Append several paths as one atomic batch."""
        batch = list(paths)
        if not batch:
            return
        with self._lock:
            self._paths.extend(batch)

    def to_list(self) -> List[str]:
        """Return a snapshot copy of the collected paths."""
        with self._lock:
            return list(self._paths)

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)


class VisitCounter:
    """
    Thread-safe count of directories processed during a search.

    An optional callback receives each increment. It is invoked while the
    counter lock is held, so callbacks never run concurrently with each
    other.
    """

    def __init__(self, callback: Optional[Callable[[int], None]] = None):
        self._lock = threading.Lock()
        self._value = 0
        self._callback = callback

    def increment(self, n: int = 1) -> None:
        with self._lock:
            self._value += n
            if self._callback is not None:
                self._callback(n)

    @property
    def value(self) -> int:
        with self._lock:
            return self._value
