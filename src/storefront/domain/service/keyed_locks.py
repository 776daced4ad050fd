"""Per-key mutual exclusion.

Callers holding different keys never contend; callers holding the same
key are serialised. Locks for idle keys are dropped so the registry does
not grow with every anonymous session ever seen.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class KeyedLocks:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        """Hold the locks for every key in *keys* for the duration of the block.

        Keys are acquired in sorted order so two callers locking the same
        pair can never deadlock.
        """
        ordered = sorted(set(keys))
        entries = [self._checkout(key) for key in ordered]
        acquired: list[threading.Lock] = []
        try:
            for entry in entries:
                entry.lock.acquire()
                acquired.append(entry.lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._checkin(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    # --- Internal helpers -----------------------------------------------------

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: str) -> None:
        with self._guard:
            entry = self._entries[key]
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]
