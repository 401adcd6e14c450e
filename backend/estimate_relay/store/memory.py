"""Process-local result store."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from .base import DEFAULT_TTL_SECONDS, ResultEntry, ResultStore


class MemoryResultStore(ResultStore):
    """Dictionary backed store guarded by a lock.

    State is private to the process, so every instance of a multi-process
    deployment sees its own results. Use the SQL backend there instead.
    """

    backend_name = "memory"

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(ttl)
        self._clock = clock
        self._entries: dict[str, tuple[ResultEntry, float]] = {}
        self._lock = threading.Lock()

    def put(self, callback_id: str, entry: ResultEntry) -> None:
        with self._lock:
            self._entries[callback_id] = (entry, self._clock())

    def get(self, callback_id: str) -> ResultEntry | None:
        with self._lock:
            item = self._entries.get(callback_id)
            if item is None:
                return None
            entry, stored_at = item
            if self.is_expired(stored_at, self._clock()):
                del self._entries[callback_id]
                return None
            return entry

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [
                callback_id
                for callback_id, (_, stored_at) in self._entries.items()
                if self.is_expired(stored_at, now)
            ]
            for callback_id in expired:
                del self._entries[callback_id]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
