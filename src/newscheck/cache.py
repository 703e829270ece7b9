from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

V = TypeVar("V")

Clock = Callable[[], float]


@dataclass(frozen=True)
class _CacheEntry(Generic[V]):
    value: V
    stored_at: float


class TTLCache(Generic[V]):
    """
    Thread-safe key/value store with a fixed freshness window.
    Entries are expired lazily when read; nothing runs in the background.
    """

    def __init__(self, ttl: float, *, clock: Clock = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, _CacheEntry[V]] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self._ttl:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = _CacheEntry(value=value, stored_at=self._clock())

    def expire(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
