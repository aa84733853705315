"""Process-wide TTL cache for rendered responses.

Entries expire lazily: an expired entry is evicted by the read that finds
it, and nothing sweeps in the background. Reads and writes go straight to
a dict, so callers on distinct keys never wait on each other. Two callers
that miss the same key both compute and both store; the last write wins.
There is no single-flight deduplication.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class CacheEntry:
    payload: str
    expires_at: float


class ResponseCache(Protocol):
    def try_get(self, key: str) -> str | None: ...

    def set(self, key: str, payload: str, ttl_seconds: float) -> None: ...


class InMemoryResponseCache:
    """Dict-backed ResponseCache with an injectable monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._clock = clock

    def try_get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            # Only evict the entry we saw; a concurrent fresh write stays.
            if self._entries.get(key) is entry:
                self._entries.pop(key, None)
            return None
        return entry.payload

    def set(self, key: str, payload: str, ttl_seconds: float) -> None:
        self._entries[key] = CacheEntry(payload=payload, expires_at=self._clock() + ttl_seconds)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
