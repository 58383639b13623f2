"""
Staleness cache: the last successful quote per indicator, for the life of the process.

When every live source for an indicator fails, a recent enough entry is
served instead of an error. Empty on cold start; entries are overwritten on
each success and never deleted, only ignored once older than the caller's
freshness window.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Optional

from ..timeutils import now_epoch_ms
from .base import QuoteResult


@dataclass(frozen=True)
class CacheEntry:
    result: QuoteResult
    captured_at_ms: int

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.captured_at_ms

    def is_fresh(self, window_s: float, now_ms: int) -> bool:
        return window_s > 0 and self.age_ms(now_ms) < window_s * 1000


class StalenessCache:
    """One slot per indicator key; last write wins."""

    def __init__(self) -> None:
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._store.get(key)

    def put(self, key: str, result: QuoteResult, now_ms: Optional[int] = None) -> CacheEntry:
        entry = CacheEntry(result=result, captured_at_ms=now_epoch_ms() if now_ms is None else now_ms)
        with self._lock:
            self._store[key] = entry
        return entry

    def get_fresh(self, key: str, window_s: float, now_ms: Optional[int] = None) -> Optional[CacheEntry]:
        entry = self.get(key)
        if entry is None:
            return None
        now = now_epoch_ms() if now_ms is None else now_ms
        return entry if entry.is_fresh(window_s, now) else None

    def __len__(self) -> int:
        return len(self._store)


_default_cache = StalenessCache()


def default_cache() -> StalenessCache:
    """Process-wide cache shared by all requests."""
    return _default_cache
