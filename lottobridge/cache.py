from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .types import DrawResult


@dataclass(frozen=True)
class CacheEntry:
    result: DrawResult
    written_at: float


class ResultCache:
    """Single-slot, time-boxed holder for the latest reconciled result.

    The entry is never evicted; it simply stops being returned once
    ``ttl_seconds`` have elapsed since it was written.
    """

    def __init__(self, ttl_seconds: float = 60, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0.")
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entry: Optional[CacheEntry] = None
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, now: Optional[float] = None) -> Optional[DrawResult]:
        now = self._clock() if now is None else now
        with self._lock:
            entry = self._entry
        if entry is None or now - entry.written_at >= self._ttl:
            return None
        return entry.result

    def put(self, result: DrawResult, now: Optional[float] = None) -> None:
        now = self._clock() if now is None else now
        with self._lock:
            self._entry = CacheEntry(result=result, written_at=now)

    def clear(self) -> None:
        with self._lock:
            self._entry = None
