"""Time-bounded in-memory cache shared by the weather and air-quality lookups.

Entries expire lazily: a ``get`` that finds an entry older than the TTL drops
it and reports a miss. There is no size bound; the key space is bounded by
the number of distinct regions queried.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_TTL_MINUTES = 15
COORD_PRECISION = 4


@dataclass(frozen=True)
class CacheKey:
    source: str
    latitude: float
    longitude: float
    days: int = 0
    radius_m: int = 0

    @classmethod
    def for_point(
        cls,
        source: str,
        latitude: float,
        longitude: float,
        days: int = 0,
        radius_m: int = 0,
    ) -> "CacheKey":
        return cls(
            source=source,
            latitude=round(latitude, COORD_PRECISION),
            longitude=round(longitude, COORD_PRECISION),
            days=days,
            radius_m=radius_m,
        )

    def __str__(self) -> str:
        key = f"{self.source}_{self.latitude}_{self.longitude}_{self.days}"
        return f"{key}_r{self.radius_m}" if self.radius_m else key


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    created_at: float


class TemporalCache(Generic[T]):
    def __init__(
        self,
        ttl_minutes: float = DEFAULT_TTL_MINUTES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_minutes * 60
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.created_at > self.ttl_seconds:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: CacheKey, value: T) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
