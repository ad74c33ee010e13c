"""In-memory LRU cache with per-entry TTL and pattern invalidation.

Ordering: an OrderedDict keyed by cache key, least recently touched first.
`get` hits and `set` both move the key to the most-recently-used end.

Expiry is checked two ways:
  - lazily on `get` / `has` (an expired entry is never returned)
  - actively by `sweep_expired`, run on an interval by `start_sweeper`
    so entries that are never read again still leave memory.

An entry is expired once `clock() - inserted_at >= ttl`, so ttl=0 means
"already expired". TTLs are seconds; the clock is injectable for tests.

Concurrency: a threading.Lock guards every map mutation. It is never held
across an await, so `get_or_set` does NOT de-duplicate concurrent misses:
each caller that misses runs its own producer.
"""

import asyncio
import logging
import re
import threading
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger("ft.cache")

T = TypeVar("T")

_MISSING = object()


@dataclass
class CacheEntry(Generic[T]):
    value: T
    inserted_at: float
    ttl: float
    hit_count: int = 0


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    size: int
    hit_rate: float
    evictions: int


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a `*`-only glob into an anchored regex.

    Every character other than `*` matches literally (including `:`, `.`,
    brackets), so no input can produce an invalid regex.
    """
    parts = (re.escape(part) for part in pattern.split("*"))
    return re.compile(".*".join(parts), re.DOTALL)


class LRUCache(Generic[T]):
    def __init__(
        self,
        max_size: int = 500,
        default_ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._max_size = max(0, max_size)
        self._default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._sweeper: asyncio.Task[None] | None = None
        self.name = name

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def __len__(self) -> int:
        return len(self._entries)

    def size(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry[T], now: float) -> bool:
        return now - entry.inserted_at >= entry.ttl

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _lookup(self, key: str) -> object:
        """Counted lookup returning `_MISSING` on miss or expiry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return _MISSING
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                self._misses += 1
                self._evictions += 1
                return _MISSING
            entry.hit_count += 1
            self._hits += 1
            self._entries.move_to_end(key)
            return entry.value

    def get(self, key: str, default: T | None = None) -> T | None:
        value = self._lookup(key)
        if value is _MISSING:
            return default
        return value  # type: ignore[return-value]

    def has(self, key: str) -> bool:
        """Existence check with expiry; no stats, no reordering."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                return False
            return True

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        entry = CacheEntry(
            value=value,
            inserted_at=self._clock(),
            ttl=self._default_ttl if ttl is None else ttl,
        )
        with self._lock:
            if key in self._entries:
                # Overwrite refreshes position; never an eviction.
                del self._entries[key]
            else:
                while self._entries and len(self._entries) >= self._max_size:
                    self._entries.popitem(last=False)
                    self._evictions += 1
            if self._max_size == 0:
                return
            self._entries[key] = entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key fully matching a `*` glob. Returns the count."""
        regex = glob_to_regex(pattern)
        with self._lock:
            doomed = [key for key in self._entries if regex.fullmatch(key)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        """Drop every entry. Hit/miss/eviction counters are kept."""
        with self._lock:
            self._entries.clear()

    async def get_or_set(
        self,
        key: str,
        producer: Callable[[], Awaitable[T]],
        ttl: float | None = None,
    ) -> T:
        cached = self._lookup(key)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]
        value = await producer()
        self.set(key, value, ttl)
        return value

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> CacheStats:
        total = self._hits + self._misses
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            size=len(self._entries),
            hit_rate=(self._hits / total) * 100 if total > 0 else 0.0,
            evictions=self._evictions,
        )

    # ------------------------------------------------------------------
    # Active expiry
    # ------------------------------------------------------------------

    def sweep_expired(self) -> int:
        """Remove every lapsed entry regardless of access. Returns the count."""
        with self._lock:
            now = self._clock()
            doomed = [k for k, e in self._entries.items() if self._is_expired(e, now)]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.info("Cache %s sweep: removed %d expired entries", self.name, len(doomed))
        return len(doomed)

    async def _sweep_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.sweep_expired()

    def start_sweeper(self, interval: float = 60.0) -> asyncio.Task[None]:
        """Start the periodic sweep on the running loop, replacing any prior one."""
        if self._sweeper is not None and not self._sweeper.done():
            self._sweeper.cancel()
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep_loop(interval), name=f"cache-sweep-{self.name}"
        )
        return self._sweeper

    async def stop_sweeper(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()
