"""Plan resolution cache with age-based expiry and in-flight request coalescing."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 60 * 60 * 24


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    fetched_at: float
    value: "asyncio.Task[T | None]"


class PlanCache(Generic[T]):
    """Keyed cache of resolution tasks.

    Each key owns at most one task. Every caller that asks for a key while its
    entry is fresh awaits that same task, so concurrent resolutions share one
    upstream fetch. Entries are checked for staleness only on access. A task
    that resolves to ``None`` (or raises) removes its entry so the next call
    fetches again.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        return self._entries.get(key)

    def is_stale(self, entry: CacheEntry[T]) -> bool:
        return self._clock() - entry.fetched_at >= self.ttl_seconds

    async def resolve(self, key: str, fetch: Callable[[], Awaitable[T | None]]) -> T | None:
        # No await may happen before the entry is chosen or replaced.
        entry = self._entries.get(key)

        if entry is None or self.is_stale(entry):
            logger.debug(f"Plan cache miss for {key}")
            entry = CacheEntry(fetched_at=self._clock(), value=asyncio.ensure_future(fetch()))
            self._entries[key] = entry
            entry.value.add_done_callback(lambda _, entry=entry: self._settle(key, entry))
        else:
            logger.debug(f"Plan cache hit for {key}")

        return await asyncio.shield(entry.value)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def _settle(self, key: str, entry: CacheEntry[T]) -> None:
        task = entry.value
        if task.cancelled():
            absent = True
        elif task.exception() is not None:
            logger.warning(f"Plan resolution for {key} failed: {task.exception()!r}")
            absent = True
        else:
            absent = task.result() is None

        # A newer entry may already have replaced this one.
        if absent and self._entries.get(key) is entry:
            logger.debug(f"Evicting absent plan {key}")
            del self._entries[key]
