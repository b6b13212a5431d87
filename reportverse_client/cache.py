"""
Per-session query cache.

Entries are keyed by query identity: a tuple of resource name plus whatever
parameters select the data, e.g. ``("mentor", "issues")`` or
``("mentor", "issue", issue_id)``. A read inside the entry's freshness window
is served from memory; anything else goes to the loader. A failed load keeps
the previous data and records the error on the entry.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]
Loader = Callable[[], Awaitable[Any]]

DEFAULT_TTL = 300.0


@dataclass
class CacheEntry:
    data: Any = None
    is_loading: bool = False
    error: Optional[BaseException] = None
    last_fetched_at: Optional[float] = None
    ttl: float = DEFAULT_TTL

    def is_fresh(self, now: float) -> bool:
        if self.last_fetched_at is None:
            return False
        return now - self.last_fetched_at < self.ttl


class QueryCache:
    """
    Usage:
        cache = QueryCache()
        issues = await cache.fetch(("mentor", "issues"), api.issues)
        cache.patch(("mentor", "issues"), lambda issues: [new_issue] + issues)
        cache.invalidate(("mentor",))  # every key starting with "mentor"
    """

    def __init__(self, default_ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    def entry(self, key: CacheKey) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def get(self, key: CacheKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry else None

    async def fetch(
        self,
        key: CacheKey,
        loader: Loader,
        ttl: Optional[float] = None,
        force: bool = False,
    ) -> Any:
        """Cached data while fresh, otherwise whatever ``loader`` returns"""
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(ttl=self.default_ttl if ttl is None else ttl)
        elif ttl is not None:
            entry.ttl = ttl

        if not force and entry.error is None and entry.is_fresh(self._clock()):
            self.hits += 1
            return entry.data

        self.misses += 1
        entry.is_loading = True
        try:
            data = await loader()
        except Exception as e:
            entry.error = e
            logger.warning(f"Cache load failed for {key!r}: {e}")
            raise
        finally:
            entry.is_loading = False

        entry.data = data
        entry.error = None
        entry.last_fetched_at = self._clock()
        return data

    async def refresh(self, key: CacheKey, loader: Loader, ttl: Optional[float] = None) -> Any:
        return await self.fetch(key, loader, ttl=ttl, force=True)

    def set(self, key: CacheKey, data: Any, ttl: Optional[float] = None) -> None:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(ttl=self.default_ttl if ttl is None else ttl)
        entry.data = data
        entry.error = None
        entry.last_fetched_at = self._clock()

    def patch(self, key: CacheKey, update: Callable[[Any], Any]) -> bool:
        """
        Apply ``update`` to the cached data in place. Leaves the fetch time
        alone so the next background refresh still reconciles. Returns False
        when nothing is cached under ``key``.
        """
        entry = self._entries.get(key)
        if entry is None or entry.last_fetched_at is None:
            return False
        entry.data = update(entry.data)
        return True

    def invalidate(self, key_or_prefix: CacheKey) -> int:
        """Drop ``key_or_prefix`` and every key that starts with it"""
        size = len(key_or_prefix)
        doomed = [key for key in self._entries if key[:size] == tuple(key_or_prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        return {
            "entries": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
            "loading": sum(1 for e in self._entries.values() if e.is_loading),
            "errors": sum(1 for e in self._entries.values() if e.error is not None),
        }
