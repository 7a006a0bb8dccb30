"""
Locator Cache
-------------

In‑memory cache of locators that the model proposed and the live
markup confirmed.  Entries are keyed by ``(element name, fingerprint)``
where the fingerprint is a hash of the exact fragment the model saw,
so a changed page naturally misses the cache.

Entries live for 24 hours by default.  Expiry is checked lazily when an
entry is read; capacity is enforced when a new entry is written (first
all expired entries are purged, then the entry closest to expiry is
evicted).  There is no background sweeper.  All operations are
serialised by one lock.
"""

from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..utils.logger import get_logger

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_SIZE = 1000

CacheKey = Tuple[str, str]


def fingerprint(fragment: str) -> str:
    """Return a stable content hash for a markup fragment."""
    return hashlib.sha256(fragment.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    locator: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class LocatorCache:
    """Thread‑safe TTL cache for healed locators."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_size: int = DEFAULT_MAX_SIZE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()
        self.logger = get_logger(self.__class__.__name__)

    def get(self, element_name: str, context_hash: str) -> Optional[str]:
        """Return the cached locator, or ``None`` if absent or expired."""
        key = (element_name, context_hash)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                self.logger.debug("Cache expired for %s", element_name)
                return None
        self.logger.debug("Cache HIT for %s", element_name)
        return entry.locator

    def put(self, element_name: str, context_hash: str, locator: str) -> None:
        key = (element_name, context_hash)
        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._evict(now)
            self._entries[key] = CacheEntry(locator, now + self.ttl_seconds)
            size = len(self._entries)
        self.logger.debug("Cache PUT for %s (size: %d)", element_name, size)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        self.logger.info("Locator cache cleared")

    def _evict(self, now: float) -> None:
        # Caller holds the lock
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for k in expired:
            del self._entries[k]
        if len(self._entries) >= self.max_size:
            oldest = min(self._entries, key=lambda k: self._entries[k].expires_at)
            del self._entries[oldest]
            self.logger.debug("Evicted oldest cache entry for %s", oldest[0])

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return self.get(*key) is not None


__all__ = ["LocatorCache", "CacheEntry", "fingerprint", "DEFAULT_TTL_SECONDS", "DEFAULT_MAX_SIZE"]
