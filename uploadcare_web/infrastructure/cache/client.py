"""
Key/value cache for resolved group info.

The resolver only reads from it; the store job writes group info after
a successful store. Entries expire after a per-entry TTL and are never
updated in place: a write replaces the whole entry.
"""

import copy
import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)


class GroupCache(Protocol):
    """Read/write interface shared by all cache backends."""

    def read(self, key: str) -> Optional[Mapping[str, Any]]:
        ...

    def write(self, key: str, value: Mapping[str, Any], expires_in: Optional[int] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryGroupCache:
    """
    Process-local cache with expiry.

    Good enough for a single worker and for tests. Values are copied
    on the way in and out so callers cannot mutate stored entries.
    Reads drop the expired entry they hit; writes sweep all expired
    entries, so keys that are never read again do not accumulate.
    """

    def __init__(
        self,
        default_expires_in: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, tuple[Optional[float], dict[str, Any]]] = {}
        self._default_expires_in = default_expires_in
        self._clock = clock
        # Held while sweeping; writers may run on different threads
        self._lock = threading.Lock()

    def read(self, key: str) -> Optional[Mapping[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._entries.pop(key, None)
            logger.debug("Cache entry expired", extra={"cache_key": key})
            return None

        return copy.deepcopy(value)

    def write(self, key: str, value: Mapping[str, Any], expires_in: Optional[int] = None) -> None:
        ttl = expires_in if expires_in is not None else self._default_expires_in
        now = self._clock()
        expires_at = now + ttl if ttl is not None else None

        with self._lock:
            self._sweep(now)
            self._entries[key] = (expires_at, copy.deepcopy(dict(value)))
        logger.debug("Cached group info", extra={"cache_key": key, "expires_in": ttl})

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def _sweep(self, now: float) -> None:
        expired = [
            key for key, (expires_at, _) in list(self._entries.items())
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            self._entries.pop(key, None)
        if expired:
            logger.debug("Swept expired cache entries", extra={"count": len(expired)})

    def __len__(self) -> int:
        return len(self._entries)


def create_group_cache(default_expires_in: Optional[int] = None) -> GroupCache:
    """Create the process-wide group cache."""
    return InMemoryGroupCache(default_expires_in=default_expires_in)
