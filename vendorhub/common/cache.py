"""
Listing Cache

Process-local time-to-live cache for paginated vendor listings.
Keys are tuples whose first element is the vendor id, so one vendor's
pages can be dropped together after a write.

Not synchronized and not shared between processes.
"""

import logging
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from .constants import DEFAULT_CACHE_TTL

logger = logging.getLogger(__name__)

_MISSING = object()


class TTLCache:
    """
    Key-value map whose entries expire after a fixed number of seconds.

    Usage:
        cache = TTLCache(ttl=300)
        cache.set(("vendor-1", 1, 10), page)
        cache.get(("vendor-1", 1, 10))
        cache.invalidate_prefix("vendor-1")
    """

    def __init__(self, ttl: float = DEFAULT_CACHE_TTL, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl: Entry lifetime in seconds
            clock: Time source (monotonic seconds), replaceable in tests
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get(self, key: Hashable, default: Optional[Any] = None) -> Optional[Any]:
        """Return the cached value, or default when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return default

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return default

        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl, value)

    def delete(self, key: Hashable) -> bool:
        """Remove one key. Returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: Hashable) -> int:
        """
        Drop every tuple key whose first element equals prefix.

        Args:
            prefix: First key element (the vendor id for listing pages)

        Returns:
            Number of entries removed
        """
        stale = [
            key for key in self._entries
            if isinstance(key, tuple) and key and key[0] == prefix
        ]
        for key in stale:
            del self._entries[key]

        if stale:
            logger.debug("Invalidated %d cached entries for %s", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
