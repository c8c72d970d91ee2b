"""
In-memory TTL key-value store for ranked views.

A present, unexpired entry is authoritative for reads; expired entries are
evicted lazily on access. Empty lists are valid cached values; only None
signals a miss.
"""
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with its expiry on the cache's clock."""
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """
    Per-entry TTL cache.

    Args:
        default_ttl: TTL in seconds applied when `set` is given none
        clock: monotonic time source, injectable for tests
    """

    def __init__(self, default_ttl: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = float(default_ttl)
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            self._entries.pop(key, None)
            return None
        return entry

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> CacheEntry:
        """Store `value` under `key`, overwriting any previous entry."""
        ttl = self.default_ttl if ttl is None else float(ttl)
        entry = CacheEntry(key=key, value=value, expires_at=self.clock() + ttl)
        self._entries[key] = entry
        return entry

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def flush(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    def keys(self) -> List[str]:
        """Keys of live (unexpired) entries."""
        now = self.clock()
        return [key for key, entry in self._entries.items() if not entry.is_expired(now)]

    def __contains__(self, key: str) -> bool:
        return self.get_entry(key) is not None

    def __len__(self) -> int:
        return len(self.keys())
