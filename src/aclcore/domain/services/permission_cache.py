"""Per-account cache of resolved API names.

Entries expire after ``ttl_seconds``. ACL mutations drop entries explicitly,
so the TTL only bounds staleness from writes made by other processes.
"""

import threading
import time
from typing import NamedTuple


class CacheEntry(NamedTuple):
    value: frozenset[str]
    expires_at: float


class PermissionCache:
    """Effective API names keyed by account ID, safe to share across threads."""

    def __init__(self, ttl_seconds: int = 300):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[int, CacheEntry] = {}
        self._generation = 0
        self._lock = threading.RLock()

    def get(self, account_id: int) -> frozenset[str] | None:
        """Return the cached names, or None when missing or expired."""
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(account_id)
            if entry is not None and now > entry.expires_at:
                del self._entries[account_id]
                entry = None
        return entry.value if entry is not None else None

    @property
    def generation(self) -> int:
        """Counter bumped by every invalidation."""
        with self._lock:
            return self._generation

    def set(
        self,
        account_id: int,
        api_names: set[str] | frozenset[str],
        generation: int | None = None,
    ) -> bool:
        """Store names computed at ``generation``.

        The write is dropped, and False returned, when an invalidation has
        happened since that generation was read.
        """
        entry = CacheEntry(frozenset(api_names), time.monotonic() + self.ttl_seconds)
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._entries[account_id] = entry
        return True

    def invalidate_account(self, account_id: int) -> None:
        with self._lock:
            self._generation += 1
            self._entries.pop(account_id, None)

    def invalidate_all(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def cleanup_expired(self) -> int:
        """Evict expired entries and return how many were removed."""
        now = time.monotonic()
        with self._lock:
            stale = [key for key, entry in self._entries.items() if now > entry.expires_at]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)
