import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

MISSING = object()  # cached "not found" result
MAX_ENTRIES = 512


class PageCache:
    """Time-based revalidation: entries are regenerated once their TTL elapses."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = MAX_ENTRIES,
    ):
        self.clock = clock
        self.max_entries = max_entries
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self.clock() >= expires_at:
            logger.debug(f"Cache entry {key} is stale")
            self._entries.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        now = self.clock()
        # re-insert so dict order tracks write age
        self._entries.pop(key, None)
        self._entries[key] = (now + ttl_seconds, value)
        if len(self._entries) > self.max_entries:
            self._prune(now)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def _prune(self, now: float) -> None:
        stale_keys = [
            key for key, (expires_at, _) in self._entries.items() if now >= expires_at
        ]
        for key in stale_keys:
            self._entries.pop(key, None)

        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            for key in list(self._entries)[:overflow]:
                self._entries.pop(key, None)
            logger.debug(f"Evicted {overflow} oldest cache entries")
