"""
Time-bounded memo of the last ranking per viewer.

Entries are checked for freshness on read; nothing runs in the background.
Writes for the same viewer are not serialized: the last write wins.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .models import ScoredCandidate
from .normalize import normalize_identity

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class CacheEntry:
    viewer_key: str
    suggestions: List[ScoredCandidate]
    created_at: float


class SuggestionCache:
    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        # Guards the sweep, which iterates over every key.
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at < self.ttl

    def get(self, viewer: str) -> Optional[List[ScoredCandidate]]:
        """Return the cached ranking for a viewer, or None if absent or stale."""
        entry = self._entries.get(normalize_identity(viewer))
        if entry is None or not self._is_fresh(entry, self._clock()):
            return None
        return list(entry.suggestions)

    def put(self, viewer: str, suggestions: List[ScoredCandidate]) -> None:
        key = normalize_identity(viewer)
        self._entries[key] = CacheEntry(key, list(suggestions), self._clock())
        self.sweep()

    def sweep(self) -> int:
        """Drop stale entries across all viewers. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [(k, e) for k, e in list(self._entries.items()) if not self._is_fresh(e, now)]
            removed = 0
            for key, entry in stale:
                # A concurrent put may have replaced the entry since the scan.
                if self._entries.get(key) is entry:
                    del self._entries[key]
                    removed += 1
        return removed

    def invalidate(self, viewer: str) -> None:
        self._entries.pop(normalize_identity(viewer), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
