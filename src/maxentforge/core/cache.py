"""Bounded memoization of splice-site scores.

Scoring the same window repeatedly is common when several transcripts of a
gene share a splice site, so each scoring function keeps a small cache of
its most recently computed results.

Eviction is first-in first-out: once the cache holds more than
``capacity`` entries the oldest insertion is dropped. A hit does not
refresh an entry.

Example:
    >>> cache = ScoreCache(capacity=2)
    >>> cache.put("CAGGTAAGT", 10.86)
    >>> cache.get("CAGGTAAGT")
    10.86
"""

from __future__ import annotations

import threading
from collections import OrderedDict

# =============================================================================
# Constants
# =============================================================================

DEFAULT_CACHE_SIZE = 50


# =============================================================================
# Cache
# =============================================================================


class ScoreCache:
    """Thread-safe FIFO cache of sequence -> score.

    Keys are compared by exact string equality.

    Attributes:
        capacity: Maximum number of entries retained.
        hits: Number of successful lookups.
        misses: Number of failed lookups.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE) -> None:
        if capacity < 0:
            raise ValueError(f"Cache capacity cannot be negative: {capacity}")
        self.capacity = capacity
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[str, float] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, sequence: str) -> float | None:
        """Return the cached score for a sequence, or None on a miss."""
        with self._lock:
            score = self._entries.get(sequence)
            if score is None:
                self.misses += 1
            else:
                self.hits += 1
            return score

    def put(self, sequence: str, score: float) -> None:
        """Store a score, evicting the oldest entries beyond capacity."""
        with self._lock:
            if sequence in self._entries:
                return
            self._entries[sequence] = score
            while len(self._entries) > self.capacity:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop all entries and reset counters."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def keys(self) -> list[str]:
        """Cached sequences, oldest first."""
        with self._lock:
            return list(self._entries)

    def __contains__(self, sequence: object) -> bool:
        with self._lock:
            return sequence in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"ScoreCache(capacity={self.capacity}, size={len(self)}, "
            f"hits={self.hits}, misses={self.misses})"
        )
