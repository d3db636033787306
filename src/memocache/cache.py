"""Fixed-capacity least-recently-used cache.

Entries live in an ``OrderedDict`` whose order is recency: the first key is the
least recently used, the last key is the most recently used. Reads and writes
that hit an existing key move it to the end; inserting a new key into a full
cache first pops the oldest entry.

A miss is reported with the ``MISSING`` sentinel rather than ``None`` so that a
cached ``0``, ``[]`` or ``None`` can never be mistaken for an absent entry.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import Any, Final


class _MissingType:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = _MissingType()


@dataclass(slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        total = self.lookups
        return (self.hits / total) if total else 0.0

    def as_dict(self) -> dict[str, object]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": round(self.hit_rate, 4),
        }


class BoundedMemoCache:
    """Key/value store holding at most ``capacity`` entries, evicting LRU-first.

    Not thread-safe: callers that share an instance across threads must
    serialize access themselves.
    """

    __slots__ = ("_capacity", "_entries", "_stats")

    def __init__(self, capacity: int) -> None:
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise ValueError(f"capacity must be an integer, got {type(capacity).__name__}")
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")

        self._capacity = capacity
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()
        self._stats = CacheStats()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def get(self, key: Hashable) -> Any:
        """Return the value for ``key`` and mark it most recent, or ``MISSING``."""

        if key not in self._entries:
            self._stats.misses += 1
            return MISSING

        self._entries.move_to_end(key)
        self._stats.hits += 1
        return self._entries[key]

    def peek(self, key: Hashable) -> Any:
        """Like ``get`` but leaves recency order and counters untouched."""

        if key not in self._entries:
            return MISSING
        return self._entries[key]

    def set(self, key: Hashable, value: Any) -> None:
        """Insert or update ``key``; a new key in a full cache evicts the oldest entry."""

        if key in self._entries:
            self._entries.move_to_end(key)
            self._entries[key] = value
            return

        if len(self._entries) >= self._capacity:
            self._entries.popitem(last=False)
            self._stats.evictions += 1

        self._entries[key] = value

    def delete(self, key: Hashable) -> bool:
        if key not in self._entries:
            return False
        del self._entries[key]
        return True

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[Hashable]:
        """Return keys ordered from least to most recently used."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"BoundedMemoCache(capacity={self._capacity}, size={len(self._entries)})"
