"""In-process read cache for the data-access facade.

Entries are keyed by ``(entity, query, params)`` and expire a fixed number of
seconds after they were written. A per-entity tag index lets writers drop a
whole entity family, optionally narrowed to entries whose parameters contain
a given subset (e.g. every checklist query for one project).
"""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CacheKey:
    entity: Hashable
    query: str
    params: tuple[tuple[str, Hashable], ...] = ()

    @classmethod
    def build(cls, entity: Hashable, query: str, **params: Hashable) -> CacheKey:
        return cls(entity=entity, query=query, params=tuple(sorted(params.items())))

    def matches(self, subset: Mapping[str, Hashable]) -> bool:
        """True when every (name, value) in ``subset`` is one of our params."""
        own = dict(self.params)
        return all(name in own and own[name] == value for name, value in subset.items())


@dataclass(slots=True)
class CacheEntry:
    value: Any
    stored_at: float


class QueryCache:
    """TTL cache with tag-based invalidation.

    Example:
        >>> cache = QueryCache(ttl_seconds=30)
        >>> key = CacheKey.build("projects", "for_user", user_id="u1", user_type="client")
        >>> cache.set(key, [])
        >>> cache.get(key).value
        []
        >>> cache.invalidate("projects")
        1
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._tags: dict[Hashable, set[CacheKey]] = defaultdict(set)

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the live entry for ``key`` or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            self._discard(key)
            logger.debug("cache_expired", entity=str(key.entity), query=key.query)
            return None
        return entry

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        self._tags[key.entity].add(key)

    def invalidate(self, entity: Hashable, **params: Hashable) -> int:
        """Drop entries of ``entity`` whose params contain ``params``.

        With no params every entry of the entity family is dropped.

        Returns:
            Number of entries removed
        """
        keys = [key for key in self._tags.get(entity, ()) if key.matches(params)]
        for key in keys:
            self._discard(key)
        if keys:
            logger.debug("cache_invalidated", entity=str(entity), count=len(keys), params=params)
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()
        self._tags.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _discard(self, key: CacheKey) -> None:
        self._entries.pop(key, None)
        tagged = self._tags.get(key.entity)
        if tagged is not None:
            tagged.discard(key)
            if not tagged:
                del self._tags[key.entity]
