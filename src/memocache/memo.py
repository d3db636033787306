from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from memocache.cache import MISSING, BoundedMemoCache
from memocache.keys import canonical_key

logger = logging.getLogger("memocache.memo")

T = TypeVar("T")


class Memoizer(Generic[T]):
    """Answer repeated calls of a single-argument pure function from a cache.

    Inputs are compared structurally through ``key`` (``canonical_key`` by
    default), so two distinct lists with equal contents share one entry.
    """

    def __init__(
        self,
        fn: Callable[[Any], T],
        cache: BoundedMemoCache,
        *,
        key: Callable[[Any], str] = canonical_key,
    ) -> None:
        self._fn = fn
        self._cache = cache
        self._key = key
        self._name = getattr(fn, "__qualname__", None) or repr(fn)
        functools.update_wrapper(self, fn)

    @property
    def cache(self) -> BoundedMemoCache:
        return self._cache

    def __call__(self, value: Any) -> T:
        k = self._key(value)
        cached = self._cache.get(k)
        if cached is not MISSING:
            logger.debug("cache hit for %s (%d chars)", self._name, len(k))
            return cached

        logger.debug("cache miss for %s (%d chars)", self._name, len(k))
        result = self._fn(value)
        self._cache.set(k, result)
        return result


def memoize(
    cache: BoundedMemoCache,
    *,
    key: Callable[[Any], str] = canonical_key,
) -> Callable[[Callable[[Any], T]], Memoizer[T]]:
    """Decorator form of ``Memoizer``.

    Usage::

        cache = BoundedMemoCache(100)

        @memoize(cache)
        def double_all(values):
            return [v * 2 for v in values]
    """

    def decorate(fn: Callable[[Any], T]) -> Memoizer[T]:
        return Memoizer(fn, cache, key=key)

    return decorate
