"""Array helpers: batched doubling, sorting, binary search and lazy doubling."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from memocache.cache import BoundedMemoCache
from memocache.errors import MemocacheValidationError
from memocache.memo import Memoizer
from memocache.validation import validate_array

DEFAULT_BATCH_SIZE = 1000


def _check_batch_size(batch_size: object) -> int:
    if not isinstance(batch_size, int) or isinstance(batch_size, bool):
        raise MemocacheValidationError(
            f"batch_size must be an integer, got {type(batch_size).__name__}"
        )
    if batch_size < 1:
        raise MemocacheValidationError(f"batch_size must be >= 1, got {batch_size}")
    return batch_size


def double_in_batches(
    data: object,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_batch: Callable[[int, int], None] | None = None,
) -> list[Any]:
    """Double every element of ``data``, walking it in slices of ``batch_size``.

    ``on_batch(done, total)`` is called after each slice with the number of
    elements processed so far.
    """

    _check_batch_size(batch_size)

    values = validate_array(data)
    total = len(values)
    out: list[Any] = []
    for start in range(0, total, batch_size):
        batch = values[start : start + batch_size]
        out.extend(item * 2 for item in batch)
        if on_batch is not None:
            on_batch(len(out), total)
    return out


class DataProcessor:
    """Memoized batched doubling backed by a caller-owned cache."""

    def __init__(self, cache: BoundedMemoCache, *, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        self.batch_size = _check_batch_size(batch_size)
        self.on_batch: Callable[[int, int], None] | None = None
        self._memo: Memoizer[list[Any]] = Memoizer(self._compute, cache)

    @property
    def cache(self) -> BoundedMemoCache:
        return self._memo.cache

    def _compute(self, data: object) -> list[Any]:
        return double_in_batches(data, batch_size=self.batch_size, on_batch=self.on_batch)

    def process(self, data: object) -> list[Any]:
        # Validate before keying so non-array input never reaches the cache.
        validate_array(data)
        return self._memo(data)


def fast_sort(values: Iterable[Any]) -> list[Any]:
    """Return a new ascending list; the input is never mutated."""

    items = list(values)
    if len(items) <= 1:
        return items
    return sorted(items)


def binary_search(values: Sequence[Any], target: Any) -> int:
    """Return the index of ``target`` in ascending ``values``, or -1."""

    left = 0
    right = len(values) - 1
    while left <= right:
        mid = (left + right) // 2
        item = values[mid]
        if item == target:
            return mid
        if item < target:
            left = mid + 1
        else:
            right = mid - 1
    return -1


def iter_doubled(values: Iterable[Any]) -> Iterator[Any]:
    for item in values:
        yield item * 2
