from __future__ import annotations

import functools
import logging

from memocache.cache import BoundedMemoCache
from memocache.memo import Memoizer, memoize


def test_memoizer_computes_once_per_structural_input() -> None:
    calls: list[object] = []

    def double_all(values: list[int]) -> list[int]:
        calls.append(values)
        return [v * 2 for v in values]

    memo = Memoizer(double_all, BoundedMemoCache(4))
    assert memo([1, 2]) == [2, 4]
    assert memo([1, 2]) == [2, 4]
    assert memo((1, 2)) == [2, 4]
    assert len(calls) == 1


def test_falsy_result_is_served_from_cache() -> None:
    calls = 0

    def empty(_values: list[int]) -> list[int]:
        nonlocal calls
        calls += 1
        return []

    memo = Memoizer(empty, BoundedMemoCache(2))
    assert memo([]) == []
    assert memo([]) == []
    assert calls == 1
    assert memo.cache.stats.hits == 1


def test_evicted_input_is_recomputed() -> None:
    calls: list[int] = []

    @memoize(BoundedMemoCache(1))
    def square(x: int) -> int:
        calls.append(x)
        return x * x

    square(2)
    square(3)
    square(2)
    assert calls == [2, 3, 2]


def test_custom_key_function() -> None:
    memo = Memoizer(str.upper, BoundedMemoCache(2), key=str.lower)
    assert memo("abc") == "ABC"
    # Same key, so the first result is returned.
    assert memo("ABC") == "ABC"
    assert memo.cache.keys() == ["abc"]


def test_decorator_preserves_metadata() -> None:
    @memoize(BoundedMemoCache(2))
    def triple(x: int) -> int:
        """Multiply by three."""
        return x * 3

    assert triple.__name__ == "triple"
    assert triple.__doc__ == "Multiply by three."
    assert triple(2) == 6


def test_hits_and_misses_are_logged(caplog) -> None:
    memo = Memoizer(len, BoundedMemoCache(2))
    with caplog.at_level(logging.DEBUG, logger="memocache.memo"):
        memo([1])
        memo([1])
    messages = [r.getMessage() for r in caplog.records]
    assert any("cache miss for len" in m for m in messages)
    assert any("cache hit for len" in m for m in messages)


def test_partial_without_name_can_be_memoized(caplog) -> None:
    def scale(factor: int, values: list[int]) -> list[int]:
        return [v * factor for v in values]

    memo = Memoizer(functools.partial(scale, 2), BoundedMemoCache(2))
    with caplog.at_level(logging.DEBUG, logger="memocache.memo"):
        assert memo([1, 2]) == [2, 4]
        assert memo([1, 2]) == [2, 4]
    assert memo.cache.stats.hits == 1
    assert any("functools.partial" in r.getMessage() for r in caplog.records)


def test_callable_instance_can_be_memoized() -> None:
    class Doubler:
        def __call__(self, values: list[int]) -> list[int]:
            return [v * 2 for v in values]

    memo = Memoizer(Doubler(), BoundedMemoCache(2))
    assert memo([3]) == [6]
    assert memo([3]) == [6]
