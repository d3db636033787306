from __future__ import annotations

import pickle

import pytest

from memocache.cache import MISSING, BoundedMemoCache


def test_get_on_empty_cache_is_missing() -> None:
    cache = BoundedMemoCache(2)
    assert cache.get("a") is MISSING
    assert len(cache) == 0


def test_capacity_bound_holds_after_every_set() -> None:
    cache = BoundedMemoCache(3)
    for i in range(20):
        cache.set(f"k{i}", i)
        assert len(cache) <= 3
    assert len(cache) == 3


def test_oldest_key_is_evicted_first() -> None:
    n = 4
    cache = BoundedMemoCache(n)
    keys = [f"k{i}" for i in range(1, n + 2)]
    for i, k in enumerate(keys):
        cache.set(k, i)

    assert cache.get(keys[0]) is MISSING
    for k in keys[1:]:
        assert k in cache


def test_get_marks_key_most_recent() -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1
    cache.set("c", 3)

    assert cache.get("b") is MISSING
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_set_on_existing_key_marks_it_most_recent() -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert cache.get("b") is MISSING
    assert cache.get("a") == 10
    assert cache.get("c") == 3


def test_update_in_place_never_grows_or_evicts() -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", 1)
    cache.set("b", 2)
    for v in range(5):
        cache.set("a", v)
        assert len(cache) == 2
    assert cache.stats.evictions == 0
    assert cache.peek("b") == 2


@pytest.mark.parametrize("falsy", [0, 0.0, "", [], {}, None, False])
def test_falsy_value_is_a_hit(falsy: object) -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", falsy)

    got = cache.get("a")
    assert got is not MISSING
    assert got == falsy
    assert cache.get("nope") is MISSING


def test_repeated_get_returns_same_value_and_keeps_order() -> None:
    cache = BoundedMemoCache(3)
    cache.set("a", [1])
    cache.set("b", [2])
    cache.set("c", [3])

    first = cache.get("b")
    order_after_first = cache.keys()
    second = cache.get("b")

    assert first is second
    assert cache.keys() == order_after_first == ["a", "c", "b"]


def test_keys_are_ordered_least_to_most_recent() -> None:
    cache = BoundedMemoCache(3)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    cache.get("a")
    assert cache.keys() == ["b", "c", "a"]
    assert list(cache) == ["b", "c", "a"]


def test_miss_does_not_touch_order() -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("zzz")
    cache.set("c", 3)
    assert "a" not in cache
    assert cache.keys() == ["b", "c"]


def test_peek_and_contains_do_not_touch_order() -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.peek("a") == 1
    assert "a" in cache
    cache.set("c", 3)

    assert cache.peek("a") is MISSING
    assert cache.keys() == ["b", "c"]


def test_delete_and_clear() -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.delete("a") is True
    assert cache.delete("a") is False
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0
    assert cache.get("b") is MISSING


def test_delete_frees_a_slot_without_eviction() -> None:
    cache = BoundedMemoCache(2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.set("c", 3)
    assert cache.keys() == ["b", "c"]
    assert cache.stats.evictions == 0


def test_capacity_one_keeps_only_latest() -> None:
    cache = BoundedMemoCache(1)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.keys() == ["b"]
    assert cache.capacity == 1


def test_stats_count_hits_misses_and_evictions() -> None:
    cache = BoundedMemoCache(1)
    cache.get("a")
    cache.set("a", 1)
    cache.get("a")
    cache.set("b", 2)

    assert cache.stats.hits == 1
    assert cache.stats.misses == 1
    assert cache.stats.evictions == 1
    assert cache.stats.hit_rate == 0.5
    assert cache.stats.as_dict()["evictions"] == 1


def test_hit_rate_without_lookups_is_zero() -> None:
    assert BoundedMemoCache(1).stats.hit_rate == 0.0


@pytest.mark.parametrize("bad", [0, -1, 1.5, "3", True])
def test_invalid_capacity_raises(bad: object) -> None:
    with pytest.raises(ValueError):
        BoundedMemoCache(bad)  # type: ignore[arg-type]


def test_non_string_hashable_keys_work() -> None:
    cache = BoundedMemoCache(2)
    cache.set(("a", 1), "tuple")
    cache.set(42, "int")
    assert cache.get(("a", 1)) == "tuple"
    assert cache.get(42) == "int"


def test_missing_sentinel_survives_pickle() -> None:
    assert pickle.loads(pickle.dumps(MISSING)) is MISSING
    assert repr(MISSING) == "MISSING"
