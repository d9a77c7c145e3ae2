from __future__ import annotations

import threading

from strata.routing import MatchCache, MatchResult
from strata.routing.cache import NO_MATCH


def test_get_missing_key():
    assert MatchCache().get(("", "/foo", "/foo")) is None


def test_set_keeps_first_value():
    cache = MatchCache()
    key = ("", "/:id", "/1")
    first = MatchResult(matched=True, params={"id": "1"})

    assert cache.set(key, first) is first
    assert cache.set(key, MatchResult(matched=True, params={"id": "1"})) is first
    assert len(cache) == 1


def test_get_or_compute_computes_once():
    cache = MatchCache()
    calls: list[int] = []

    def compute():
        calls.append(1)
        return NO_MATCH

    assert cache.get_or_compute(("", "/a", "/b"), compute) is NO_MATCH
    assert cache.get_or_compute(("", "/a", "/b"), compute) is NO_MATCH
    assert calls == [1]
    assert ("", "/a", "/b") in cache


def test_disabled_cache_never_stores():
    cache = MatchCache(enabled=False)
    calls: list[int] = []

    def compute():
        calls.append(1)
        return NO_MATCH

    cache.get_or_compute(("", "/a", "/b"), compute)
    cache.get_or_compute(("", "/a", "/b"), compute)

    assert calls == [1, 1]
    assert len(cache) == 0


def test_concurrent_writes_store_a_single_value():
    cache = MatchCache()
    key = ("", "/:id", "/1")
    barrier = threading.Barrier(8)
    stored: list[MatchResult] = []

    def worker():
        barrier.wait()
        for _ in range(200):
            stored.append(cache.set(key, MatchResult(matched=True, params={"id": "1"})))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == 1
    assert len(stored) == 1600
    assert all(result is stored[0] for result in stored)


def test_concurrent_distinct_keys():
    cache = MatchCache()

    def worker(index: int):
        for path in range(100):
            cache.get_or_compute(
                ("", "/:id", f"/{index}/{path}"), lambda: MatchResult(matched=True)
            )

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cache) == 400
