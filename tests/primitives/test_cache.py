from __future__ import annotations

import logging
import threading
import time

import numpy as np
import pytest

from engine.primitives.cache import CircleCache
from engine.primitives.geometry import create_circle


def test_get_or_create_calls_factory_once_per_key() -> None:
    cache = CircleCache(debug=False)
    calls: list[tuple[float, int]] = []

    def factory(r: float, n: int) -> np.ndarray:
        calls.append((r, n))
        return create_circle(r, n)

    a = cache.get_or_create(1.0, 8, factory)
    b = cache.get_or_create(1.0, 8, factory)
    c = cache.get_or_create(1.0, 9, factory)
    assert a is b
    assert c is not a
    assert calls == [(1.0, 8), (1.0, 9)]
    assert cache.stats() == {"hits": 1, "misses": 2, "size": 2}
    assert len(cache) == 2
    assert CircleCache.make_key(1, 8) in cache
    assert (1.0, 10) not in cache


def test_stored_sequence_is_read_only() -> None:
    cache = CircleCache(debug=False)
    pts = cache.get_or_create(2.0, 4, create_circle)
    assert pts.flags.writeable is False


def test_get_or_create_is_atomic_across_threads() -> None:
    cache = CircleCache(debug=False)
    calls: list[int] = []

    def slow_factory(r: float, n: int) -> np.ndarray:
        calls.append(n)
        time.sleep(0.01)
        return create_circle(r, n)

    results: list[np.ndarray] = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(cache.get_or_create(5.0, 32, slow_factory))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_clear_resets_entries_and_stats() -> None:
    cache = CircleCache(debug=False)
    cache.get_or_create(1.0, 3, create_circle)
    cache.clear()
    assert len(cache) == 0
    assert cache.stats() == {"hits": 0, "misses": 0, "size": 0}


def test_debug_logs_hits_and_misses(caplog: pytest.LogCaptureFixture) -> None:
    cache = CircleCache(debug=True)
    with caplog.at_level(logging.DEBUG, logger="engine.primitives.cache"):
        cache.get_or_create(1.0, 5, create_circle)
        cache.get_or_create(1.0, 5, create_circle)
    messages = [r.getMessage() for r in caplog.records]
    assert any("miss" in m for m in messages)
    assert any("hit" in m for m in messages)


def test_debug_flag_defaults_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from common import settings

    monkeypatch.setenv("MGN_CIRCLE_CACHE_DEBUG", "1")
    settings.reload_from_env()
    try:
        assert CircleCache()._debug is True
    finally:
        monkeypatch.delenv("MGN_CIRCLE_CACHE_DEBUG", raising=False)
        settings.reload_from_env()
