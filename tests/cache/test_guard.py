# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for OnceGuard, the per-slot first-access guard."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from lazyslot.cache import OnceGuard
from lazyslot.types import Undefined


class TestOnceGuard:
    def test_starts_empty(self):
        guard = OnceGuard()
        assert guard.value is Undefined
        assert not guard.filled
        assert not guard.retired

    def test_runs_factory_once(self, counter):
        guard = OnceGuard()
        first = guard.ensure(lambda: counter.bump(object()))
        second = guard.ensure(lambda: counter.bump(object()))
        assert first is second
        assert counter.calls == 1
        assert guard.filled
        assert guard.retired

    def test_caches_none(self, counter):
        guard = OnceGuard()
        assert guard.ensure(lambda: counter.bump(None)) is None
        assert guard.ensure(lambda: counter.bump(1)) is None
        assert counter.calls == 1

    def test_failure_leaves_slot_empty(self):
        guard = OnceGuard()

        def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            guard.ensure(fail)
        assert not guard.filled
        assert not guard.retired
        assert guard.ensure(lambda: 7) == 7

    def test_reentry_raises_default_error(self):
        guard = OnceGuard()
        with pytest.raises(RuntimeError):
            guard.ensure(lambda: guard.ensure(lambda: 1))
        assert not guard.filled

    def test_reentry_uses_custom_error(self):
        guard = OnceGuard()

        class Loop(Exception):
            pass

        with pytest.raises(Loop):
            guard.ensure(
                lambda: guard.ensure(lambda: 1, on_reentry=Loop),
                on_reentry=Loop,
            )

    def test_concurrent_ensure_single_call(self, counter):
        """Threads released together all receive the first computed value."""
        guard = OnceGuard()
        num_threads = 16
        barrier = threading.Barrier(num_threads)
        lock = threading.Lock()

        def factory():
            with lock:
                counter.bump()
            return object()

        def worker():
            barrier.wait()
            return guard.ensure(factory)

        with ThreadPoolExecutor(max_workers=num_threads) as pool:
            results = list(pool.map(lambda _: worker(), range(num_threads)))

        assert counter.calls == 1
        assert all(r is results[0] for r in results)
