"""Tests for ResultStore."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from licaudit.report.models import License, LookupFailure, Module
from licaudit.report.store import ResultStore


class TestResultStore:
    def test_empty_snapshot(self):
        store = ResultStore()
        assert store.snapshot() == {}
        assert len(store) == 0

    def test_report_and_snapshot(self):
        store = ResultStore()
        store.report(Module("zlib", "1.2"), License("Zlib", "zlib License"))
        store.report(Module("alpha", "0.1"), LookupFailure())

        snap = store.snapshot()
        assert snap == {
            Module("zlib", "1.2"): License("Zlib", "zlib License"),
            Module("alpha", "0.1"): LookupFailure(),
        }

    def test_last_write_wins(self):
        store = ResultStore()
        m = Module("github.com/foo/bar", "v1.0.0")
        store.report(m, LookupFailure())
        store.report(m, License("MIT", "MIT License"))

        assert store.snapshot() == {m: License("MIT", "MIT License")}

    def test_equal_modules_share_a_key(self):
        store = ResultStore()
        store.report(Module("a", "1"), License("MIT", "MIT License"))
        store.report(Module("a", "1"), License("BSD-3-Clause", "BSD 3-Clause"))
        assert len(store) == 1

    def test_same_path_different_version_are_distinct(self):
        store = ResultStore()
        store.report(Module("a", "1"), License("MIT", "MIT License"))
        store.report(Module("a", "2"), License("MIT", "MIT License"))
        assert len(store) == 2

    def test_snapshot_is_a_copy(self):
        store = ResultStore()
        store.report(Module("a", "1"), LookupFailure())
        snap = store.snapshot()
        store.report(Module("b", "1"), LookupFailure())
        snap[Module("c", "1")] = LookupFailure()

        assert set(snap) == {Module("a", "1"), Module("c", "1")}
        assert set(store.snapshot()) == {Module("a", "1"), Module("b", "1")}


# ── Concurrency ─────────────────────────────────────────────────────────


class TestResultStoreConcurrency:
    def test_concurrent_distinct_modules(self):
        store = ResultStore()
        modules = [Module(f"example.com/mod{i}", f"v{i}") for i in range(500)]

        with ThreadPoolExecutor(max_workers=32) as pool:
            list(pool.map(lambda m: store.report(m, License("MIT", "MIT License")), modules))

        snap = store.snapshot()
        assert len(snap) == 500
        assert set(snap) == set(modules)

    def test_concurrent_rewrites_keep_one_entry_per_module(self):
        store = ResultStore()
        modules = [Module(f"mod{i}", "1.0") for i in range(20)]
        barrier = threading.Barrier(8)

        def worker(n: int) -> None:
            barrier.wait()
            for _ in range(50):
                for m in modules:
                    store.report(m, License(f"L{n}", f"License {n}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snap = store.snapshot()
        assert len(snap) == 20
        for outcome in snap.values():
            # Every stored value is one complete write from some worker.
            assert isinstance(outcome, License)
            n = outcome.spdx[1:]
            assert outcome.name == f"License {n}"

    def test_final_sequential_write_wins_after_concurrency(self):
        store = ResultStore()
        m = Module("shared", "1.0")
        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(lambda _: store.report(m, LookupFailure()), range(200)))
        store.report(m, License("Apache-2.0", "Apache License 2.0"))

        assert store.snapshot() == {m: License("Apache-2.0", "Apache License 2.0")}
