"""Tests for load state and generation handling (opportunity_map/matrix/store.py)."""

import asyncio
import math

from opportunity_map.matrix.store import MatrixStore
from opportunity_map.utils import LoadFailure


def _source(rows):
    async def _load():
        return rows
    return _load


def _failing_source(exc):
    async def _load():
        raise exc
    return _load


class TestInitialState:
    def test_starts_loading_with_empty_matrix(self, settings):
        store = MatrixStore(source=_source([]), config=settings)
        assert store.snapshot.is_loading
        assert store.snapshot.error is None
        assert store.snapshot.matrix.is_empty


class TestReload:
    def test_success_publishes_matrix(self, sample_rows, settings):
        store = MatrixStore(source=_source(sample_rows), config=settings)
        snapshot = asyncio.run(store.reload())

        assert not snapshot.is_loading
        assert snapshot.error is None
        assert snapshot.generation == 1
        assert len(snapshot.projects) == 3
        assert len(snapshot.capabilities) == 3
        assert len(snapshot.values) == 3
        assert math.isnan(snapshot.values[1][1])

    def test_empty_dataset_sets_error(self, settings):
        store = MatrixStore(source=_source([]), config=settings)
        snapshot = asyncio.run(store.reload())
        assert snapshot.error == "CSV loaded but contains no data rows."
        assert snapshot.matrix.is_empty
        assert not snapshot.is_loading

    def test_no_data_rows_sets_distinct_error(self, label_row, settings):
        store = MatrixStore(source=_source([label_row]), config=settings)
        snapshot = asyncio.run(store.reload())
        assert snapshot.error == "CSV loaded but contains no rows with solution_id."

    def test_load_failure_clears_previous_matrix(self, sample_rows, settings):
        calls = []

        async def source():
            calls.append(None)
            if len(calls) > 1:
                raise LoadFailure("Failed to load CSV from http://example.org/x.csv: 404")
            return sample_rows

        store = MatrixStore(source=source, config=settings)
        asyncio.run(store.reload())
        assert not store.snapshot.matrix.is_empty

        snapshot = asyncio.run(store.reload())
        assert snapshot.error.startswith("Failed to load CSV")
        assert snapshot.matrix.is_empty

    def test_unexpected_source_error_is_reported(self, settings):
        store = MatrixStore(source=_failing_source(RuntimeError("boom")), config=settings)
        snapshot = asyncio.run(store.reload())
        assert snapshot.error == "boom"
        assert not snapshot.is_loading

    def test_previous_matrix_stays_visible_while_reloading(self, sample_rows, settings):
        store = MatrixStore(source=_source(sample_rows), config=settings)
        asyncio.run(store.reload())
        before = store.snapshot.matrix

        store.begin_load()
        assert store.snapshot.is_loading
        assert store.snapshot.matrix is before


class TestGenerations:
    def test_superseded_load_is_discarded(self, sample_rows, label_row, settings):
        stale_rows = [label_row, {"solution_id": "OLD", "cap_drones": "0.1"}]

        async def scenario():
            gate = asyncio.Event()
            calls = []

            async def source():
                calls.append(None)
                if len(calls) == 1:
                    await gate.wait()
                    return stale_rows
                return sample_rows

            store = MatrixStore(source=source, config=settings)
            first = asyncio.create_task(store.reload())
            await asyncio.sleep(0)
            await store.reload()
            gate.set()
            await first
            return store.snapshot

        snapshot = asyncio.run(scenario())
        assert snapshot.generation == 2
        assert [p.id for p in snapshot.projects] == ["P1", "P2", "P3"]

    def test_stale_completion_is_ignored(self, sample_rows, settings):
        store = MatrixStore(source=_source(sample_rows), config=settings)
        old = store.begin_load()
        new = store.begin_load()

        assert store.complete(old, sample_rows) is False
        assert store.fail(old, "late failure") is False
        assert store.snapshot.is_loading

        assert store.complete(new, sample_rows) is True
        assert store.snapshot.generation == new
        assert not store.snapshot.is_loading


class TestSubscribers:
    def test_listener_sees_every_snapshot(self, sample_rows, settings):
        store = MatrixStore(source=_source(sample_rows), config=settings)
        seen = []
        store.subscribe(seen.append)
        asyncio.run(store.reload())

        assert [s.is_loading for s in seen] == [True, False]
        for snapshot in seen:
            assert len(snapshot.values) == len(snapshot.projects)

    def test_unsubscribe(self, sample_rows, settings):
        store = MatrixStore(source=_source(sample_rows), config=settings)
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        asyncio.run(store.reload())
        assert seen == []
