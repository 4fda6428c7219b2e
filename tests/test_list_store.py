"""Unit tests for DiffableListStore."""

import asyncio

import pytest

from chips_input.core.diff import Insert, Remove
from chips_input.core.list_store import DiffableListStore
from chips_input.errors import DisposedStateError


class TestDiffableListStore:
    @pytest.mark.asyncio
    async def test_sync_replaces_contents_and_returns_diff(self):
        store = DiffableListStore(["a", "b", "c"])

        diff = await store.sync(["a", "c", "d"])

        assert store.items == ("a", "c", "d")
        assert diff.operations == (Remove(index=1, item="b"), Insert(index=2, item="d"))

    @pytest.mark.asyncio
    async def test_equivalent_contents_keep_existing_items(self):
        store = DiffableListStore(["Python"], equality=lambda a, b: a.lower() == b.lower())

        diff = await store.sync(["PYTHON"])

        assert diff.is_empty
        assert store.items == ("Python",)

    @pytest.mark.asyncio
    async def test_concurrent_syncs_are_serialized(self):
        store = DiffableListStore([])

        diffs = await asyncio.gather(store.sync(["a"]), store.sync(["a", "b"]))

        assert [len(d) for d in diffs] == [1, 1]
        assert store.items == ("a", "b")

    def test_lookup_helpers_use_equivalence(self):
        store = DiffableListStore(["Python", "Rust"], equality=lambda a, b: a.lower() == b.lower())

        assert store.contains("rust")
        assert store.index_of("RUST") == 1
        assert store.index_of("go") == -1
        assert len(store) == 2
        assert store[0] == "Python"
        assert list(store) == ["Python", "Rust"]

    @pytest.mark.asyncio
    async def test_sync_after_dispose_is_rejected(self):
        store = DiffableListStore(["a"])
        store.dispose()

        with pytest.raises(DisposedStateError):
            await store.sync([])
        assert store.items == ("a",)
