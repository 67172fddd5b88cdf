"""Unit tests for topdisk.core.sample_store."""

from __future__ import annotations

from topdisk.core.sample_store import SampleStore
from topdisk.models.disk import DiskDescriptor, RawCounterSnapshot


def _snap(ios: int) -> RawCounterSnapshot:
    return RawCounterSnapshot(read_ios=ios)


def _store() -> SampleStore:
    return SampleStore.from_inventory(
        [DiskDescriptor(endpoint="e1", pool_index=0), DiskDescriptor(endpoint="e2", pool_index=0)]
    )


class TestFromInventory:
    def test_indexes_by_endpoint(self, two_pool_inventory):
        store = SampleStore.from_inventory(two_pool_inventory)
        assert set(store.descriptors) == {d.endpoint for d in two_pool_inventory}
        assert store.current == {}
        assert store.previous == {}

    def test_max_pool(self, two_pool_inventory):
        assert SampleStore.from_inventory(two_pool_inventory).max_pool == 1

    def test_max_pool_empty(self):
        assert SampleStore().max_pool == 0

    def test_duplicate_endpoint_keeps_last(self):
        disks = [
            DiskDescriptor(endpoint="e1", pool_index=0),
            DiskDescriptor(endpoint="e1", pool_index=3),
        ]
        store = SampleStore.from_inventory(disks)
        assert store.descriptors["e1"].pool_index == 3


class TestRecordSample:
    def test_first_sample_has_no_previous(self):
        store, final = _store().record_sample("e1", _snap(1))
        assert store.current["e1"] == _snap(1)
        assert "e1" not in store.previous
        assert final is False

    def test_second_sample_shifts_current_to_previous(self):
        store, _ = _store().record_sample("e1", _snap(1))
        store, _ = store.record_sample("e1", _snap(2))
        assert store.previous["e1"] == _snap(1)
        assert store.current["e1"] == _snap(2)

    def test_keeps_only_two_snapshots(self):
        store = _store()
        for ios in range(5):
            store, _ = store.record_sample("e1", _snap(ios))
        assert store.previous["e1"] == _snap(3)
        assert store.current["e1"] == _snap(4)

    def test_endpoints_are_independent(self):
        store, _ = _store().record_sample("e1", _snap(1))
        store, _ = store.record_sample("e2", _snap(10))
        store, _ = store.record_sample("e1", _snap(2))
        assert store.current == {"e1": _snap(2), "e2": _snap(10)}
        assert store.previous == {"e1": _snap(1)}

    def test_final_flag_returned(self):
        _, final = _store().record_sample("e1", _snap(1), is_final=True)
        assert final is True

    def test_original_store_unchanged(self):
        original, _ = _store().record_sample("e1", _snap(1))
        original.record_sample("e1", _snap(2))
        assert original.current["e1"] == _snap(1)
        assert original.previous == {}

    def test_unknown_endpoint_dropped(self, two_pool_inventory):
        store = SampleStore.from_inventory(two_pool_inventory)
        after, final = store.record_sample("http://ghost/d9", _snap(1), is_final=True)
        assert after is store
        assert final is True
        assert "http://ghost/d9" not in after.current
        assert "http://ghost/d9" not in after.descriptors

    def test_maps_bounded_by_inventory(self):
        store = _store()
        for i in range(1000):
            store, _ = store.record_sample(f"ghost{i}", _snap(i))
        store, _ = store.record_sample("e1", _snap(1))
        store, _ = store.record_sample("e1", _snap(2))
        assert set(store.current) == {"e1"}
        assert set(store.previous) == {"e1"}
