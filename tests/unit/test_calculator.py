"""Unit tests for topdisk.core.calculator."""

from __future__ import annotations

import pytest

from topdisk.core.calculator import derive, used_percent
from topdisk.models.disk import DiskDescriptor, RawCounterSnapshot


def _disk(total: int = 1000, used: int = 0) -> DiskDescriptor:
    return DiskDescriptor(endpoint="http://node1/d1", total_space=total, used_space=used)


def _counters(**values: int) -> RawCounterSnapshot:
    return RawCounterSnapshot(**values)


class TestUsedPercent:
    def test_floors(self):
        assert used_percent(_disk(total=3, used=2)) == 66

    def test_exact(self):
        assert used_percent(_disk(total=1000, used=250)) == 25

    def test_zero_capacity(self):
        assert used_percent(_disk(total=0, used=0)) == 0

    def test_full(self):
        assert used_percent(_disk(total=512, used=512)) == 100


class TestDerive:
    def test_util_example(self):
        prev = _counters(total_ticks=1000, read_ios=10)
        curr = _counters(total_ticks=1500, read_ios=15)
        m = derive(_disk(), curr, prev, 1000)
        assert m.util == 50.0
        assert m.tps == 5

    def test_await_averages_ticks_over_ios(self):
        prev = _counters(read_ios=10, write_ios=10, read_ticks=100, write_ticks=100)
        curr = _counters(read_ios=12, write_ios=12, read_ticks=130, write_ticks=150)
        m = derive(_disk(), curr, prev, 1000)
        assert m.tps == 4
        assert m.await_ms == pytest.approx(80 / 4)

    def test_discard_ios_and_ticks_count(self):
        prev = _counters(discard_ios=0, discard_ticks=0)
        curr = _counters(discard_ios=2, discard_ticks=10)
        m = derive(_disk(), curr, prev, 1000)
        assert m.tps == 2
        assert m.await_ms == 5.0

    def test_no_new_ios_zeroes_tps_and_await(self):
        prev = _counters(read_ios=20, read_ticks=100)
        curr = _counters(read_ios=20, read_ticks=900)
        m = derive(_disk(), curr, prev, 1000)
        assert m.tps == 0
        assert m.await_ms == 0.0

    def test_counter_reset_zeroes_tps_and_await(self):
        prev = _counters(read_ios=500, read_ticks=1000)
        curr = _counters(read_ios=3, read_ticks=10)
        m = derive(_disk(), curr, prev, 1000)
        assert m.tps == 0
        assert m.await_ms == 0.0

    def test_throughput_in_mib_per_second(self):
        prev = _counters(read_sectors=0, write_sectors=0, discard_sectors=0)
        curr = _counters(read_sectors=2048, write_sectors=4096, discard_sectors=1024)
        m = derive(_disk(), curr, prev, 1000)
        assert m.read_mibs == 1.0
        assert m.write_mibs == 2.0
        assert m.discard_mibs == 0.5

    def test_throughput_scales_with_interval(self):
        prev = _counters()
        curr = _counters(read_sectors=4096)
        m = derive(_disk(), curr, prev, 2000)
        assert m.read_mibs == 1.0

    def test_sub_second_interval(self):
        prev = _counters()
        curr = _counters(read_sectors=1024)
        m = derive(_disk(), curr, prev, 500)
        assert m.read_mibs == 1.0

    def test_first_observation_is_all_zero(self):
        curr = _counters(read_ios=100, read_sectors=5000, total_ticks=700, read_ticks=50)
        m = derive(_disk(total=100, used=40), curr, None, 1000)
        assert m.used == 40
        assert m.util == 0.0
        assert m.tps == 0
        assert m.await_ms == 0.0
        assert m.read_mibs == 0.0

    def test_decreasing_counters_clamped(self):
        prev = _counters(total_ticks=5000, read_sectors=9000, write_sectors=9000, discard_sectors=9000)
        curr = _counters(total_ticks=10, read_sectors=1, write_sectors=1, discard_sectors=1)
        m = derive(_disk(), curr, prev, 1000)
        assert m.util == 0.0
        assert m.read_mibs == 0.0
        assert m.write_mibs == 0.0
        assert m.discard_mibs == 0.0

    def test_partial_tick_reset_clamped(self):
        # IO totals grew, but one tick counter went backwards
        prev = _counters(read_ios=10, read_ticks=1000, write_ticks=0)
        curr = _counters(read_ios=12, read_ticks=0, write_ticks=40)
        m = derive(_disk(), curr, prev, 1000)
        assert m.tps == 2
        assert m.await_ms == 20.0

    def test_zero_interval_neutralised(self):
        prev = _counters(total_ticks=0, read_sectors=0, read_ios=0)
        curr = _counters(total_ticks=100, read_sectors=2048, read_ios=4)
        m = derive(_disk(), curr, prev, 0)
        assert m.util == 0.0
        assert m.read_mibs == 0.0
        assert m.tps == 4

    def test_endpoint_copied(self):
        m = derive(_disk(), _counters(), None, 1000)
        assert m.endpoint == "http://node1/d1"

    @pytest.mark.parametrize("step", [0, 1, 7, 1000])
    def test_monotonic_counters_never_negative(self, step):
        prev = _counters(
            read_ios=10, write_ios=10, discard_ios=10,
            read_sectors=10, write_sectors=10, discard_sectors=10,
            read_ticks=10, write_ticks=10, discard_ticks=10, total_ticks=10,
        )
        curr = _counters(**{k: v + step for k, v in prev.model_dump().items()})
        m = derive(_disk(), curr, prev, 1000)
        for value in (m.util, m.tps, m.await_ms, m.read_mibs, m.write_mibs, m.discard_mibs):
            assert value >= 0
