"""Derive instantaneous disk rates from cumulative counter snapshots.

All functions here are pure. Degenerate inputs (zero capacity, zero
interval, counters that went backwards after a device reset, no previous
sample) produce zero rather than an error.
"""

from __future__ import annotations

from topdisk.models.disk import DiskDescriptor, RawCounterSnapshot
from topdisk.models.metrics import DerivedMetric

# 512-byte sectors per MiB
SECTORS_PER_MIB = 2048


def _delta(curr: int, prev: int) -> int:
    """Counter difference clamped at zero."""
    return curr - prev if curr > prev else 0


def used_percent(descriptor: DiskDescriptor) -> int:
    """Integer percent of capacity in use, floored. 0 for a zero-size disk."""
    if descriptor.total_space <= 0:
        return 0
    return 100 * descriptor.used_space // descriptor.total_space


def derive(
    descriptor: DiskDescriptor,
    curr: RawCounterSnapshot,
    prev: RawCounterSnapshot | None,
    interval_ms: int,
) -> DerivedMetric:
    """Compute the derived metrics for one disk.

    Args:
        descriptor: Static disk description (capacity, endpoint).
        curr: Most recent counter snapshot.
        prev: Snapshot before ``curr``, or None on first observation.
        interval_ms: Nominal sampling period. Rates assume the two
            snapshots are exactly this far apart.

    Returns:
        DerivedMetric for the disk.
    """
    if prev is None:
        prev = curr

    util = 0.0
    read_mibs = write_mibs = discard_mibs = 0.0
    if interval_ms > 0:
        util = 100 * _delta(curr.total_ticks, prev.total_ticks) / interval_ms
        mib_per_sec = SECTORS_PER_MIB * (interval_ms / 1000)
        read_mibs = _delta(curr.read_sectors, prev.read_sectors) / mib_per_sec
        write_mibs = _delta(curr.write_sectors, prev.write_sectors) / mib_per_sec
        discard_mibs = _delta(curr.discard_sectors, prev.discard_sectors) / mib_per_sec

    tps = 0
    await_ms = 0.0
    # Equal totals mean no new IOs; lower totals mean the device reset.
    if curr.total_ios > prev.total_ios:
        tps = curr.total_ios - prev.total_ios
        ticks = (
            _delta(curr.read_ticks, prev.read_ticks)
            + _delta(curr.write_ticks, prev.write_ticks)
            + _delta(curr.discard_ticks, prev.discard_ticks)
        )
        await_ms = ticks / tps

    return DerivedMetric(
        endpoint=descriptor.endpoint,
        used=used_percent(descriptor),
        util=util,
        tps=tps,
        await_ms=await_ms,
        read_mibs=read_mibs,
        write_mibs=write_mibs,
        discard_mibs=discard_mibs,
    )
