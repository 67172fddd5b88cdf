"""Local Linux stats feed reading /proc/diskstats.

Every whole-disk block device becomes one endpoint in pool 0. Capacity
comes from ``/sys/block/<dev>/size`` and, when the device is mounted
directly, usage from the mounted filesystem.
"""

from __future__ import annotations

import re
import shutil
import threading
from collections.abc import Iterator
from pathlib import Path

from topdisk.core.events import SampleArrived
from topdisk.exceptions import FeedError
from topdisk.feeds.base import StatsFeed
from topdisk.models.disk import DiskDescriptor, RawCounterSnapshot
from topdisk.utils.logging import get_logger

logger = get_logger(__name__)

SECTOR_SIZE = 512

# Field indices in a split /proc/diskstats line:
#   major minor name
#   rd_ios rd_merges rd_sectors rd_ticks
#   wr_ios wr_merges wr_sectors wr_ticks
#   ios_in_progress io_ticks weighted_ticks
#   dc_ios dc_merges dc_sectors dc_ticks     (kernel 4.18+)
_NAME = 2
_READ_IOS, _READ_SECTORS, _READ_TICKS = 3, 5, 6
_WRITE_IOS, _WRITE_SECTORS, _WRITE_TICKS = 7, 9, 10
_IO_TICKS = 12
_DISCARD_IOS, _DISCARD_SECTORS, _DISCARD_TICKS = 14, 16, 17

_MIN_FIELDS = 14
_SKIP_PREFIXES = ("ram", "loop", "dm-", "zram", "sr")
_NUMBERED_DISK_RE = re.compile(r"^(nvme\d+n\d+|mmcblk\d+)$")


def is_whole_disk(name: str) -> bool:
    """Keep whole disks (sda, vdb, nvme0n1) and drop partitions and virtual devices."""
    if name.startswith(_SKIP_PREFIXES):
        return False
    if name.startswith(("nvme", "mmcblk")):
        return _NUMBERED_DISK_RE.match(name) is not None
    return not name[-1].isdigit()


def parse_diskstats_line(line: str) -> tuple[str, RawCounterSnapshot] | None:
    """Parse one /proc/diskstats line. Returns None for short or garbled lines."""
    parts = line.split()
    if len(parts) < _MIN_FIELDS:
        return None
    try:
        values = [int(p) for p in parts[3:]]
    except ValueError:
        return None

    def field(index: int) -> int:
        pos = index - 3
        return values[pos] if pos < len(values) else 0

    return parts[_NAME], RawCounterSnapshot(
        read_ios=field(_READ_IOS),
        read_sectors=field(_READ_SECTORS),
        read_ticks=field(_READ_TICKS),
        write_ios=field(_WRITE_IOS),
        write_sectors=field(_WRITE_SECTORS),
        write_ticks=field(_WRITE_TICKS),
        total_ticks=field(_IO_TICKS),
        discard_ios=field(_DISCARD_IOS),
        discard_sectors=field(_DISCARD_SECTORS),
        discard_ticks=field(_DISCARD_TICKS),
    )


class ProcDiskstatsFeed(StatsFeed):
    """Stats feed sampling the local kernel block-layer counters.

    Args:
        interval_ms: Sampling period.
        rounds: Number of sampling rounds; the last sample of the last
            round is marked final. 0 samples until stopped.
        proc_root: Base of the proc filesystem.
        sys_root: Base of the sys filesystem.
    """

    def __init__(
        self,
        interval_ms: int = 1000,
        rounds: int = 0,
        proc_root: str | Path = "/proc",
        sys_root: str | Path = "/sys",
    ) -> None:
        self._interval_ms = interval_ms
        self._rounds = rounds
        self._proc_root = Path(proc_root)
        self._sys_root = Path(sys_root)
        self._devices: list[str] = []

    def _read_diskstats(self) -> dict[str, RawCounterSnapshot]:
        path = self._proc_root / "diskstats"
        try:
            text = path.read_text()
        except OSError as exc:
            raise FeedError(f"Cannot read {path}: {exc}", source=str(path)) from exc

        stats: dict[str, RawCounterSnapshot] = {}
        for line in text.splitlines():
            parsed = parse_diskstats_line(line)
            if parsed is not None:
                stats[parsed[0]] = parsed[1]
        return stats

    def _mounts(self) -> dict[str, str]:
        """Map device name to its first mount point."""
        mounts: dict[str, str] = {}
        try:
            text = (self._proc_root / "mounts").read_text()
        except OSError:
            return mounts
        for line in text.splitlines():
            parts = line.split()
            if len(parts) >= 2 and parts[0].startswith("/dev/"):
                mounts.setdefault(parts[0].removeprefix("/dev/"), parts[1])
        return mounts

    def _capacity(self, name: str) -> int:
        try:
            return int((self._sys_root / "block" / name / "size").read_text().strip()) * SECTOR_SIZE
        except (OSError, ValueError):
            return 0

    def _descriptor(self, name: str, mounts: dict[str, str]) -> DiskDescriptor:
        total = self._capacity(name)
        used = 0
        mount_point = mounts.get(name)
        if mount_point is not None:
            try:
                usage = shutil.disk_usage(mount_point)
            except OSError:
                logger.debug("disk_usage_failed", device=name, mount=mount_point)
            else:
                total = total or usage.total
                used = min(usage.used, total)
        return DiskDescriptor(endpoint=f"/dev/{name}", total_space=total, used_space=used)

    def inventory(self) -> list[DiskDescriptor]:
        self._devices = sorted(name for name in self._read_diskstats() if is_whole_disk(name))
        mounts = self._mounts()
        return [self._descriptor(name, mounts) for name in self._devices]

    def samples(self, stop: threading.Event) -> Iterator[SampleArrived]:
        round_no = 0
        while not stop.is_set():
            round_no += 1
            last_round = self._rounds > 0 and round_no >= self._rounds
            stats = self._read_diskstats()
            present = [name for name in self._devices if name in stats]
            for i, name in enumerate(present):
                final = last_round and i == len(present) - 1
                yield SampleArrived(f"/dev/{name}", stats[name], final)
            if last_round or stop.wait(self._interval_ms / 1000):
                return
