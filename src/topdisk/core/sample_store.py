"""Per-disk store of the last two counter snapshots."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from topdisk.models.disk import DiskDescriptor, RawCounterSnapshot
from topdisk.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SampleStore:
    """Static disk inventory plus the previous/current snapshot per endpoint.

    Instances are never mutated. ``record_sample`` returns a new store so
    the dashboard state can be threaded through a pure reducer.
    """

    descriptors: dict[str, DiskDescriptor] = field(default_factory=dict)
    previous: dict[str, RawCounterSnapshot] = field(default_factory=dict)
    current: dict[str, RawCounterSnapshot] = field(default_factory=dict)

    @classmethod
    def from_inventory(cls, disks: Iterable[DiskDescriptor]) -> SampleStore:
        """Build an empty store for a fixed disk inventory."""
        descriptors: dict[str, DiskDescriptor] = {}
        for disk in disks:
            if disk.endpoint in descriptors:
                logger.warning("duplicate_endpoint", endpoint=disk.endpoint)
            descriptors[disk.endpoint] = disk
        return cls(descriptors=descriptors)

    @property
    def max_pool(self) -> int:
        """Highest pool index in the inventory (0 when empty)."""
        return max((d.pool_index for d in self.descriptors.values()), default=0)

    def record_sample(
        self,
        endpoint: str,
        counters: RawCounterSnapshot,
        is_final: bool = False,
    ) -> tuple[SampleStore, bool]:
        """Shift current to previous for ``endpoint`` and install ``counters``.

        Samples for endpoints missing from the inventory are dropped, so the
        snapshot maps never hold more entries than the inventory.

        Returns:
            The new store and ``is_final`` unchanged, so the caller can
            decide whether the session ends.
        """
        if endpoint not in self.descriptors:
            logger.debug("unknown_endpoint_sample", endpoint=endpoint)
            return self, is_final

        # Copy-on-write: O(inventory) per sample.
        previous = dict(self.previous)
        if endpoint in self.current:
            previous[endpoint] = self.current[endpoint]
        else:
            previous.pop(endpoint, None)

        current = dict(self.current)
        current[endpoint] = counters

        store = SampleStore(descriptors=self.descriptors, previous=previous, current=current)
        return store, is_final
