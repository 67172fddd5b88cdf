"""Abstract stats feed interface."""

from __future__ import annotations

import abc
import threading
from collections.abc import Iterator

from topdisk.core.events import SampleArrived
from topdisk.models.disk import DiskDescriptor


class StatsFeed(abc.ABC):
    """Source of the disk inventory and a stream of counter samples.

    ``inventory`` is called once before ``samples``. ``samples`` runs on its
    own thread and should return promptly once ``stop`` is set.
    """

    @abc.abstractmethod
    def inventory(self) -> list[DiskDescriptor]:
        """Return the full, fixed set of disks for this session."""

    @abc.abstractmethod
    def samples(self, stop: threading.Event) -> Iterator[SampleArrived]:
        """Yield counter samples until exhausted, final, or stopped."""
