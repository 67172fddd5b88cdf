"""Stats feeds that deliver disk inventory and counter samples."""

from topdisk.feeds.base import StatsFeed
from topdisk.feeds.procfs import ProcDiskstatsFeed
from topdisk.feeds.replay import ReplayFeed

__all__ = [
    "ProcDiskstatsFeed",
    "ReplayFeed",
    "StatsFeed",
]
