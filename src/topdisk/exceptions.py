"""Exception hierarchy for topdisk.

The metric core never raises: degenerate counters are neutralised to zero.
These exceptions cover the collaborators around it (feeds, configuration).
"""

from __future__ import annotations


class TopDiskError(Exception):
    """Base exception for all topdisk errors."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        super().__init__(message)


class FeedError(TopDiskError):
    """The stats feed could not deliver inventory or samples."""


class InventoryError(FeedError):
    """The disk inventory is empty or malformed."""


class ConfigError(TopDiskError):
    """Invalid dashboard configuration."""
