"""Pydantic data models for topdisk."""

from topdisk.models.disk import DiskDescriptor, RawCounterSnapshot
from topdisk.models.metrics import DerivedMetric

__all__ = [
    "DerivedMetric",
    "DiskDescriptor",
    "RawCounterSnapshot",
]
