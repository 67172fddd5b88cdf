"""Disk inventory and raw counter models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DiskDescriptor(BaseModel):
    """Static description of one disk, loaded once per session."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    endpoint: str = Field(min_length=1)
    pool_index: int = Field(default=0, ge=0)
    total_space: int = Field(default=0, ge=0, alias="totalspace")
    used_space: int = Field(default=0, ge=0, alias="usedspace")
    healing: bool = False
    scanning: bool = False


class RawCounterSnapshot(BaseModel):
    """Cumulative block-layer counters for one disk at one instant.

    Counters only grow on a healthy device but can reset when the device
    does, so consumers must not assume monotonicity.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    read_ios: int = 0
    write_ios: int = 0
    discard_ios: int = 0

    read_sectors: int = 0
    write_sectors: int = 0
    discard_sectors: int = 0

    # Milliseconds spent per category
    read_ticks: int = 0
    write_ticks: int = 0
    discard_ticks: int = 0

    total_ticks: int = Field(default=0, description="Milliseconds the device was busy")

    @property
    def total_ios(self) -> int:
        return self.read_ios + self.write_ios + self.discard_ios
