"""Derived per-disk rate metrics."""

from __future__ import annotations

from pydantic import BaseModel


class DerivedMetric(BaseModel):
    """Rates computed from two counter snapshots. Recomputed every frame."""
    model_config = {"frozen": True}

    endpoint: str
    used: int = 0
    util: float = 0.0
    tps: int = 0
    await_ms: float = 0.0
    read_mibs: float = 0.0
    write_mibs: float = 0.0
    discard_mibs: float = 0.0
