"""Project dashboard state into a displayable frame.

``render`` is read-only and idempotent: it may run after every event,
including spinner pulses, without affecting the derived numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from topdisk.core.calculator import derive
from topdisk.core.view_state import DashboardState, SortKey
from topdisk.models.metrics import DerivedMetric

HEADERS: tuple[str, ...] = ("Disk", "used", "tps", "read", "write", "discard", "await", "util")

HEALING_MARKER = "!"
SCANNING_MARKER = "*"

SPINNER_FRAMES: tuple[str, ...] = ("∙∙∙", "●∙∙", "∙●∙", "∙∙●")

_SORT_VALUE = {
    SortKey.NAME: lambda m: m.endpoint,
    SortKey.USED: lambda m: m.used,
    SortKey.AWAIT: lambda m: m.await_ms,
    SortKey.UTIL: lambda m: m.util,
    SortKey.READ: lambda m: m.read_mibs,
    SortKey.WRITE: lambda m: m.write_mibs,
    SortKey.DISCARD: lambda m: m.discard_mibs,
    SortKey.TPS: lambda m: m.tps,
}


@dataclass(frozen=True)
class Frame:
    """One composed screen: table rows plus an optional status line."""

    headers: tuple[str, ...] = HEADERS
    rows: list[tuple[str, ...]] = field(default_factory=list)
    metrics: list[DerivedMetric] = field(default_factory=list)
    status: str | None = None

    def to_text(self) -> str:
        """Plain tab-separated rendition for non-interactive output."""
        lines = ["\t".join(self.headers)]
        lines.extend("\t".join(row) for row in self.rows)
        if self.status is not None:
            lines.append("")
            lines.append(self.status)
        return "\n".join(lines) + "\n"


def sort_metrics(metrics: list[DerivedMetric], sort_key: SortKey) -> list[DerivedMetric]:
    """Stable sort in the fixed direction of ``sort_key``."""
    return sorted(metrics, key=_SORT_VALUE[sort_key], reverse=sort_key.descending)


def format_row(metric: DerivedMetric, label: str) -> tuple[str, ...]:
    return (
        label,
        f"{metric.used}%",
        f"{metric.tps}",
        f"{metric.read_mibs:.2f} MiB/s",
        f"{metric.write_mibs:.2f} MiB/s",
        f"{metric.discard_mibs:.2f} MiB/s",
        f"{metric.await_ms:.1f} ms",
        f"{metric.util:.1f}%",
    )


def status_line(pool: int, sort_key: SortKey, pulse: int) -> str:
    spinner = SPINNER_FRAMES[pulse % len(SPINNER_FRAMES)]
    return f"{spinner} ◀ Pool {pool + 1} ▶ | Sort By: {sort_key.value} (u,t,r,w,A,U)"


def render(state: DashboardState, interval_ms: int) -> Frame:
    """Build the frame for the selected pool.

    Only endpoints that are in the inventory, belong to the selected pool,
    and have at least one sample are shown.
    """
    view = state.view
    samples = state.samples

    metrics: list[DerivedMetric] = []
    for endpoint, curr in samples.current.items():
        descriptor = samples.descriptors.get(endpoint)
        if descriptor is None or descriptor.pool_index != view.pool:
            continue
        metrics.append(derive(descriptor, curr, samples.previous.get(endpoint), interval_ms))

    metrics = sort_metrics(metrics, view.sort_key)[: view.row_limit]

    rows = []
    for metric in metrics:
        descriptor = samples.descriptors[metric.endpoint]
        label = metric.endpoint
        if descriptor.healing:
            label += HEALING_MARKER
        if descriptor.scanning:
            label += SCANNING_MARKER
        rows.append(format_row(metric, label))

    status = None if view.quitting else status_line(view.pool, view.sort_key, view.pulse)
    return Frame(rows=rows, metrics=metrics, status=status)
