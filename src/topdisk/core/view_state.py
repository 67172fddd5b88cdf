"""View state machine: pool selection, sort key, and running/quitting.

The whole on-screen model is one immutable ``DashboardState`` value.
``reduce`` maps ``(state, event)`` to the next state and never touches
anything else, so every transition can be tested without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from topdisk.core.events import (
    AnimationPulse,
    Event,
    FeedEnded,
    FeedFailed,
    KeyPressed,
    SampleArrived,
)
from topdisk.core.sample_store import SampleStore


class SortKey(str, Enum):
    """Column the rendered rows are ordered by."""
    NAME = "name"
    USED = "used"
    AWAIT = "await"
    UTIL = "util"
    READ = "read"
    WRITE = "write"
    DISCARD = "discard"
    TPS = "tps"

    @property
    def descending(self) -> bool:
        """Whether larger values sort first for this key."""
        return self in _DESCENDING


_DESCENDING = frozenset({SortKey.USED, SortKey.AWAIT, SortKey.UTIL, SortKey.DISCARD})

QUIT_KEYS = frozenset({"ctrl+c", "q", "esc"})

# NAME is only the initial default and DISCARD has no binding.
SORT_KEY_BINDINGS: dict[str, SortKey] = {
    "u": SortKey.USED,
    "t": SortKey.TPS,
    "r": SortKey.READ,
    "w": SortKey.WRITE,
    "A": SortKey.AWAIT,
    "U": SortKey.UTIL,
}


@dataclass(frozen=True)
class ViewState:
    """Operator-controlled view settings."""

    row_limit: int
    max_pool: int = 0
    pool: int = 0
    sort_key: SortKey = SortKey.NAME
    quitting: bool = False
    pulse: int = 0


@dataclass(frozen=True)
class DashboardState:
    """Everything the renderer needs: view settings plus sample data."""

    view: ViewState
    samples: SampleStore

    @classmethod
    def initial(cls, samples: SampleStore, row_limit: int) -> DashboardState:
        return cls(
            view=ViewState(row_limit=row_limit, max_pool=samples.max_pool),
            samples=samples,
        )

    @property
    def quitting(self) -> bool:
        return self.view.quitting


def _reduce_key(view: ViewState, key: str) -> ViewState:
    if key in QUIT_KEYS:
        return replace(view, quitting=True)
    if key == "right":
        return replace(view, pool=min(view.pool + 1, view.max_pool))
    if key == "left":
        return replace(view, pool=max(view.pool - 1, 0))
    sort_key = SORT_KEY_BINDINGS.get(key)
    if sort_key is not None:
        return replace(view, sort_key=sort_key)
    return view


def reduce(state: DashboardState, event: Event) -> DashboardState:
    """Apply one event and return the next state.

    Quitting is absorbing: once set, every event returns ``state`` as is.
    """
    if state.view.quitting:
        return state

    if isinstance(event, KeyPressed):
        view = _reduce_key(state.view, event.key)
        if view is state.view:
            return state
        return replace(state, view=view)

    if isinstance(event, SampleArrived):
        samples, final = state.samples.record_sample(
            event.endpoint, event.counters, event.final
        )
        view = state.view
        if final:
            view = replace(view, quitting=True)
        return DashboardState(view=view, samples=samples)

    if isinstance(event, AnimationPulse):
        return replace(state, view=replace(state.view, pulse=state.view.pulse + 1))

    if isinstance(event, FeedFailed):
        return replace(state, view=replace(state.view, quitting=True))

    if isinstance(event, FeedEnded) and event.stop:
        return replace(state, view=replace(state.view, quitting=True))

    return state
