"""Dashboard core: metric derivation, sample store, state machine, renderer."""

from topdisk.core.calculator import derive
from topdisk.core.renderer import Frame, render
from topdisk.core.sample_store import SampleStore
from topdisk.core.view_state import DashboardState, SortKey, ViewState, reduce

__all__ = [
    "DashboardState",
    "Frame",
    "SampleStore",
    "SortKey",
    "ViewState",
    "derive",
    "reduce",
    "render",
]
