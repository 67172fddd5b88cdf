"""Typed events consumed one at a time by the dashboard reducer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from topdisk.models.disk import RawCounterSnapshot


@dataclass(frozen=True)
class KeyPressed:
    """A decoded keystroke, e.g. ``"q"``, ``"left"``, ``"ctrl+c"``."""

    key: str


@dataclass(frozen=True)
class SampleArrived:
    """A counter snapshot for one disk, delivered by the stats feed."""

    endpoint: str
    counters: RawCounterSnapshot
    final: bool = False


@dataclass(frozen=True)
class AnimationPulse:
    """Advances the status-line spinner."""


@dataclass(frozen=True)
class FeedEnded:
    """The stats feed ran out without sending a final sample.

    ``stop`` ends the session; it is set for runs with no other way to quit.
    """

    stop: bool = False


@dataclass(frozen=True)
class FeedFailed:
    """The stats feed stopped with an error."""

    error: Exception


Event = Union[KeyPressed, SampleArrived, AnimationPulse, FeedEnded, FeedFailed]
