"""Single-consumer event loop driving the dashboard.

Samples from the feed, keystrokes, and spinner pulses are produced on
daemon threads and merged into one unbounded queue. The calling thread is
the only consumer: it reduces one event at a time and hands each new frame
to the render surface, so state has exactly one writer and a slow surface
never blocks the feed.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator
from typing import Protocol

from topdisk.config import DashboardConfig
from topdisk.core.events import (
    AnimationPulse,
    Event,
    FeedEnded,
    FeedFailed,
    KeyPressed,
    SampleArrived,
)
from topdisk.core.renderer import Frame, render
from topdisk.core.sample_store import SampleStore
from topdisk.core.view_state import DashboardState, reduce
from topdisk.exceptions import FeedError, InventoryError, TopDiskError
from topdisk.feeds.base import StatsFeed
from topdisk.utils.logging import get_logger

logger = get_logger(__name__)


class KeySource(Protocol):
    def read_keys(self, stop: threading.Event) -> Iterator[str]: ...


class RenderSurface(Protocol):
    def update(self, frame: Frame) -> None: ...


class Dashboard:
    """Runs one dashboard session until the user quits or the feed finishes.

    Args:
        feed: Stats feed providing inventory and counter samples.
        config: Row limit, nominal interval, and pulse period.
        surface: Receives a frame after every event. None for headless runs.
        keys: Keyboard source. None disables interactive input.
        stop_on_feed_end: Quit when the feed runs out instead of waiting
            for the user.
    """

    def __init__(
        self,
        feed: StatsFeed,
        config: DashboardConfig,
        surface: RenderSurface | None = None,
        keys: KeySource | None = None,
        stop_on_feed_end: bool = False,
    ) -> None:
        self._feed = feed
        self._config = config
        self._surface = surface
        self._keys = keys
        self._stop_on_feed_end = stop_on_feed_end
        self._queue: queue.Queue[Event] = queue.Queue()
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

    def load(self) -> DashboardState:
        """Fetch the inventory once and build the initial state."""
        disks = self._feed.inventory()
        if not disks:
            raise InventoryError("Stats feed reported no disks")
        store = SampleStore.from_inventory(disks)
        logger.info("inventory_loaded", disks=len(store.descriptors), max_pool=store.max_pool)
        return DashboardState.initial(store, self._config.count)

    def run(self) -> DashboardState:
        """Process events until Quitting and return the final state.

        Raises:
            InventoryError: The feed reported no disks.
            FeedError: The feed failed while streaming samples.
        """
        state = self.load()
        self._start_producers()

        failure: Exception | None = None
        try:
            self._publish(state)
            while not state.quitting:
                event = self._next_event()
                if isinstance(event, FeedFailed):
                    failure = event.error
                state = reduce(state, event)

                if state.quitting:
                    logger.info("dashboard_quit", reason=_quit_reason(event))
                self._publish(state)
        finally:
            self._stop.set()
            self._join_keys()

        if failure is not None:
            if isinstance(failure, TopDiskError):
                raise failure
            raise FeedError(f"Stats feed failed: {failure}") from failure
        return state

    def _next_event(self) -> Event:
        try:
            return self._queue.get()
        except KeyboardInterrupt:
            return KeyPressed("ctrl+c")

    def _publish(self, state: DashboardState) -> None:
        if self._surface is not None:
            self._surface.update(render(state, self._config.interval_ms))

    def _join_keys(self) -> None:
        # The key reader restores terminal attributes on exit.
        for thread in self._threads:
            if thread.name == self._pump_keys.__name__:
                thread.join(timeout=1.0)

    def _start_producers(self) -> None:
        targets = [self._pump_feed]
        if self._keys is not None:
            targets.append(self._pump_keys)
        if self._surface is not None:
            targets.append(self._pump_pulses)

        for target in targets:
            thread = threading.Thread(target=target, name=target.__name__, daemon=True)
            thread.start()
            self._threads.append(thread)

    def _pump_feed(self) -> None:
        logger.info("feed_started", feed=type(self._feed).__name__)
        try:
            for event in self._feed.samples(self._stop):
                if self._stop.is_set():
                    return
                self._queue.put(event)
        except Exception as exc:
            logger.error("feed_failed", error=str(exc))
            self._queue.put(FeedFailed(exc))
            return
        logger.info("feed_ended")
        self._queue.put(FeedEnded(stop=self._stop_on_feed_end))

    def _pump_keys(self) -> None:
        for key in self._keys.read_keys(self._stop):
            self._queue.put(KeyPressed(key))

    def _pump_pulses(self) -> None:
        period = self._config.pulse_ms / 1000
        while not self._stop.wait(period):
            self._queue.put(AnimationPulse())


def _quit_reason(event: Event) -> str:
    if isinstance(event, KeyPressed):
        return f"key:{event.key}"
    if isinstance(event, SampleArrived):
        return "final_sample"
    if isinstance(event, FeedFailed):
        return "feed_failed"
    if isinstance(event, FeedEnded):
        return "feed_ended"
    return type(event).__name__
