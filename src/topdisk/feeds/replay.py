"""Replay a recorded stats stream from a JSON-lines file.

Format: the first non-blank line is ``{"disks": [...]}`` with one object
per disk; every following line is a sample::

    {"endpoint": "http://node1:9000/data1", "stats": {"read_ios": 12, ...}, "final": false}

Samples are grouped into rounds: when an endpoint repeats within the
current round, the feed sleeps ``pace_ms`` before starting the next one.
"""

from __future__ import annotations

import json
import sys
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from pydantic import BaseModel, Field, ValidationError

from topdisk.core.events import SampleArrived
from topdisk.exceptions import FeedError, InventoryError
from topdisk.feeds.base import StatsFeed
from topdisk.models.disk import DiskDescriptor, RawCounterSnapshot
from topdisk.utils.logging import get_logger

logger = get_logger(__name__)


class _InventoryRecord(BaseModel):
    disks: list[DiskDescriptor]


class _SampleRecord(BaseModel):
    endpoint: str
    stats: RawCounterSnapshot = Field(default_factory=RawCounterSnapshot)
    final: bool = False


class ReplayFeed(StatsFeed):
    """Stats feed backed by a JSON-lines recording.

    Args:
        path: File to read, or ``"-"`` for stdin.
        pace_ms: Pause between sample rounds. 0 replays as fast as possible.
    """

    def __init__(self, path: str | Path, pace_ms: int = 0) -> None:
        self._path = str(path)
        self._pace_ms = pace_ms
        self._stream: IO[str] | None = None
        self._line_no = 0

    def _open(self) -> IO[str]:
        if self._stream is None:
            if self._path == "-":
                self._stream = sys.stdin
            else:
                try:
                    self._stream = open(self._path, encoding="utf-8")
                except OSError as exc:
                    raise FeedError(f"Cannot open replay file {self._path}: {exc}", source=self._path) from exc
        return self._stream

    def _lines(self) -> Iterator[tuple[int, dict]]:
        stream = self._open()
        for raw in stream:
            self._line_no += 1
            line = raw.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                raise FeedError(
                    f"{self._path}:{self._line_no}: invalid JSON: {exc.msg}", source=self._path
                ) from exc
            if not isinstance(obj, dict):
                raise FeedError(f"{self._path}:{self._line_no}: expected a JSON object", source=self._path)
            yield self._line_no, obj

    def inventory(self) -> list[DiskDescriptor]:
        for line_no, obj in self._lines():
            try:
                record = _InventoryRecord.model_validate(obj)
            except ValidationError as exc:
                raise InventoryError(
                    f"{self._path}:{line_no}: invalid inventory: {exc.error_count()} error(s)",
                    source=self._path,
                ) from exc
            logger.debug("replay_inventory", path=self._path, disks=len(record.disks))
            return record.disks
        raise InventoryError(f"{self._path}: no inventory line found", source=self._path)

    def samples(self, stop: threading.Event) -> Iterator[SampleArrived]:
        seen: set[str] = set()
        try:
            for line_no, obj in self._lines():
                try:
                    record = _SampleRecord.model_validate(obj)
                except ValidationError as exc:
                    raise FeedError(
                        f"{self._path}:{line_no}: invalid sample: {exc.error_count()} error(s)",
                        source=self._path,
                    ) from exc

                if record.endpoint in seen:
                    seen.clear()
                    if self._pace_ms > 0 and stop.wait(self._pace_ms / 1000):
                        return
                if stop.is_set():
                    return
                seen.add(record.endpoint)

                yield SampleArrived(record.endpoint, record.stats, record.final)
                if record.final:
                    return
        finally:
            self.close()

    def close(self) -> None:
        if self._stream is not None and self._stream is not sys.stdin:
            self._stream.close()
        self._stream = None
