"""Render surfaces that display dashboard frames."""

from __future__ import annotations

from typing import IO

from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.table import Table
from rich.text import Text

from topdisk.core.renderer import Frame


def build_table(frame: Frame) -> Table:
    """Borderless centred table of the frame rows."""
    table = Table(box=box.SIMPLE, show_edge=False, pad_edge=False, header_style="bold")
    for i, header in enumerate(frame.headers):
        table.add_column(header, justify="left" if i == 0 else "center", no_wrap=True)
    for row in frame.rows:
        table.add_row(*row)
    return table


def build_renderable(frame: Frame) -> Group:
    parts = [Text(""), build_table(frame)]
    if frame.status is not None:
        parts.append(Text(frame.status, style="magenta"))
    return Group(*parts)


class LiveSurface:
    """Redraws frames in place with ``rich.live.Live``.

    Use as a context manager; frames pushed outside of it are dropped.
    """

    def __init__(self, console: Console | None = None, refresh_per_second: float = 10) -> None:
        self._console = console or Console()
        self._live = Live(
            console=self._console,
            refresh_per_second=refresh_per_second,
            auto_refresh=False,
            transient=False,
        )
        self._active = False

    def __enter__(self) -> LiveSurface:
        self._live.start()
        self._active = True
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._active = False
        self._live.stop()

    def update(self, frame: Frame) -> None:
        if self._active:
            self._live.update(build_renderable(frame), refresh=True)


def _without_spinner(status: str) -> str:
    # Spinner frames contain no spaces
    return status.split(" ", 1)[-1]


class TextSurface:
    """Writes each frame as plain tab-separated text, for pipes and logs.

    Pulse-only redraws are skipped: a frame identical to the previous one
    except for the spinner is not written again.
    """

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._last: tuple[list[tuple[str, ...]], str] | None = None

    def __enter__(self) -> TextSurface:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._stream.flush()

    def update(self, frame: Frame) -> None:
        if frame.status is not None:
            key = (frame.rows, _without_spinner(frame.status))
            if key == self._last:
                return
            self._last = key
        self._stream.write(frame.to_text())
