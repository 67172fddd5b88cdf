"""Raw terminal keyboard reader yielding named keys."""

from __future__ import annotations

import os
import select
import sys
import termios
import threading
import tty
from collections.abc import Iterator

from topdisk.utils.logging import get_logger

logger = get_logger(__name__)

ESC = "\x1b"

_NAMED_KEYS: dict[str, str] = {
    "\x03": "ctrl+c",
    ESC: "esc",
    ESC + "[C": "right",
    ESC + "[D": "left",
    ESC + "OC": "right",
    ESC + "OD": "left",
    ESC + "[A": "up",
    ESC + "[B": "down",
}

# Name for escape sequences with no binding of their own
UNKNOWN_KEY = "unknown"

# Seconds to wait for the rest of an escape sequence
_ESCAPE_TIMEOUT = 0.05


def decode_key(seq: str) -> str:
    """Map a raw input sequence to a key name; plain characters map to themselves.

    Escape sequences that are not recognised all decode to ``UNKNOWN_KEY``.
    """
    name = _NAMED_KEYS.get(seq)
    if name is not None:
        return name
    if len(seq) > 1 and seq.startswith(ESC):
        return UNKNOWN_KEY
    return seq


def _sequence_end(data: str, start: int) -> int:
    # SS3: ESC O plus one byte
    if data[start + 1] == "O":
        return min(start + 3, len(data))
    # CSI: ESC [ params (0x30-0x3F), intermediates (0x20-0x2F), final (0x40-0x7E)
    end = start + 2
    while end < len(data) and "\x30" <= data[end] <= "\x3f":
        end += 1
    while end < len(data) and "\x20" <= data[end] <= "\x2f":
        end += 1
    if end < len(data) and "\x40" <= data[end] <= "\x7e":
        end += 1
    return end


def split_sequences(data: str) -> list[str]:
    """Split a chunk of terminal input into individual key sequences."""
    keys: list[str] = []
    i = 0
    while i < len(data):
        if data[i] == ESC and i + 1 < len(data) and data[i + 1] in "[O":
            end = _sequence_end(data, i)
        else:
            end = i + 1
        keys.append(data[i:end])
        i = end
    return keys


class TerminalKeys:
    """Reads keystrokes from a TTY in cbreak mode.

    The terminal attributes are restored when ``read_keys`` returns, which
    happens once ``stop`` is set.
    """

    def __init__(self, fd: int | None = None, poll_interval: float = 0.1) -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd
        self._poll_interval = poll_interval

    def _ready(self, timeout: float) -> bool:
        readable, _, _ = select.select([self._fd], [], [], timeout)
        return bool(readable)

    def _read_chunk(self) -> str:
        data = os.read(self._fd, 32).decode("utf-8", errors="ignore")
        # A lone ESC may be the start of a sequence split across reads
        if data == ESC and self._ready(_ESCAPE_TIMEOUT):
            data += os.read(self._fd, 32).decode("utf-8", errors="ignore")
        return data

    def read_keys(self, stop: threading.Event) -> Iterator[str]:
        try:
            saved = termios.tcgetattr(self._fd)
        except termios.error:
            logger.warning("keyboard_unavailable", fd=self._fd)
            return
        try:
            tty.setcbreak(self._fd)
            while not stop.is_set():
                if not self._ready(self._poll_interval):
                    continue
                data = self._read_chunk()
                if not data:
                    return
                for seq in split_sequences(data):
                    yield decode_key(seq)
        finally:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, saved)

