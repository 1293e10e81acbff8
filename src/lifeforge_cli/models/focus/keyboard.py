"""Non-blocking single-key input for the focus screen.

The focus loop polls between display refreshes, so reads never wait. On
POSIX the terminal is in cbreak mode while a KeyReader is open; Windows
reads through msvcrt.
"""

from __future__ import annotations

import contextlib
import os
import re
import select
import sys
from typing import IO

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None
    tty = None

try:
    import msvcrt
except ImportError:  # POSIX
    msvcrt = None

# Arrow and function keys arrive as escape sequences; none of them is a command.
_ESCAPE_SEQUENCE = re.compile(r"\x1b(\[[0-9;]*[A-Za-z~]|O[A-Za-z]|.)?", re.DOTALL)
_MAX_KEYS_PER_POLL = 32


class KeyReader:
    """Context manager handing out the keys typed since the last poll."""

    def __init__(self, stream: IO[str] | None = None):
        self.stream = stream if stream is not None else sys.stdin
        self._saved_attrs = None

    def __enter__(self) -> KeyReader:
        if termios is not None and self.stream.isatty():
            fd = self.stream.fileno()
            try:
                self._saved_attrs = termios.tcgetattr(fd)
                tty.setcbreak(fd)
            except termios.error:
                self._saved_attrs = None
        return self

    def __exit__(self, *exc_info) -> None:
        if self._saved_attrs is None:
            return
        with contextlib.suppress(termios.error):
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
        self._saved_attrs = None

    def poll(self) -> list[str]:
        """Pending keys, oldest first and lowercased, without escape sequences."""
        raw = []
        while len(raw) < _MAX_KEYS_PER_POLL:
            char = self._read_char()
            if char is None:
                break
            raw.append(char)
        return list(_ESCAPE_SEQUENCE.sub("", "".join(raw)).lower())

    def _read_char(self) -> str | None:
        if msvcrt is not None and self.stream is sys.stdin:
            return msvcrt.getwch() if msvcrt.kbhit() else None

        # os.read bypasses the stream's buffer so select() sees every byte
        fd = self.stream.fileno()
        try:
            ready, _, _ = select.select([fd], [], [], 0)
            if not ready:
                return None
            data = os.read(fd, 1)
        except (OSError, ValueError):
            return None
        return data.decode("utf-8", errors="ignore") or None
