"""Terminal abstraction for raw-mode byte-level interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that switches the controlling terminal into raw mode via
:mod:`termios`, reads single bytes with a short timeout, writes whole frames
in one go, and finds out the window size.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import sys
import termios
from collections.abc import Iterator
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE = b"\x1b[K"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
REVERSE_VIDEO = b"\x1b[7m"
RESET_VIDEO = b"\x1b[m"
REQUEST_CURSOR_POSITION = b"\x1b[6n"
CURSOR_FAR_CORNER = b"\x1b[999C\x1b[999B"

_CURSOR_POSITION_FMT = "\x1b[{};{}H"
_CURSOR_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)$")
_MAX_REPORT_BYTES = 32

TermMode = list[Any]


class TerminalError(RuntimeError):
    """The terminal could not be configured or measured."""


def cursor_position(row: int, col: int) -> bytes:
    """Escape sequence moving the cursor to 1-based ``(row, col)``."""
    return _CURSOR_POSITION_FMT.format(row, col).encode("ascii")


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations used by the editor."""

    def read_byte(self) -> int | None: ...

    def write(self, data: bytes) -> None: ...

    def window_size(self) -> tuple[int, int]: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the process's stdin/stdout descriptors.

    Raw mode turns off line buffering, echo, signal keys and output
    post-processing. Reads return after at most a tenth of a second
    (``VMIN = 0``, ``VTIME = 1``), which is how a lone ESC is told apart from
    the start of a longer sequence.
    """

    def __init__(self, fd_in: int | None = None, fd_out: int | None = None) -> None:
        self._fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self._fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self._write_log_path: str = os.environ.get("RAWEDIT_WRITE_LOG", "")

    # -- raw mode -----------------------------------------------------------

    def enter(self) -> TermMode:
        """Switch to raw mode and return the previous settings."""
        try:
            original = termios.tcgetattr(self._fd_in)
        except termios.error as exc:
            raise TerminalError(f"tcgetattr failed: {exc}") from exc

        raw = make_raw(original)
        try:
            termios.tcsetattr(self._fd_in, termios.TCSAFLUSH, raw)
        except termios.error as exc:
            raise TerminalError(f"tcsetattr failed: {exc}") from exc
        logger.debug("terminal switched to raw mode")
        return original

    def restore(self, previous: TermMode) -> None:
        """Put back the settings returned by :meth:`enter`."""
        try:
            termios.tcsetattr(self._fd_in, termios.TCSAFLUSH, previous)
        except termios.error as exc:
            raise TerminalError(f"tcsetattr failed: {exc}") from exc
        logger.debug("terminal mode restored")

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[ProcessTerminal]:
        """Raw mode for the duration of the block, restored on every exit."""
        previous = self.enter()
        try:
            yield self
        finally:
            self.restore(previous)

    # -- input ----------------------------------------------------------------

    def read_byte(self) -> int | None:
        """Read one byte, or ``None`` if none arrived in the read window."""
        try:
            data = os.read(self._fd_in, 1)
        except BlockingIOError:
            return None
        except InterruptedError:
            return None
        except OSError as exc:
            raise TerminalError(f"read failed: {exc}") from exc
        if not data:
            return None
        return data[0]

    # -- output ---------------------------------------------------------------

    def write(self, data: bytes) -> None:
        """Write all of *data* to the terminal."""
        view = memoryview(data)
        while view:
            written = os.write(self._fd_out, view)
            view = view[written:]

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                pass

    # -- size -----------------------------------------------------------------

    def window_size(self) -> tuple[int, int]:
        """Return ``(rows, cols)``.

        Falls back to moving the cursor to the far corner and asking the
        terminal where it ended up when the OS cannot tell.
        """
        try:
            size = os.get_terminal_size(self._fd_out)
        except OSError:
            size = None
        if size is not None and size.columns > 0:
            return size.lines, size.columns

        logger.info("window size unavailable, querying cursor position")
        self.write(CURSOR_FAR_CORNER)
        return self.cursor_position()

    def cursor_position(self) -> tuple[int, int]:
        """Ask the terminal for the cursor position and parse the reply."""
        self.write(REQUEST_CURSOR_POSITION)
        reply = bytearray()
        while len(reply) < _MAX_REPORT_BYTES - 1:
            byte = self.read_byte()
            if byte is None or byte == ord("R"):
                break
            reply.append(byte)
        return parse_cursor_report(bytes(reply))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_raw(mode: TermMode) -> TermMode:
    """Return a raw-mode copy of the ``tcgetattr`` list *mode*."""
    raw = list(mode)
    raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    raw[1] &= ~termios.OPOST
    raw[2] |= termios.CS8
    raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(raw[6])
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = 1
    raw[6] = cc
    return raw


def parse_cursor_report(reply: bytes) -> tuple[int, int]:
    """Parse ``ESC [ rows ; cols`` (the reply without its final ``R``)."""
    match = _CURSOR_REPORT_RE.match(reply)
    if match is None:
        raise TerminalError(f"unexpected cursor position report: {reply!r}")
    return int(match.group(1)), int(match.group(2))


def is_raw_mode(fd: int) -> bool:
    """Heuristic check for whether the terminal fd is in raw mode.

    Raw mode is characterised by the absence of ICANON and ECHO in the
    local-mode flags.
    """
    try:
        attrs = termios.tcgetattr(fd)
        lflag = attrs[3]
        return not bool(lflag & (termios.ICANON | termios.ECHO))
    except termios.error:
        return False
