"""Terminal surface used by the event loop.

The loop only needs three things from a terminal: the next input event,
a way to draw a frame and the current size. ``ConsoleTerminal`` provides
them on top of a :class:`rich.console.Console`; ``terminal_session`` puts
the real terminal in cbreak mode and on the alternate screen and
guarantees it is put back on every exit path.
"""

from __future__ import annotations

import atexit
import collections
import contextlib
import os
import select
import signal
import sys
import termios
import tty
from dataclasses import dataclass
from typing import Iterator, Protocol, Union

from rich.console import Console, RenderableType

from ..exceptions import TerminalError

READ_SIZE = 1024
# how long a lone ESC waits for the rest of a sequence before it counts as Escape
ESCAPE_DELAY = 0.05


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[KeyEvent, ResizeEvent]


class Terminal(Protocol):
    def read_event(self) -> Event:
        """Block until the next key press or resize."""

    def draw(self, frame: RenderableType) -> None:
        """Replace the whole screen with ``frame``."""

    def size(self) -> tuple[int, int]:
        """Return ``(width, height)`` in cells."""


_SEQUENCES = {
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1bOA": "up",
    b"\x1bOB": "down",
    b"\x1bOC": "right",
    b"\x1bOD": "left",
    b"\x1b[H": "home",
    b"\x1b[F": "end",
    b"\x1bOH": "home",
    b"\x1bOF": "end",
    b"\x1b[1~": "home",
    b"\x1b[7~": "home",
    b"\x1b[4~": "end",
    b"\x1b[8~": "end",
    b"\x1b[2~": "insert",
    b"\x1b[3~": "delete",
    b"\x1b[5~": "pageup",
    b"\x1b[6~": "pagedown",
    b"\x1b[Z": "shift+tab",
}

_CONTROL_KEYS = {
    0x0D: "enter",
    0x0A: "enter",
    0x09: "tab",
    0x08: "backspace",
    0x7F: "backspace",
    0x00: "ctrl+space",
}


def _utf8_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if 0xC0 <= lead < 0xE0:
        return 2
    if 0xE0 <= lead < 0xF0:
        return 3
    if 0xF0 <= lead < 0xF8:
        return 4
    return 1


def _escape_sequence_end(data: bytes, start: int) -> int:
    """Return the index just past the escape sequence starting at ``start``."""
    introducer = data[start + 1]
    if introducer == ord("O"):
        return min(start + 3, len(data))
    index = start + 2
    while index < len(data):
        # CSI final bytes are 0x40-0x7e; parameters and intermediates are below
        if 0x40 <= data[index] <= 0x7E:
            return index + 1
        if not 0x20 <= data[index] <= 0x3F:
            return index
        index += 1
    return index


def _unfinished_escape(data: bytes, start: int) -> bool:
    if start + 1 >= len(data):
        return True
    introducer = data[start + 1]
    if introducer == ord("O"):
        return len(data) - start < 3
    if introducer != ord("["):
        return False
    return all(0x20 <= byte <= 0x3F for byte in data[start + 2 :])


def split_pending(data: bytes) -> tuple[bytes, bytes]:
    """Split ``data`` into complete input and an unfinished trailing sequence.

    The tail is a lone ESC, an escape sequence missing its final byte or a
    truncated UTF-8 character; it is empty when ``data`` ends cleanly.
    """
    start = data.rfind(b"\x1b")
    if start != -1 and _unfinished_escape(data, start):
        return data[:start], data[start:]

    for back in range(1, min(4, len(data)) + 1):
        byte = data[-back]
        if byte < 0x80:
            break
        if byte >= 0xC0:
            if _utf8_length(byte) > back:
                return data[:-back], data[-back:]
            break
    return data, b""


def parse_keys(data: bytes) -> list[str]:
    """Decode a chunk of raw terminal input into key names.

    Unknown or truncated escape sequences and invalid UTF-8 come back as
    ``"unknown"`` so they can be ignored like any other unbound key.
    """
    keys: list[str] = []
    index = 0
    while index < len(data):
        byte = data[index]
        if byte == 0x1B:
            following = data[index + 1] if index + 1 < len(data) else None
            if following in (ord("["), ord("O")):
                end = _escape_sequence_end(data, index)
                keys.append(_SEQUENCES.get(bytes(data[index:end]), "unknown"))
                index = end
            else:
                keys.append("escape")
                index += 1
            continue

        if byte in _CONTROL_KEYS:
            keys.append(_CONTROL_KEYS[byte])
            index += 1
            continue

        if byte < 0x20:
            keys.append(f"ctrl+{chr(byte + 0x60)}")
            index += 1
            continue

        length = _utf8_length(byte)
        chunk = data[index : index + length].decode("utf-8", errors="replace")
        keys.append("unknown" if "\ufffd" in chunk or len(chunk) != 1 else chunk)
        index += length
    return keys


class ConsoleTerminal:
    """Terminal surface reading raw bytes from ``fd`` and drawing with rich."""

    def __init__(self, console: Console, fd: int, wakeup_fd: int | None = None):
        self.console = console
        self._fd = fd
        self._wakeup_fd = wakeup_fd
        self._pending: collections.deque[Event] = collections.deque()
        self._needs_clear = False

    def size(self) -> tuple[int, int]:
        width, height = self.console.size
        return width, height

    def draw(self, frame: RenderableType) -> None:
        if self._needs_clear:
            self.console.clear()
            self._needs_clear = False
        self.console.update_screen(frame)

    def read_event(self) -> Event:
        while not self._pending:
            sources = [self._fd]
            if self._wakeup_fd is not None:
                sources.append(self._wakeup_fd)
            try:
                readable, _, _ = select.select(sources, [], [])
                if self._wakeup_fd is not None and self._wakeup_fd in readable:
                    self._drain_wakeup()
                    self._needs_clear = True
                    return ResizeEvent(*self.size())
                data = self._read_input()
            except OSError as exc:
                raise TerminalError(f"Cannot read from the terminal: {exc}") from exc
            self._pending.extend(KeyEvent(key) for key in parse_keys(data))
        return self._pending.popleft()

    def _read_input(self) -> bytes:
        """Read a chunk of input, completing a sequence split across reads."""
        data = os.read(self._fd, READ_SIZE)
        if not data:
            raise TerminalError("Terminal input was closed")
        while split_pending(data)[1]:
            readable, _, _ = select.select([self._fd], [], [], ESCAPE_DELAY)
            if not readable:
                break
            more = os.read(self._fd, READ_SIZE)
            if not more:
                break
            data += more
        return data

    def _drain_wakeup(self) -> None:
        with contextlib.suppress(BlockingIOError):
            while os.read(self._wakeup_fd, READ_SIZE):
                pass


class _TerminalGuard:
    """Puts the terminal in interactive mode and restores it exactly once."""

    def __init__(self, console: Console, fd: int):
        self.console = console
        self.fd = fd
        self.wakeup_fd: int | None = None
        self._wakeup_write: int | None = None
        self._saved_mode: list | None = None
        self._saved_handlers: dict[int, object] = {}
        self._active = False

    def acquire(self) -> None:
        self._saved_mode = termios.tcgetattr(self.fd)
        self._active = True
        atexit.register(self.release)

        self.wakeup_fd, self._wakeup_write = os.pipe()
        os.set_blocking(self.wakeup_fd, False)
        os.set_blocking(self._wakeup_write, False)
        if hasattr(signal, "SIGWINCH"):
            self._install(signal.SIGWINCH, self._on_resize)
        self._install(signal.SIGTERM, self._on_terminate)

        tty.setcbreak(self.fd)
        # Ctrl-C arrives as a key instead of SIGINT
        mode = termios.tcgetattr(self.fd)
        mode[3] &= ~termios.ISIG
        termios.tcsetattr(self.fd, termios.TCSANOW, mode)

        self.console.set_alt_screen(True)
        self.console.show_cursor(False)

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        atexit.unregister(self.release)
        try:
            self.console.show_cursor(True)
            self.console.set_alt_screen(False)
        finally:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_mode)
            for signum, handler in self._saved_handlers.items():
                # None means the previous handler was not installed from Python
                signal.signal(signum, signal.SIG_DFL if handler is None else handler)
            self._saved_handlers.clear()
            for fd in (self.wakeup_fd, self._wakeup_write):
                if fd is not None:
                    os.close(fd)
            self.wakeup_fd = self._wakeup_write = None

    def _install(self, signum: int, handler) -> None:
        self._saved_handlers[signum] = signal.signal(signum, handler)

    def _on_resize(self, signum, frame) -> None:
        if self._wakeup_write is None:
            return
        # a full pipe already holds a pending wakeup
        with contextlib.suppress(BlockingIOError):
            os.write(self._wakeup_write, b"\0")

    def _on_terminate(self, signum, frame) -> None:
        raise SystemExit(128 + signum)


@contextlib.contextmanager
def terminal_session(console: Console | None = None) -> Iterator[ConsoleTerminal]:
    """Run the enclosed block on an interactive terminal surface."""
    console = console or Console()
    if not sys.stdin.isatty() or not console.is_terminal:
        raise TerminalError("An interactive terminal is required to browse issues")

    guard = _TerminalGuard(console, sys.stdin.fileno())
    try:
        guard.acquire()
        yield ConsoleTerminal(console, guard.fd, guard.wakeup_fd)
    finally:
        guard.release()
