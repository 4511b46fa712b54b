"""Tests for the terminal surface and key decoding."""

import io
import os
import signal
import sys
import termios
import threading

import pytest
from rich.console import Console
from rich.text import Text

from issuetracker import controls
from issuetracker.exceptions import TerminalError
from issuetracker.models import ViewMode
from issuetracker.ui import ConsoleTerminal, KeyEvent, ResizeEvent, parse_keys, terminal_session
from issuetracker.ui import terminal as terminal_module
from issuetracker.ui.terminal import _TerminalGuard, split_pending


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"\x1b[A", ["up"]),
        (b"\x1b[B", ["down"]),
        (b"\x1bOA", ["up"]),
        (b"\x1b[5~", ["pageup"]),
        (b"\x1b[6~", ["pagedown"]),
        (b"\x1b[H", ["home"]),
        (b"\x1b[4~", ["end"]),
        (b"\r", ["enter"]),
        (b"\n", ["enter"]),
        (b"\x1b", ["escape"]),
        (b"\x7f", ["backspace"]),
        (b"\x03", ["ctrl+c"]),
        (b"\x02", ["ctrl+b"]),
        (b"q", ["q"]),
        (b"G", ["G"]),
        ("é".encode(), ["é"]),
    ],
)
def test_parse_single_keys(data, expected):
    assert parse_keys(data) == expected


def test_parse_several_keys_in_one_read():
    assert parse_keys(b"jj\x1b[Bk\rq") == ["j", "j", "down", "k", "enter", "q"]


def test_parse_escape_followed_by_letter():
    assert parse_keys(b"\x1bq") == ["escape", "q"]


def test_parse_malformed_input_is_unknown():
    assert parse_keys(b"\x1b[99~") == ["unknown"]
    assert parse_keys(b"\x1b[") == ["unknown"]
    assert parse_keys(b"\x1bO") == ["unknown"]
    assert parse_keys(b"\xff") == ["unknown"]
    assert parse_keys(b"\xc3") == ["unknown"]


def test_parse_csi_interrupted_by_control_byte():
    assert parse_keys(b"\x1b[1\rj") == ["unknown", "enter", "j"]


def test_parse_empty_input():
    assert parse_keys(b"") == []


@pytest.fixture
def pipe_terminal():
    read_fd, write_fd = os.pipe()
    wake_read, wake_write = os.pipe()
    os.set_blocking(wake_read, False)
    console = Console(file=io.StringIO(), width=80, height=24, force_terminal=True)
    terminal = ConsoleTerminal(console, read_fd, wake_read)
    yield terminal, write_fd, wake_write
    for fd in (read_fd, write_fd, wake_read, wake_write):
        try:
            os.close(fd)
        except OSError:
            pass


def test_read_event_queues_keys_from_one_read(pipe_terminal):
    terminal, write_fd, _ = pipe_terminal
    os.write(write_fd, b"j\x1b[Aq")

    assert terminal.read_event() == KeyEvent("j")
    assert terminal.read_event() == KeyEvent("up")
    assert terminal.read_event() == KeyEvent("q")


def test_read_event_reports_resize(pipe_terminal):
    terminal, _, wake_write = pipe_terminal
    os.write(wake_write, b"\0\0")

    assert terminal.read_event() == ResizeEvent(80, 24)


def test_read_event_raises_when_input_closes(pipe_terminal):
    terminal, write_fd, _ = pipe_terminal
    os.close(write_fd)

    with pytest.raises(TerminalError, match="closed"):
        terminal.read_event()


def test_split_pending_keeps_unfinished_tail():
    assert split_pending(b"j\x1b") == (b"j", b"\x1b")
    assert split_pending(b"j\x1b[") == (b"j", b"\x1b[")
    assert split_pending(b"\x1b[5") == (b"", b"\x1b[5")
    assert split_pending(b"\x1bO") == (b"", b"\x1bO")
    assert split_pending(b"a\xc3") == (b"a", b"\xc3")


def test_split_pending_leaves_complete_input_alone():
    for data in (b"j\x1b[A", b"\x1bOB", b"\x1bq", "é".encode(), b"\x1b[1\rj", b""):
        assert split_pending(data) == (data, b"")


def test_read_event_joins_a_sequence_split_across_reads(pipe_terminal, monkeypatch):
    terminal, write_fd, _ = pipe_terminal
    monkeypatch.setattr(terminal_module, "READ_SIZE", 1)
    os.write(write_fd, b"\x1b[Aj")

    assert terminal.read_event() == KeyEvent("up")
    assert terminal.read_event() == KeyEvent("j")


def test_read_event_waits_for_the_rest_of_a_sequence(pipe_terminal, monkeypatch):
    terminal, write_fd, _ = pipe_terminal
    monkeypatch.setattr(terminal_module, "ESCAPE_DELAY", 2.0)
    os.write(write_fd, b"\x1b")
    late = threading.Timer(0.05, os.write, (write_fd, b"[B"))
    late.start()
    try:
        assert terminal.read_event() == KeyEvent("down")
    finally:
        late.join()


def test_split_arrow_key_keeps_detail_view(pipe_terminal, monkeypatch, state_of, menu):
    terminal, write_fd, _ = pipe_terminal
    monkeypatch.setattr(terminal_module, "READ_SIZE", 1)
    state = state_of(3)
    state.enter_detail()
    os.write(write_fd, b"\x1b[B")

    controls.handle_event(state, terminal.read_event(), menu, 24)

    assert state.view_mode is ViewMode.DETAIL
    assert state.selected_index == 0


def test_lone_escape_is_escape_after_the_delay(pipe_terminal, monkeypatch):
    terminal, write_fd, _ = pipe_terminal
    monkeypatch.setattr(terminal_module, "ESCAPE_DELAY", 0.01)
    os.write(write_fd, b"\x1b")

    assert terminal.read_event() == KeyEvent("escape")


def test_truncated_sequence_is_unknown_after_the_delay(pipe_terminal, monkeypatch):
    terminal, write_fd, _ = pipe_terminal
    monkeypatch.setattr(terminal_module, "ESCAPE_DELAY", 0.01)
    os.write(write_fd, b"\x1b[1")

    assert terminal.read_event() == KeyEvent("unknown")


def test_draw_writes_the_frame_on_the_alt_screen(pipe_terminal):
    terminal, _, _ = pipe_terminal
    terminal.console.set_alt_screen(True)
    terminal.draw(Text("hello frame"))
    assert "hello frame" in terminal.console.file.getvalue()


def test_terminal_session_requires_a_tty(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO())
    with pytest.raises(TerminalError, match="interactive terminal"):
        with terminal_session(Console(file=io.StringIO())):
            pass


@pytest.fixture
def pty_fd():
    master, slave = os.openpty()
    yield slave
    os.close(master)
    os.close(slave)


def test_guard_sets_cbreak_and_restores_exactly_once(pty_fd):
    original = termios.tcgetattr(pty_fd)
    previous_term = signal.getsignal(signal.SIGTERM)
    console = Console(file=io.StringIO(), force_terminal=True)
    guard = _TerminalGuard(console, pty_fd)

    guard.acquire()
    mode = termios.tcgetattr(pty_fd)
    assert not mode[3] & termios.ICANON
    assert not mode[3] & termios.ISIG
    assert console.is_alt_screen
    assert guard.wakeup_fd is not None

    guard.release()
    guard.release()

    assert termios.tcgetattr(pty_fd) == original
    assert not console.is_alt_screen
    assert signal.getsignal(signal.SIGTERM) == previous_term
    assert guard.wakeup_fd is None


def test_guard_restores_after_an_error(pty_fd):
    original = termios.tcgetattr(pty_fd)
    console = Console(file=io.StringIO(), force_terminal=True)
    guard = _TerminalGuard(console, pty_fd)

    with pytest.raises(RuntimeError):
        try:
            guard.acquire()
            raise RuntimeError("boom")
        finally:
            guard.release()

    assert termios.tcgetattr(pty_fd) == original


def test_resize_signal_wakes_the_reader(pty_fd):
    console = Console(file=io.StringIO(), width=80, height=24, force_terminal=True)
    guard = _TerminalGuard(console, pty_fd)
    guard.acquire()
    try:
        terminal = ConsoleTerminal(console, pty_fd, guard.wakeup_fd)
        os.kill(os.getpid(), signal.SIGWINCH)
        assert terminal.read_event() == ResizeEvent(80, 24)
    finally:
        guard.release()
