"""Rendering and terminal handling for the issue browser."""

from .renderer import list_viewport_height, render
from .terminal import (
    ConsoleTerminal,
    Event,
    KeyEvent,
    ResizeEvent,
    Terminal,
    parse_keys,
    terminal_session,
)

__all__ = [
    "list_viewport_height",
    "render",
    "ConsoleTerminal",
    "Event",
    "KeyEvent",
    "ResizeEvent",
    "Terminal",
    "parse_keys",
    "terminal_session",
]
