"""Event loop driving an interactive browsing session."""

from __future__ import annotations

import datetime
from typing import Callable

from .models import AppState, MenuAction, MenuItems, ViewMode
from .ui import Event, KeyEvent, ResizeEvent, Terminal, list_viewport_height, render


def _jump(rows: Callable[[AppState, int], int]):
    def transition(state: AppState, viewport: int) -> None:
        state.move_selection(rows(state, viewport), viewport)

    return transition


TRANSITIONS: dict[MenuAction, Callable[[AppState, int], None]] = {
    MenuAction.UP: _jump(lambda state, viewport: -1),
    MenuAction.DOWN: _jump(lambda state, viewport: 1),
    MenuAction.PAGE_UP: _jump(lambda state, viewport: -viewport),
    MenuAction.PAGE_DOWN: _jump(lambda state, viewport: viewport),
    MenuAction.TOP: _jump(lambda state, viewport: -len(state.issues)),
    MenuAction.BOTTOM: _jump(lambda state, viewport: len(state.issues)),
    MenuAction.DETAIL: lambda state, viewport: state.enter_detail(),
    MenuAction.BACK: lambda state, viewport: state.exit_detail(),
    MenuAction.QUIT: lambda state, viewport: state.request_quit(),
}


def decide_action(mode: ViewMode, event: Event, menu: MenuItems) -> MenuAction | None:
    """Map an input event to the action it triggers in ``mode``, if any."""
    if mode is ViewMode.QUITTING or not isinstance(event, KeyEvent):
        return None
    return menu.resolve(event.key, mode)


def apply_action(state: AppState, action: MenuAction, viewport_height: int) -> None:
    TRANSITIONS[action](state, max(1, viewport_height))


def handle_event(
    state: AppState, event: Event, menu: MenuItems, terminal_height: int
) -> None:
    """Apply the state transition for one event."""
    if isinstance(event, ResizeEvent):
        state.fit_viewport(list_viewport_height(event.height))
        return
    action = decide_action(state.view_mode, event, menu)
    if action is not None:
        apply_action(state, action, list_viewport_height(terminal_height))


def run_app(
    terminal: Terminal,
    state: AppState,
    menu: MenuItems,
    now: datetime.datetime | None = None,
) -> AppState:
    """
    Draw, wait for one event and apply it until the user quits.

    Errors raised by the terminal while drawing or reading propagate to the
    caller unchanged; the caller owns restoring the terminal.
    """
    while not state.quitting:
        size = terminal.size()
        terminal.draw(render(state, menu, size, now))
        event = terminal.read_event()
        handle_event(state, event, menu, terminal.size()[1])
    return state
