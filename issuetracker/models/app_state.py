"""Mutable view state of an interactive browsing session."""

from __future__ import annotations

import enum
from typing import Sequence

from .issue import Issue


class ViewMode(enum.Enum):
    LIST = "list"
    DETAIL = "detail"
    QUITTING = "quitting"


class AppState:
    """
    Selection, view mode and scroll position over a fixed issue sequence.

    Every operation is total: commands that make no sense in the current
    state (moving in an empty list, opening the detail of nothing) are
    absorbed as no-ops.
    """

    def __init__(self, issues: Sequence[Issue]):
        self.issues: tuple[Issue, ...] = tuple(issues)
        self.selected_index = 0
        self.scroll_offset = 0
        self.view_mode = ViewMode.LIST

    def __repr__(self) -> str:
        return (
            f"AppState(issues={len(self.issues)}, selected_index={self.selected_index}, "
            f"scroll_offset={self.scroll_offset}, view_mode={self.view_mode.name})"
        )

    @property
    def selected_issue(self) -> Issue | None:
        if not self.issues:
            return None
        return self.issues[self.selected_index]

    @property
    def quitting(self) -> bool:
        return self.view_mode is ViewMode.QUITTING

    def move_selection(self, delta: int, viewport_height: int) -> None:
        """Shift the selection by ``delta`` rows, clamped to the list bounds."""
        if not self.issues:
            return
        last = len(self.issues) - 1
        self.selected_index = max(0, min(last, self.selected_index + delta))
        self.fit_viewport(viewport_height)

    def fit_viewport(self, viewport_height: int) -> None:
        """Adjust ``scroll_offset`` so the selected row is inside the window."""
        height = max(1, viewport_height)
        if self.selected_index < self.scroll_offset:
            self.scroll_offset = self.selected_index
        elif self.selected_index >= self.scroll_offset + height:
            self.scroll_offset = self.selected_index - height + 1

    def enter_detail(self) -> None:
        if self.issues and self.view_mode is ViewMode.LIST:
            self.view_mode = ViewMode.DETAIL

    def exit_detail(self) -> None:
        if self.view_mode is ViewMode.DETAIL:
            self.view_mode = ViewMode.LIST

    def request_quit(self) -> None:
        self.view_mode = ViewMode.QUITTING
