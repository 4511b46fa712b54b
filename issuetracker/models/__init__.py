"""Data models for the issue browser."""

from .app_state import AppState, ViewMode
from .issue import Issue, IssueState, issues_from_json
from .menu_items import MenuAction, MenuItem, MenuItems

__all__ = [
    "AppState",
    "ViewMode",
    "Issue",
    "IssueState",
    "issues_from_json",
    "MenuAction",
    "MenuItem",
    "MenuItems",
]
