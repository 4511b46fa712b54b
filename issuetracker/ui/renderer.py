"""Build terminal frames from the application state."""

from __future__ import annotations

import datetime

from rich import box
from rich.console import Group, RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from .. import utils
from ..config import defaults
from ..models import AppState, Issue, MenuItems, ViewMode

# title line, two panel borders, table header and legend
LIST_CHROME = 5

KEY_LABELS = {
    "up": "↑",
    "down": "↓",
    "left": "←",
    "right": "→",
    "enter": "Enter",
    "escape": "Esc",
    "backspace": "Bksp",
    "pageup": "PgUp",
    "pagedown": "PgDn",
    "home": "Home",
    "end": "End",
    "ctrl+c": "Ctrl-C",
}


def list_viewport_height(terminal_height: int) -> int:
    """Number of issue rows that fit in the list view."""
    return max(1, terminal_height - LIST_CHROME)


def render_legend(menu: MenuItems, mode: ViewMode) -> Text:
    legend = Text(no_wrap=True, overflow="ellipsis")
    for index, item in enumerate(menu.legend(mode)):
        if index:
            legend.append("  ")
        legend.append(f" {KEY_LABELS.get(item.key, item.key)} ", style="bold black on cyan")
        legend.append(f" {item.label}")
    return legend


def _state_text(issue: Issue) -> Text:
    state = issue.state.value
    return Text(state, style=defaults.STATE_STYLES.get(state, ""))


def render_list(
    state: AppState,
    menu: MenuItems,
    height: int,
    now: datetime.datetime | None = None,
) -> RenderableType:
    viewport = list_viewport_height(height)
    header = Text.assemble(
        (f" {defaults.APP_NAME} ", "bold white on blue"),
        f"  {len(state.issues)} issue{'s' if len(state.issues) != 1 else ''}",
    )

    if not state.issues:
        body: RenderableType = Panel(
            Text("No issues found.", style="dim", justify="center"),
            title="Issues",
            border_style="blue",
            height=viewport + 3,
        )
        return Group(header, body, render_legend(menu, ViewMode.LIST))

    table = Table(
        box=None,
        expand=True,
        show_edge=False,
        pad_edge=False,
        header_style="bold",
    )
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("State", no_wrap=True)
    table.add_column("Title", ratio=1, no_wrap=True, overflow="ellipsis")
    table.add_column("Author", no_wrap=True, overflow="ellipsis", max_width=20)
    table.add_column("Age", justify="right", no_wrap=True)

    visible = state.issues[state.scroll_offset : state.scroll_offset + viewport]
    for row, issue in enumerate(visible, start=state.scroll_offset):
        table.add_row(
            str(issue.number),
            _state_text(issue),
            utils.truncate(issue.title, defaults.TITLE_MAX_LENGTH),
            issue.author,
            utils.show_time(issue.created_at, now),
            style="reverse" if row == state.selected_index else None,
        )

    position = f"{state.selected_index + 1}/{len(state.issues)}"
    body = Panel(
        table,
        title="Issues",
        subtitle=position,
        subtitle_align="right",
        border_style="blue",
        height=viewport + 3,
    )
    return Group(header, body, render_legend(menu, ViewMode.LIST))


def render_detail(
    issue: Issue,
    menu: MenuItems,
    height: int,
    now: datetime.datetime | None = None,
) -> RenderableType:
    meta = Table.grid(padding=(0, 2))
    meta.add_column(style="bold")
    meta.add_column()
    meta.add_row("State", _state_text(issue))
    meta.add_row("Author", issue.author)
    created = issue.created_at.strftime("%Y-%m-%d %H:%M %Z").strip()
    meta.add_row("Created", f"{created} ({utils.show_time(issue.created_at, now)} ago)")
    if issue.labels:
        meta.add_row("Labels", ", ".join(issue.labels))
    meta.add_row("Comments", str(issue.comments))
    if issue.html_url:
        meta.add_row("URL", Text(issue.html_url, style=f"link {issue.html_url}"))

    body = Markdown(issue.body) if issue.body else Text(
        "No description provided.", style="dim italic"
    )
    panel = Panel(
        Group(meta, Rule(style="blue"), body),
        title=f"#{issue.number} {issue.title}",
        title_align="left",
        border_style="blue",
        box=box.ROUNDED,
        height=max(3, height - 2),
    )
    header = Text.assemble((f" {defaults.APP_NAME} ", "bold white on blue"), "  details")
    return Group(header, panel, render_legend(menu, ViewMode.DETAIL))


def render(
    state: AppState,
    menu: MenuItems,
    size: tuple[int, int],
    now: datetime.datetime | None = None,
) -> RenderableType:
    """Return the frame for ``state`` on a terminal of ``size`` (width, height)."""
    _, height = size
    issue = state.selected_issue
    if state.view_mode is ViewMode.DETAIL and issue is not None:
        return render_detail(issue, menu, height, now)
    return render_list(state, menu, height, now)
