"""Registry of the key-bound actions surfaced in the legend."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Mapping

from ..config import defaults
from ..exceptions import ConfigError
from .app_state import ViewMode


class MenuAction(enum.Enum):
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    TOP = "top"
    BOTTOM = "bottom"
    DETAIL = "detail"
    BACK = "back"
    QUIT = "quit"


@dataclass(frozen=True)
class MenuItem:
    action: MenuAction
    label: str
    keys: tuple[str, ...]
    modes: frozenset[ViewMode]
    in_legend: bool = True

    @property
    def key(self) -> str:
        """The activation key shown in the legend."""
        return self.keys[0]


_LIST = frozenset({ViewMode.LIST})
_DETAIL = frozenset({ViewMode.DETAIL})
_BOTH = _LIST | _DETAIL

# (action, label, modes, shown in legend), in display order
_ITEMS = (
    (MenuAction.UP, "Up", _LIST, True),
    (MenuAction.DOWN, "Down", _LIST, True),
    (MenuAction.PAGE_UP, "Page up", _LIST, False),
    (MenuAction.PAGE_DOWN, "Page down", _LIST, False),
    (MenuAction.TOP, "Top", _LIST, False),
    (MenuAction.BOTTOM, "Bottom", _LIST, False),
    (MenuAction.DETAIL, "Details", _LIST, True),
    (MenuAction.BACK, "Back", _DETAIL, True),
    (MenuAction.QUIT, "Quit", _BOTH, True),
)


def _normalize_keys(action: str, value) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not value:
        raise ConfigError(f"Key binding for '{action}' must be a key or a list of keys")
    return tuple(str(key) for key in value)


class MenuItems:
    """
    Fixed, ordered set of menu items built once at startup.

    ``bindings`` overrides the default keys per action name; actions not
    mentioned keep their defaults.
    """

    def __init__(self, bindings: Mapping[str, Iterable[str] | str] | None = None):
        bindings = dict(bindings or {})
        known = {action.value for action in MenuAction}
        unknown = sorted(set(bindings) - known)
        if unknown:
            raise ConfigError(
                f"Unknown key binding action(s): {', '.join(unknown)}. "
                f"Valid actions are: {', '.join(sorted(known))}"
            )

        items = []
        for action, label, modes, in_legend in _ITEMS:
            keys = _normalize_keys(
                action.value,
                bindings.get(action.value, defaults.KEY_BINDINGS[action.value]),
            )
            items.append(MenuItem(action, label, keys, modes, in_legend))
        self._items: tuple[MenuItem, ...] = tuple(items)

        self._lookup: dict[tuple[ViewMode, str], MenuAction] = {}
        for item in self._items:
            for mode in item.modes:
                for key in item.keys:
                    bound = self._lookup.setdefault((mode, key), item.action)
                    if bound is not item.action:
                        raise ConfigError(
                            f"Key '{key}' is bound to both '{bound.value}' and "
                            f"'{item.action.value}' in {mode.value} view"
                        )

    @property
    def items(self) -> tuple[MenuItem, ...]:
        return self._items

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def resolve(self, key: str, mode: ViewMode) -> MenuAction | None:
        """Return the action bound to ``key`` in ``mode``, if any."""
        return self._lookup.get((mode, key))

    def legend(self, mode: ViewMode) -> list[MenuItem]:
        return [item for item in self._items if mode in item.modes and item.in_legend]
