"""Default configuration values and constants for issue-tracker."""

import pathlib

APP_NAME = "issue-tracker"

CONFIG_FILE = pathlib.Path.home() / ".config" / APP_NAME / "config.yaml"

API_URL = "https://api.github.com/issues"
API_VERSION = "2022-11-28"
ACCEPT = "application/vnd.github+json"

FETCH_LABEL = "Fetching issues.."
SPINNER_CHARS = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

# Action name -> keys. The first key of each entry is the one shown in the legend.
KEY_BINDINGS = {
    "up": ["up", "k"],
    "down": ["down", "j"],
    "page_up": ["pageup", "ctrl+b"],
    "page_down": ["pagedown", "ctrl+f"],
    "top": ["home", "g"],
    "bottom": ["end", "G"],
    "detail": ["enter", "l", "right"],
    "back": ["escape", "backspace", "h", "left"],
    "quit": ["q", "ctrl+c"],
}

TITLE_MAX_LENGTH = 120

STATE_STYLES = {
    "open": "bold green",
    "closed": "bold magenta",
}

LOG_LEVELS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "SUCCESS": "blue",
}
