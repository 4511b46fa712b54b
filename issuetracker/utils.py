import datetime
import sys

import click

from .config import defaults


def log(message, level="INFO", verbose_only=False, verbose=False, file=sys.stdout):
    """
    Log a message with color-coded level prefix.

    Args:
        message (str): The message to log.
        level (str): The log level (e.g., INFO, WARNING, ERROR).
        verbose_only (bool): Only log if verbose mode is enabled.
        verbose (bool): Whether verbose mode is enabled.
        file (file): The file to write to.
    """
    if verbose_only and not verbose:
        return

    color = defaults.LOG_LEVELS.get(level, "reset")
    prefix = f"[{level}] " if level else ""

    if file == sys.stderr:
        click.secho(f"{prefix}{message}", fg=color.lower(), err=True)
    else:
        click.secho(f"{prefix}{message}", fg=color.lower())


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse a GitHub ISO 8601 timestamp (``2023-01-01T10:00:00Z``).

    Raises ``ValueError`` for timestamps without a UTC offset.
    """
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without timezone: {value}")
    return parsed


def show_time(timestamp: datetime.datetime, now: datetime.datetime | None = None):
    """Return a short relative age like ``3d`` or ``5h``."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    seconds = int((now - timestamp).total_seconds())
    if seconds < 0:
        seconds = 0
    for unit, size in (("y", 31536000), ("mo", 2592000), ("d", 86400), ("h", 3600)):
        if seconds >= size:
            return f"{seconds // size}{unit}"
    if seconds >= 60:
        return f"{seconds // 60}m"
    return "now"


def truncate(text: str, length: int) -> str:
    if len(text) > length:
        return f"{text[: length - 1]}…"
    return text
