"""Issue records as returned by the GitHub issues endpoint."""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, field
from typing import Any

from .. import utils
from ..api.exceptions import IssueParseError


class IssueState(enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class Issue:
    """A single immutable tracker record."""

    number: int
    title: str
    body: str | None
    state: IssueState
    author: str
    created_at: datetime.datetime
    html_url: str = ""
    labels: tuple[str, ...] = field(default_factory=tuple)
    comments: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Issue:
        """Build an issue from one element of the GitHub JSON array."""
        if not isinstance(data, dict):
            raise IssueParseError(f"expected an object, got {type(data).__name__}")
        try:
            user = data.get("user") or {}
            if not isinstance(user, dict):
                raise TypeError(f"user must be an object, got {type(user).__name__}")
            return cls(
                number=int(data["number"]),
                title=str(data["title"]),
                body=data.get("body") or None,
                state=IssueState(data["state"]),
                author=user.get("login", "ghost"),
                created_at=utils.parse_timestamp(data["created_at"]),
                html_url=data.get("html_url", ""),
                labels=tuple(
                    label["name"] if isinstance(label, dict) else str(label)
                    for label in data.get("labels") or []
                ),
                comments=int(data.get("comments") or 0),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise IssueParseError(
                f"issue {data.get('number', '?')}: {exc!r}"
            ) from exc


def issues_from_json(payload: Any, endpoint: str = "") -> list[Issue]:
    """Convert the issues endpoint payload, skipping pull requests."""
    if not isinstance(payload, list):
        raise IssueParseError(
            f"expected a list of issues, got {type(payload).__name__}", endpoint
        )
    return [
        Issue.from_json(item)
        for item in payload
        if not (isinstance(item, dict) and "pull_request" in item)
    ]
