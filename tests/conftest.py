import datetime
from collections import deque

import pytest

from issuetracker.models import AppState, Issue, IssueState, MenuItems
from issuetracker.ui import KeyEvent


@pytest.fixture
def sample_config():
    """Return a sample configuration dictionary."""
    return {
        "github_access_token": "ghp_testtoken",
        "user_name": "testuser",
        "api_url": "https://api.github.example.com/issues",
        "insecure": False,
        "verbose": False,
        "keys": {},
    }


@pytest.fixture
def sample_issues_json():
    """Return a GitHub /issues payload with two issues and a pull request."""
    return [
        {
            "number": 12,
            "title": "Crash when opening settings",
            "body": "Steps:\n\n1. open settings\n2. boom",
            "state": "open",
            "user": {"login": "octocat"},
            "created_at": "2023-01-01T10:00:00Z",
            "html_url": "https://github.com/octo/repo/issues/12",
            "labels": [{"name": "bug"}, {"name": "ui"}],
            "comments": 3,
        },
        {
            "number": 13,
            "title": "Add dark mode",
            "body": None,
            "state": "closed",
            "user": {"login": "hubot"},
            "created_at": "2023-01-03T08:30:00Z",
            "html_url": "https://github.com/octo/repo/issues/13",
            "labels": [],
            "comments": 0,
        },
        {
            "number": 14,
            "title": "Bump dependency",
            "body": "",
            "state": "open",
            "user": {"login": "dependabot"},
            "created_at": "2023-01-04T08:30:00Z",
            "html_url": "https://github.com/octo/repo/pull/14",
            "pull_request": {"url": "https://api.github.com/repos/octo/repo/pulls/14"},
        },
    ]


@pytest.fixture
def make_issues():
    """Return a factory building ``count`` simple issues."""

    def factory(count, prefix="Issue"):
        created = datetime.datetime(2023, 1, 1, tzinfo=datetime.timezone.utc)
        return [
            Issue(
                number=index + 1,
                title=f"{prefix} {chr(ord('A') + index) if index < 26 else index}",
                body=f"Body of issue {index + 1}",
                state=IssueState.OPEN if index % 2 == 0 else IssueState.CLOSED,
                author="octocat",
                created_at=created,
            )
            for index in range(count)
        ]

    return factory


@pytest.fixture
def menu():
    return MenuItems()


class FakeTerminal:
    """Terminal surface replaying scripted events and recording frames."""

    def __init__(self, events, size=(80, 24)):
        self.events = deque(events)
        self.frames = []
        self.width, self.height = size
        self.reads = 0

    def size(self):
        return self.width, self.height

    def draw(self, frame):
        self.frames.append(frame)

    def read_event(self):
        self.reads += 1
        if not self.events:
            raise AssertionError("event loop asked for more events than scripted")
        event = self.events.popleft()
        if isinstance(event, BaseException):
            raise event
        if isinstance(event, str):
            return KeyEvent(event)
        return event


@pytest.fixture
def fake_terminal():
    """Return a factory for ``FakeTerminal``."""
    return FakeTerminal


@pytest.fixture
def state_of(make_issues):
    def factory(count):
        return AppState(make_issues(count))

    return factory


@pytest.fixture(autouse=True)
def mock_prompt_ask(monkeypatch):
    from rich.prompt import Prompt

    monkeypatch.setattr(Prompt, "ask", lambda *args, **kwargs: "fakeinput")
