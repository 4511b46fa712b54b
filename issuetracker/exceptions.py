"""Exception classes shared across issue-tracker."""

import click


class IssueTrackerError(click.ClickException):
    """Base exception for issue-tracker errors."""


class ConfigError(IssueTrackerError):
    """Raised when the configuration file or key bindings are invalid."""


class TerminalError(IssueTrackerError):
    """Raised when the terminal surface cannot be used for the session."""
