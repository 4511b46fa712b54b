"""Browse the GitHub issues assigned to you from the terminal."""

__version__ = "0.1.0"
