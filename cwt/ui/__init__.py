"""Textual widgets for the cwt TUI."""

from .widgets import WorktreeTable

__all__ = ["WorktreeTable"]
