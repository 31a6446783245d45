"""Formatting helpers for the worktree list.

Submodules:
- worktree: row cells, message styling and key hints
"""

from .worktree import (
    format_age,
    format_branch,
    format_key_hints,
    format_message,
    format_name,
    format_status,
    is_alert,
)

__all__ = [
    "format_age",
    "format_branch",
    "format_key_hints",
    "format_message",
    "format_name",
    "format_status",
    "is_alert",
]
