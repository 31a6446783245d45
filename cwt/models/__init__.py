"""Data models for cwt."""

from .worktree import DeleteResult, StatusProbe, TeardownResult, WorktreeRecord

__all__ = ["DeleteResult", "StatusProbe", "TeardownResult", "WorktreeRecord"]
