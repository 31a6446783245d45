"""Worktree data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WorktreeRecord:
    """One record of `git worktree list --porcelain` output."""

    path: str
    branch: Optional[str] = None  # None = detached HEAD
    sha: Optional[str] = None

    def __str__(self) -> str:
        """String representation of the record."""
        return f"{self.branch or 'HEAD'} @ {self.path}"


@dataclass(frozen=True)
class StatusProbe:
    """Outcome of a status check: either a dirty flag or an error.

    Callers treat the error variant as "unknown" and never surface it.
    """

    dirty: Optional[bool] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def dirty_or_clean(self) -> bool:
        """Lenient reading: an unknown status counts as clean."""
        return bool(self.dirty) if self.ok else False


@dataclass(frozen=True)
class TeardownResult:
    """Result of running the teardown hook."""

    ran: bool
    success: bool = True


@dataclass(frozen=True)
class DeleteResult:
    """Result of deleting a worktree.

    `success` with a `warning` means the worktree is gone but its branch was kept.
    """

    success: bool
    error: Optional[str] = None
    warning: Optional[str] = None
