"""Core worktree management for cwt."""

from .repository import Repository
from .worktree import Worktree
from .refresh import RefreshEngine

__all__ = ["Repository", "Worktree", "RefreshEngine"]
