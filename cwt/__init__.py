"""
cwt - A terminal worktree manager for git
"""

from .__version__ import __version__
from .core import Repository, Worktree
from .cli.main import main

__all__ = ["Repository", "Worktree", "main", "__version__"]
