"""Shared constants for cwt."""

from dataclasses import dataclass
from typing import Dict, List, Tuple


# Repository layout
WORKTREE_DIR = ".worktrees"
CONFIG_DIR = ".cwt"
SETUP_SCRIPT = "setup"
TEARDOWN_SCRIPT = "teardown"
SETUP_MARKER = ".cwt_needs_setup"
DEFAULT_SYMLINKS: Tuple[str, ...] = (".env", "node_modules")
ROOT_ENV_VAR = "CWT_ROOT"

# Directories never descended into while looking for nested repositories
SKIP_SCAN_DIRS = frozenset({"node_modules", WORKTREE_DIR, "__pycache__"})

# Runtime defaults
POOL_SIZE = 4
POLL_INTERVAL = 0.1
DEFAULT_COMMAND = "claude"
DEFAULT_SHELL = "/bin/zsh"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("status", "", 3),
    ColumnDefinition("name", "Session", 25),
    ColumnDefinition("branch", "Branch", 25),
    ColumnDefinition("last_commit", "Last Commit", 15),
]


# Symbol constants
SYMBOL_DIRTY = "●"
SYMBOL_CLEAN = " "
SYMBOL_DETACHED = "HEAD"


# TUI colors (color names for Textual / Rich)
TUI_COLORS = {
    "dirty": "yellow",
    "clean": "green",
    "dim": "grey50",
    "accent": "cyan",
    "error": "bold red",
    "key": "white on grey30",
}


# Key hints shown in the footer, per UI mode
KEY_HINTS: Dict[str, List[Tuple[str, str]]] = {
    "normal": [
        ("n", "New"),
        ("/", "Filter"),
        ("Enter", "Resume"),
        ("d", "Delete"),
        ("D", "Force delete"),
        ("r", "Refresh"),
        ("q", "Quit"),
    ],
    "creating": [
        ("Enter", "Confirm"),
        ("Esc", "Cancel"),
    ],
    "filtering": [
        ("Type", "Search"),
        ("Enter", "Select"),
        ("Esc", "Reset"),
    ],
}
