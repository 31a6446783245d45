"""Worktree row formatting utilities."""

from typing import Optional

from rich.text import Text

from cwt.constants import KEY_HINTS, SYMBOL_CLEAN, SYMBOL_DETACHED, SYMBOL_DIRTY, TUI_COLORS


def format_status(dirty: Optional[bool]) -> Text:
    """Status icon: a dot for uncommitted changes, blank when clean or unknown."""
    if dirty:
        return Text(SYMBOL_DIRTY, style=TUI_COLORS["dirty"], justify="center")
    return Text(SYMBOL_CLEAN, style=TUI_COLORS["clean"], justify="center")


def format_name(name: str) -> Text:
    return Text(name, style="bold")


def format_branch(branch: Optional[str]) -> Text:
    """Branch name, or HEAD for a detached worktree."""
    return Text(branch or SYMBOL_DETACHED, style=TUI_COLORS["dim"])


def format_age(last_commit: Optional[str]) -> Text:
    """Relative commit age, blank until fetched."""
    return Text(last_commit or "", style=TUI_COLORS["accent"], justify="right")


def is_alert(message: str) -> bool:
    lowered = message.lower()
    return "error" in lowered or "warning" in lowered


def format_message(message: str) -> Text:
    """Status line, in red when it reports an error or a warning."""
    style = TUI_COLORS["error"] if is_alert(message) else TUI_COLORS["accent"]
    return Text(message, style=style)


def format_key_hints(mode: str) -> Text:
    """Key hints for a UI mode ("normal", "creating" or "filtering")."""
    text = Text()
    for key, description in KEY_HINTS.get(mode, []):
        text.append(f" {key} ", style=TUI_COLORS["key"])
        text.append(f" {description} ", style=TUI_COLORS["dim"])
    return text
