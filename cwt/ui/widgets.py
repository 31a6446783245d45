"""Custom widgets for the cwt TUI."""

from textual.widgets import DataTable


class WorktreeTable(DataTable):
    """Worktree list whose cursor follows the model's selection.

    It never takes focus, so every key reaches the app's key handler.
    """

    can_focus = False
