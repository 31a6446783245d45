"""Application state owned by the UI loop."""

from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence

from cwt.utils.paths import normalize_path

if TYPE_CHECKING:
    from cwt.core.repository import Repository
    from cwt.core.worktree import Worktree


class Mode(Enum):
    """UI mode."""
    NORMAL = "normal"
    CREATING = "creating"
    FILTERING = "filtering"


class Model:
    """All mutable application state.

    Only the UI loop touches a Model; background workers talk to it through
    result messages, so it needs no locking.
    """

    def __init__(self, repositories: Optional[Sequence["Repository"]] = None):
        self.repositories: List["Repository"] = list(repositories or [])
        self._worktrees: List["Worktree"] = []
        self.selection_index = 0
        self.mode = Mode.NORMAL
        self.input_buffer = ""
        self.filter_query = ""
        self.message = "Welcome to CWT"
        self.running = True
        self.fetch_generation = 0
        self.resume_to: Optional["Worktree"] = None

    @property
    def repository(self) -> Optional["Repository"]:
        """The primary repository, where new worktrees are created."""
        return self.repositories[0] if self.repositories else None

    @property
    def worktrees(self) -> List["Worktree"]:
        return self._worktrees

    def refresh_worktrees(self) -> List["Worktree"]:
        """Reload worktrees from every repository, keeping git's order."""
        worktrees: List["Worktree"] = []
        for repository in self.repositories:
            worktrees.extend(repository.worktrees())
        self.update_worktrees(worktrees)
        return self._worktrees

    def update_worktrees(self, worktrees: Sequence["Worktree"]) -> None:
        self._worktrees = list(worktrees)
        self._clamp_selection()

    def find_worktree_by_path(self, path: str) -> Optional["Worktree"]:
        normalized = normalize_path(path)
        for worktree in self._worktrees:
            if worktree.path == normalized or normalize_path(worktree.path) == normalized:
                return worktree
        return None

    def visible_worktrees(self) -> List["Worktree"]:
        """Worktrees whose path or branch contains the filter query."""
        if not self.filter_query:
            return list(self._worktrees)
        query = self.filter_query
        return [
            wt for wt in self._worktrees
            if query in wt.path or (wt.branch is not None and query in wt.branch)
        ]

    def selected_worktree(self) -> Optional["Worktree"]:
        visible = self.visible_worktrees()
        if 0 <= self.selection_index < len(visible):
            return visible[self.selection_index]
        return None

    def increment_generation(self) -> int:
        self.fetch_generation += 1
        return self.fetch_generation

    def move_selection(self, delta: int) -> None:
        """Move the selection, ignoring moves past either end."""
        count = len(self.visible_worktrees())
        if count == 0:
            self.selection_index = 0
            return

        new_index = self.selection_index + delta
        if 0 <= new_index < count:
            self.selection_index = new_index

    def set_mode(self, mode: Mode) -> None:
        self.mode = mode
        if mode == Mode.CREATING:
            self.input_buffer = ""
            self.message = "Enter session name: "
        elif mode == Mode.FILTERING:
            # The existing query is kept so it can be edited
            self.message = "Filter: "
        else:
            self.message = "Ready"

    def set_filter(self, query: str) -> None:
        self.filter_query = query
        self.selection_index = 0

    def input_append(self, char: str) -> None:
        if self.mode == Mode.FILTERING:
            self.set_filter(self.filter_query + char)
        else:
            self.input_buffer += char

    def input_backspace(self) -> None:
        if self.mode == Mode.FILTERING:
            self.set_filter(self.filter_query[:-1])
        else:
            self.input_buffer = self.input_buffer[:-1]

    def set_message(self, message: str) -> None:
        self.message = message

    def quit(self) -> None:
        self.running = False

    def _clamp_selection(self) -> None:
        count = len(self.visible_worktrees())
        if count == 0:
            self.selection_index = 0
        elif self.selection_index >= count:
            self.selection_index = count - 1
