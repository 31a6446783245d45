"""Messages consumed by the update step and commands it produces.

Every variant is an immutable dataclass carrying only its own fields. Commands
are messages too: the orchestrator feeds most of them back into `update`.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from cwt.core.worktree import Worktree


# Input and timer events


@dataclass(frozen=True)
class KeyPress:
    """A key, either a single printable character or a name like "enter"."""

    key: str


@dataclass(frozen=True)
class Tick:
    """Timer tick; only drives the redraw cadence."""


# Background results, stamped with the refresh generation they belong to


@dataclass(frozen=True)
class StatusUpdate:
    path: str
    dirty: bool
    generation: int


@dataclass(frozen=True)
class CommitAgeUpdate:
    path: str
    age: str
    generation: int


# Commands


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class CreateWorktree:
    name: str


@dataclass(frozen=True)
class DeleteWorktree:
    worktree: "Worktree"
    force: bool = False


@dataclass(frozen=True)
class ResumeWorktree:
    worktree: "Worktree"


@dataclass(frozen=True)
class RefreshList:
    pass


@dataclass(frozen=True)
class StartBackgroundFetch:
    pass


@dataclass(frozen=True)
class SuspendAndResume:
    worktree: "Worktree"


# `None` is the no-op command
Command = Union[
    Quit,
    CreateWorktree,
    DeleteWorktree,
    ResumeWorktree,
    RefreshList,
    StartBackgroundFetch,
    SuspendAndResume,
]

Message = Union[KeyPress, Tick, StatusUpdate, CommitAgeUpdate, Command]
