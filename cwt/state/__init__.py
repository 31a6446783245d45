"""UI state machine for cwt: the model, its messages and the update step."""

from .messages import (
    Command,
    CommitAgeUpdate,
    CreateWorktree,
    DeleteWorktree,
    KeyPress,
    Message,
    Quit,
    RefreshList,
    ResumeWorktree,
    StartBackgroundFetch,
    StatusUpdate,
    SuspendAndResume,
    Tick,
)
from .model import Mode, Model
from .update import handle_key, refresh_list, update

__all__ = [
    "Command",
    "CommitAgeUpdate",
    "CreateWorktree",
    "DeleteWorktree",
    "KeyPress",
    "Message",
    "Mode",
    "Model",
    "Quit",
    "RefreshList",
    "ResumeWorktree",
    "StartBackgroundFetch",
    "StatusUpdate",
    "SuspendAndResume",
    "Tick",
    "handle_key",
    "refresh_list",
    "update",
]
