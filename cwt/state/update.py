"""The update step: apply one message to the model, maybe return a command."""

from typing import Optional

from cwt.logging_config import get_logger
from cwt.state.messages import (
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
from cwt.state.model import Mode, Model

logger = get_logger(__name__)

UP_KEYS = ("up", "k")
DOWN_KEYS = ("down", "j")
QUIT_KEYS = ("q", "ctrl+c")


def update(model: Model, message: Message) -> Optional[Command]:
    """Apply a message to the model.

    Processes exactly one message synchronously. Failures are written to
    `model.message`; nothing raises past this function.

    Returns:
        A follow-up command for the orchestrator, or None
    """
    if isinstance(message, Tick):
        return None

    if isinstance(message, KeyPress):
        return handle_key(model, message)

    if isinstance(message, Quit):
        model.quit()
        return None

    if isinstance(message, RefreshList):
        refresh_list(model)
        return StartBackgroundFetch()

    if isinstance(message, CreateWorktree):
        return _create_worktree(model, message)

    if isinstance(message, DeleteWorktree):
        return _delete_worktree(model, message)

    if isinstance(message, ResumeWorktree):
        return SuspendAndResume(worktree=message.worktree)

    if isinstance(message, StatusUpdate):
        if message.generation != model.fetch_generation:
            return None
        target = model.find_worktree_by_path(message.path)
        if target:
            target.dirty = message.dirty
        return None

    if isinstance(message, CommitAgeUpdate):
        if message.generation != model.fetch_generation:
            return None
        target = model.find_worktree_by_path(message.path)
        if target:
            target.last_commit = message.age
        return None

    # StartBackgroundFetch and SuspendAndResume are orchestrator-only
    logger.debug(f"Ignoring message {message!r}")
    return None


def refresh_list(model: Model) -> None:
    """Reload the worktree collection from git."""
    model.refresh_worktrees()


def _create_worktree(model: Model, message: CreateWorktree) -> Optional[Command]:
    repository = model.repository
    if repository is None:
        model.set_message("Error: no repository")
        return None

    try:
        worktree, error = repository.create_worktree(message.name)
    except OSError as e:
        worktree, error = None, str(e)

    if worktree is None:
        model.set_message(f"Error: {(error or 'unknown error').strip()}")
        return None

    refresh_list(model)
    model.set_mode(Mode.NORMAL)
    model.set_filter("")
    # Set last; set_mode resets the message
    model.set_message(f"Created worktree: {message.name}")
    # Enter the new session right away
    return ResumeWorktree(worktree=worktree)


def _delete_worktree(model: Model, message: DeleteWorktree) -> Optional[Command]:
    try:
        result = message.worktree.delete(force=message.force)
    except OSError as e:
        model.set_message(f"Error deleting: {e}. Use 'D' to force delete.")
        return None

    if not result.success:
        model.set_message(f"Error deleting: {result.error}. Use 'D' to force delete.")
        return None

    if result.warning:
        model.set_message(f"Warning: {result.warning}")
    else:
        model.set_message("Deleted worktree")
    refresh_list(model)
    return StartBackgroundFetch()


def handle_key(model: Model, event: KeyPress) -> Optional[Command]:
    """Mode-specific key handling."""
    key = event.key

    if model.mode == Mode.CREATING:
        if key == "enter":
            return CreateWorktree(name=model.input_buffer)
        elif key == "escape":
            model.set_mode(Mode.NORMAL)
        elif key == "backspace":
            model.input_backspace()
        elif len(key) == 1:
            model.input_append(key)
        return None

    if model.mode == Mode.FILTERING:
        if key == "enter":
            worktree = model.selected_worktree()
            if worktree:
                model.set_filter("")
                model.set_mode(Mode.NORMAL)
                return ResumeWorktree(worktree=worktree)
            model.set_mode(Mode.NORMAL)
        elif key == "escape":
            model.set_filter("")
            model.set_mode(Mode.NORMAL)
        elif key == "backspace":
            model.input_backspace()
        elif key in ("down", "ctrl+n"):
            model.move_selection(1)
        elif key in ("up", "ctrl+p"):
            model.move_selection(-1)
        elif len(key) == 1:
            model.input_append(key)
        return None

    # Normal mode
    if key in QUIT_KEYS:
        return Quit()
    elif key in DOWN_KEYS:
        model.move_selection(1)
    elif key in UP_KEYS:
        model.move_selection(-1)
    elif key == "n":
        model.set_mode(Mode.CREATING)
    elif key == "/":
        model.set_mode(Mode.FILTERING)
    elif key in ("d", "D"):
        worktree = model.selected_worktree()
        if worktree:
            return DeleteWorktree(worktree=worktree, force=key == "D")
    elif key == "enter":
        worktree = model.selected_worktree()
        if worktree:
            model.set_filter("")
            return ResumeWorktree(worktree=worktree)
    elif key == "r":
        return RefreshList()
    return None
