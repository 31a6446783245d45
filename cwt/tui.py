"""Interactive TUI for cwt using Textual."""

from contextlib import contextmanager
from typing import Optional

from rich.console import Console
from rich.text import Text
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.widgets import Header, Static

from .__version__ import __version__
from .config import Config
from .constants import COLUMNS
from .core.refresh import RefreshEngine
from .core.worktree import Worktree
from .exceptions import ProcessLaunchError, SetupAborted
from .formatters import (
    format_age,
    format_branch,
    format_key_hints,
    format_message,
    format_name,
    format_status,
)
from .logging_config import get_logger
from .services.process import ProcessRunner, clean_environment
from .state import (
    Command,
    CreateWorktree,
    DeleteWorktree,
    KeyPress,
    Mode,
    Model,
    Quit,
    RefreshList,
    ResumeWorktree,
    StartBackgroundFetch,
    SuspendAndResume,
    Tick,
    refresh_list,
    update,
)
from .ui import WorktreeTable

logger = get_logger(__name__)
console = Console()

# Keys passed through by name; anything else must be a printable character
NAMED_KEYS = frozenset(
    {"up", "down", "enter", "escape", "backspace", "ctrl+c", "ctrl+n", "ctrl+p"}
)
KEY_ALIASES = {"ctrl+h": "backspace", "ctrl+m": "enter"}


def normalize_key(key: str, character: Optional[str]) -> Optional[str]:
    """Map a Textual key event onto the names the update step understands.

    Returns:
        A key name ("enter", "ctrl+n", ...), a single printable character,
        or None for keys the app ignores
    """
    key = KEY_ALIASES.get(key, key)
    if key in NAMED_KEYS:
        return key
    if character and len(character) == 1 and character.isprintable():
        return character
    return None


class CwtApp(App):
    """Worktree session manager.

    The app owns the event loop: keys and timer ticks become messages for
    `update`, and the commands it returns are carried out here.
    """

    TITLE = "CWT"
    SUB_TITLE = f"v{__version__}"

    CSS = """
    Screen {
        background: $surface;
    }

    WorktreeTable {
        height: 1fr;
        border: round $accent;
    }

    #input-box {
        height: auto;
        border: round $primary;
        padding: 0 1;
    }

    #status-bar {
        dock: bottom;
        height: auto;
        background: $panel;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        model: Model,
        engine: RefreshEngine,
        config: Optional[Config] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        super().__init__()
        self.model = model
        self.engine = engine
        self.config = config or Config()
        self.runner = runner or ProcessRunner()
        self._snapshot = None

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header(show_clock=False, icon="")
        yield WorktreeTable(id="worktree-table", cursor_type="row", zebra_stripes=False)
        yield Static(id="input-box")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        table = self.query_one(WorktreeTable)
        for col in COLUMNS:
            table.add_column(col.label, width=col.width or None, key=col.key)

        self.perform(update(self.model, RefreshList()))
        self.set_interval(self.config.poll_interval, self._poll)
        self.render_model()

    # Event sources

    def on_key(self, event) -> None:
        key = normalize_key(event.key, event.character)
        if key is None:
            return
        event.stop()
        event.prevent_default()

        self.perform(update(self.model, KeyPress(key)))
        self.render_model()

    def _poll(self) -> None:
        if not self.model.running:
            return
        self.engine.drain(self.model)
        self.perform(update(self.model, Tick()))
        self.render_model()

    def action_quit(self) -> None:
        self.perform(Quit())

    def action_help_quit(self) -> None:
        # ctrl+c arrives through on_key as a quit key
        pass

    # Commands

    def perform(self, command: Optional[Command]) -> None:
        """Carry out a command and every follow-up it produces.

        A command that fails outside the update step ends the chain and is
        reported in the status bar.
        """
        while command is not None:
            try:
                command = self._execute(command)
            except (SuspendNotSupported, OSError) as e:
                logger.error(f"{type(command).__name__} failed: {e}")
                self.model.set_message(f"Error: {e}")
                return

    def _execute(self, command: Command) -> Optional[Command]:
        if isinstance(command, Quit):
            update(self.model, command)
            self.engine.close()
            self.exit()
            return None

        if isinstance(command, StartBackgroundFetch):
            self.engine.start(self.model)
            return None

        if isinstance(command, DeleteWorktree):
            # Teardown scripts write to the terminal
            with self._suspended():
                return update(self.model, command)

        if isinstance(command, (CreateWorktree, RefreshList, ResumeWorktree)):
            return update(self.model, command)

        if isinstance(command, SuspendAndResume):
            self._suspend_and_resume(command.worktree)
            refresh_list(self.model)
            return StartBackgroundFetch()

        logger.warning(f"Unhandled command: {command!r}")
        return None

    @contextmanager
    def _suspended(self):
        with self.suspend():
            console.clear()
            yield

    def _suspend_and_resume(self, worktree: Worktree) -> None:
        """Hand the terminal to the session command inside the worktree."""
        with self._suspended():
            if worktree.needs_setup():
                try:
                    worktree.run_setup(visible=True)
                except SetupAborted:
                    console.print("\n[yellow]Setup aborted.[/yellow]")
                    self.model.set_message("Setup aborted")
                    return
                worktree.mark_setup_complete()

            console.print(f"Launching [bold]{self.config.command}[/bold] in {worktree.path}...")
            try:
                returncode = self.runner.run_attached(
                    self.config.command_argv,
                    cwd=worktree.path,
                    env=clean_environment(),
                    replace_env=True,
                )
            except ProcessLaunchError as e:
                logger.error(str(e))
                console.print(f"[red]Error: {e}[/red]")
                self._wait_for_enter()
                self.model.set_message(f"Error: {e}")
                return

            logger.info(f"{self.config.command} exited with {returncode} in {worktree.path}")
            self.model.resume_to = worktree

    def _wait_for_enter(self) -> None:
        try:
            console.input("Press Enter to return...")
        except (KeyboardInterrupt, EOFError):
            pass

    # Rendering

    def render_model(self) -> None:
        """Redraw the widgets when the visible state changed since the last call."""
        model = self.model
        visible = model.visible_worktrees()
        snapshot = (
            tuple((wt.path, wt.branch, wt.dirty, wt.last_commit) for wt in visible),
            model.selection_index,
            model.mode,
            model.filter_query,
            model.input_buffer,
            model.message,
        )
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot

        self._render_table(visible)
        self._render_input()
        self._render_status()

    def _render_table(self, visible) -> None:
        model = self.model
        table = self.query_one(WorktreeTable)
        table.clear()
        for wt in visible:
            table.add_row(
                format_status(wt.dirty),
                format_name(wt.name),
                format_branch(wt.branch),
                format_age(wt.last_commit),
                key=wt.path,
            )
        if visible:
            table.move_cursor(row=model.selection_index)

        if model.mode == Mode.FILTERING or model.filter_query:
            table.border_title = f"FILTERING: {model.filter_query}"
        else:
            table.border_title = "SESSIONS"

    def _render_input(self) -> None:
        box = self.query_one("#input-box", Static)
        box.display = self.model.mode == Mode.CREATING
        if box.display:
            box.border_title = "NEW SESSION"
            box.update(Text.assemble(self.model.input_buffer, ("▏", "bold")))

    def _render_status(self) -> None:
        status = self.query_one("#status-bar", Static)
        status.update(
            Text.assemble(
                format_message(self.model.message),
                "\n",
                format_key_hints(self.model.mode.value),
            )
        )
