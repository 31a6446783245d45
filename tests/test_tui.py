"""Tests for TUI key normalization and command handling"""
from contextlib import contextmanager, nullcontext
from pathlib import Path
from unittest.mock import Mock

import pytest
from textual.app import SuspendNotSupported

from cwt.config import Config
from cwt.core.refresh import RefreshEngine
from cwt.core.worktree import Worktree
from cwt.exceptions import ProcessLaunchError
from cwt.models.worktree import DeleteResult
from cwt.state import CreateWorktree, DeleteWorktree, Model, ResumeWorktree
from cwt.tui import CwtApp, normalize_key


class TestNormalizeKey:
    """Test mapping Textual key events to update keys."""

    @pytest.mark.parametrize("key,character,expected", [
        ("j", "j", "j"),
        ("D", "D", "D"),
        ("slash", "/", "/"),
        ("exclamation_mark", "!", "!"),
        ("space", " ", " "),
        ("enter", "\r", "enter"),
        ("escape", "\x1b", "escape"),
        ("backspace", "\x08", "backspace"),
        ("ctrl+h", "\x08", "backspace"),
        ("ctrl+c", "\x03", "ctrl+c"),
        ("ctrl+n", "\x0e", "ctrl+n"),
        ("up", None, "up"),
        ("down", None, "down"),
    ])
    def test_known_keys(self, key, character, expected):
        """Test named keys and printable characters."""
        assert normalize_key(key, character) == expected

    @pytest.mark.parametrize("key,character", [
        ("tab", "\t"),
        ("f1", None),
        ("ctrl+x", "\x18"),
        ("left", None),
    ])
    def test_ignored_keys(self, key, character):
        """Test that keys without a meaning are dropped."""
        assert normalize_key(key, character) is None


@pytest.fixture
def tui_console(monkeypatch):
    """Silence the console the app prints to while suspended."""
    console = Mock()
    monkeypatch.setattr("cwt.tui.console", console)
    return console


@pytest.fixture
def app(repository, mock_runner, tui_console, quiet_console, monkeypatch):
    """An app that is never started, with the terminal hand-off stubbed out."""
    model = Model([repository])
    model.refresh_worktrees()
    engine = Mock(spec=RefreshEngine)
    app = CwtApp(model, engine, config=Config(command="session --resume"), runner=mock_runner)
    monkeypatch.setattr(app, "_suspended", nullcontext)
    return app


class TestOrchestrator:
    """Test how the app carries out commands."""

    def test_create_chains_to_resume(self, app, mock_runner):
        """Test that a new worktree is set up and entered right away."""
        app.perform(CreateWorktree("demo"))

        worktree = app.model.resume_to
        assert worktree is not None
        assert worktree.name == "demo"
        assert not worktree.needs_setup()
        assert app.model.message == "Created worktree: demo"
        assert "demo" in [wt.name for wt in app.model.worktrees]

        argv = mock_runner.run_attached.call_args.args[0]
        kwargs = mock_runner.run_attached.call_args.kwargs
        assert argv == ["session", "--resume"]
        assert kwargs["cwd"] == worktree.path
        assert kwargs["replace_env"] is True
        app.engine.start.assert_called_once_with(app.model)

    def test_resume_records_worktree(self, app, mock_runner):
        """Test that a successful launch records where to hand off on exit."""
        main = app.model.worktrees[0]
        app.perform(ResumeWorktree(main))

        assert app.model.resume_to is main
        mock_runner.run_attached.assert_called_once()
        app.engine.start.assert_called_once_with(app.model)

    def test_aborted_setup_skips_launch(self, app, repository, mock_runner, make_script, quiet_console):
        """Test that cancelling at the setup prompt leaves the worktree untouched."""
        worktree, error = repository.create_worktree("demo")
        assert error is None
        make_script(Path(repository.setup_script_path), "exit 1")
        quiet_console.input.side_effect = KeyboardInterrupt

        app.perform(ResumeWorktree(worktree))

        assert worktree.needs_setup()
        assert app.model.resume_to is None
        assert app.model.message == "Setup aborted"
        mock_runner.run_attached.assert_not_called()
        # The list is still reloaded afterwards
        app.engine.start.assert_called_once_with(app.model)

    def test_launch_error(self, app, mock_runner, tui_console):
        """Test that a command that cannot start is reported, not recorded."""
        mock_runner.run_attached.side_effect = ProcessLaunchError(["session"], "not found")

        app.perform(ResumeWorktree(app.model.worktrees[0]))

        assert app.model.resume_to is None
        assert app.model.message == "Error: Could not run 'session': not found"
        tui_console.input.assert_called_once()

    def test_delete_runs_while_suspended(self, app, monkeypatch):
        """Test that deletion happens with the terminal handed over."""
        events = []

        @contextmanager
        def recording():
            events.append("suspend")
            yield
            events.append("resume")

        def delete(force):
            events.append(f"delete force={force}")
            return DeleteResult(success=True)

        monkeypatch.setattr(app, "_suspended", recording)
        worktree = Mock(spec=Worktree)
        worktree.delete.side_effect = delete

        app.perform(DeleteWorktree(worktree, force=True))

        assert events == ["suspend", "delete force=True", "resume"]
        assert app.model.message == "Deleted worktree"
        app.engine.start.assert_called_once_with(app.model)

    def test_suspend_not_supported(self, app, mock_runner, monkeypatch):
        """Test that a terminal that cannot be handed over is reported."""
        def unsupported():
            raise SuspendNotSupported("App.suspend is not supported in this environment.")

        monkeypatch.setattr(app, "_suspended", unsupported)

        app.perform(ResumeWorktree(app.model.worktrees[0]))

        assert app.model.message == "Error: App.suspend is not supported in this environment."
        assert app.model.resume_to is None
        mock_runner.run_attached.assert_not_called()

    def test_setup_os_error(self, app, mock_runner):
        """Test that a filesystem error during setup is reported."""
        worktree = Mock(spec=Worktree)
        worktree.path = "/repo/.worktrees/broken"
        worktree.needs_setup.return_value = True
        worktree.run_setup.side_effect = PermissionError("Permission denied")

        app.perform(ResumeWorktree(worktree))

        assert app.model.message == "Error: Permission denied"
        assert app.model.resume_to is None
        mock_runner.run_attached.assert_not_called()
