"""Tests for Config"""
import pytest

from cwt.config import Config
from cwt.constants import DEFAULT_COMMAND, DEFAULT_SHELL, POLL_INTERVAL, POOL_SIZE


class TestConfigDefaults:
    """Test default values."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        monkeypatch.delenv("CWT_COMMAND", raising=False)
        config = Config()
        assert config.command == DEFAULT_COMMAND
        assert config.workers == POOL_SIZE == 4
        assert config.poll_interval == POLL_INTERVAL
        assert config.nested is True
        assert config.nested_depth == 3
        assert config.exec_shell is True

    def test_command_from_environment(self, monkeypatch):
        """Test that CWT_COMMAND overrides the default command."""
        monkeypatch.setenv("CWT_COMMAND", "aider --yes")
        assert Config().command_argv == ["aider", "--yes"]

    def test_shell_path(self, monkeypatch):
        """Test the shell fallback chain."""
        monkeypatch.delenv("SHELL", raising=False)
        assert Config().shell_path == DEFAULT_SHELL
        monkeypatch.setenv("SHELL", "/bin/bash")
        assert Config().shell_path == "/bin/bash"
        assert Config(shell="/usr/bin/fish").shell_path == "/usr/bin/fish"


class TestConfigValidation:
    """Test validation in __post_init__."""

    @pytest.mark.parametrize("command", ["", "   "])
    def test_empty_command(self, command):
        """Test that a blank command is rejected."""
        with pytest.raises(ValueError, match="command cannot be empty"):
            Config(command=command)

    def test_command_is_stripped(self):
        """Test surrounding whitespace is removed."""
        assert Config(command="  claude  ").command == "claude"

    @pytest.mark.parametrize("workers", [0, -1])
    def test_invalid_workers(self, workers):
        """Test that workers must be positive."""
        with pytest.raises(ValueError, match="workers must be positive"):
            Config(workers=workers)

    def test_invalid_poll_interval(self):
        """Test that poll_interval must be positive."""
        with pytest.raises(ValueError, match="poll_interval must be positive"):
            Config(poll_interval=0)

    def test_negative_depth(self):
        """Test that nested_depth cannot be negative."""
        with pytest.raises(ValueError, match="nested_depth cannot be negative"):
            Config(nested_depth=-1)


class TestConfigConversion:
    """Test dictionary conversion."""

    def test_round_trip_ignores_unknown_keys(self):
        """Test from_dict drops keys that are not fields."""
        config = Config.from_dict({"command": "codex", "workers": 2, "colour": "blue"})
        assert config.command == "codex"
        assert config.workers == 2
        assert config.to_dict()["workers"] == 2
        assert config.get("colour", "none") == "none"
