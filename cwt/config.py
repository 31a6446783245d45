"""Configuration handling for cwt"""

import os
import shlex
from dataclasses import dataclass, field
from typing import List, Optional

from cwt.constants import DEFAULT_COMMAND, DEFAULT_SHELL, POLL_INTERVAL, POOL_SIZE


def _default_command() -> str:
    return os.environ.get("CWT_COMMAND") or DEFAULT_COMMAND


@dataclass
class Config:
    """Configuration for cwt with validation."""

    # Session launched inside a worktree on resume
    command: str = field(default_factory=_default_command)

    # Background refresh
    workers: int = POOL_SIZE
    poll_interval: float = POLL_INTERVAL

    # Repository discovery
    nested: bool = True
    nested_depth: int = 3

    # Exit hand-off
    exec_shell: bool = True
    shell: Optional[str] = None

    # Diagnostics
    verbose: bool = False
    debug: bool = False
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_command()
        self._validate_workers()
        self._validate_poll_interval()
        self._validate_nested_depth()

    def _validate_command(self):
        """Validate command is a non-empty argument vector."""
        if not self.command or not self.command.strip():
            raise ValueError("command cannot be empty")
        self.command = self.command.strip()

    def _validate_workers(self):
        """Validate workers is positive."""
        if self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def _validate_poll_interval(self):
        """Validate poll_interval is positive."""
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")

    def _validate_nested_depth(self):
        """Validate nested_depth is not negative."""
        if self.nested_depth < 0:
            raise ValueError(f"nested_depth cannot be negative, got {self.nested_depth}")

    @property
    def command_argv(self) -> List[str]:
        """The resume command split into an argument vector."""
        return shlex.split(self.command)

    @property
    def shell_path(self) -> str:
        """Shell used for the exit hand-off."""
        return self.shell or os.environ.get("SHELL") or DEFAULT_SHELL

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "command": self.command,
            "workers": self.workers,
            "poll_interval": self.poll_interval,
            "nested": self.nested,
            "nested_depth": self.nested_depth,
            "exec_shell": self.exec_shell,
            "shell": self.shell,
            "verbose": self.verbose,
            "debug": self.debug,
            "log_file": self.log_file,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
