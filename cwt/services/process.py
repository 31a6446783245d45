"""Process execution for hooks and foreground sessions."""

import os
import signal
import subprocess
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from cwt.exceptions import ProcessLaunchError
from cwt.logging_config import get_logger

logger = get_logger(__name__)

# Exit status reported when a command could not be started at all
NOT_STARTED = 127


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of a finished process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


def _merged_env(
    env: Optional[Mapping[str, str]], base: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    merged = dict(os.environ if base is None else base)
    if env:
        merged.update(env)
    return merged


@contextmanager
def _interrupts_deferred():
    """Let Ctrl+C reach the foreground child without interrupting us.

    A Python-level handler (unlike SIG_IGN) is reset to the default in the child on exec.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGINT, lambda signum, frame: None)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def clean_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return the environment without this tool's own virtualenv.

    A session launched in a worktree should see the user's environment, not the
    interpreter cwt happens to be installed in.
    """
    env = dict(os.environ if environ is None else environ)
    venv = env.get("VIRTUAL_ENV")
    in_venv = sys.prefix != sys.base_prefix
    if venv and in_venv and os.path.realpath(venv) == os.path.realpath(sys.prefix):
        env.pop("VIRTUAL_ENV", None)
        env.pop("VIRTUAL_ENV_PROMPT", None)
        venv_bin = os.path.join(venv, "bin")
        path = [p for p in env.get("PATH", "").split(os.pathsep) if p and p != venv_bin]
        env["PATH"] = os.pathsep.join(path)
        env.pop("PYTHONHOME", None)
        env.pop("PYTHONPATH", None)
    env.pop("__PYVENV_LAUNCHER__", None)
    return env


class ProcessRunner:
    """Runs external commands with a working directory and environment overrides."""

    def capture(
        self,
        argv: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> ProcessResult:
        """Run a command detached from the terminal and capture its output.

        Args:
            argv: Command and arguments
            cwd: Working directory
            env: Variables added on top of the current environment

        Returns:
            ProcessResult; a command that cannot be started reports exit 127
        """
        try:
            completed = subprocess.run(
                list(argv),
                cwd=cwd,
                env=_merged_env(env),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            logger.warning(f"Could not start {argv[0]}: {e}")
            return ProcessResult(NOT_STARTED, "", str(e))

        logger.debug(f"{' '.join(argv)} exited with {completed.returncode}")
        return ProcessResult(completed.returncode, completed.stdout, completed.stderr)

    def run_attached(
        self,
        argv: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        replace_env: bool = False,
    ) -> int:
        """Run a command attached to the terminal, inheriting stdio.

        Args:
            argv: Command and arguments
            cwd: Working directory
            env: Variables added on top of the current environment
            replace_env: Use `env` as the complete environment instead

        Returns:
            The exit status

        Raises:
            ProcessLaunchError: If the command cannot be started
        """
        full_env: Dict[str, str]
        if replace_env:
            full_env = dict(env or {})
        else:
            full_env = _merged_env(env)

        try:
            with _interrupts_deferred():
                completed = subprocess.run(list(argv), cwd=cwd, env=full_env)
        except OSError as e:
            raise ProcessLaunchError(list(argv), str(e)) from e

        logger.debug(f"{' '.join(argv)} exited with {completed.returncode}")
        return completed.returncode
