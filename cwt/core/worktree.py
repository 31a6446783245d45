"""A single git worktree and its lifecycle."""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from rich.console import Console

from cwt.constants import DEFAULT_SYMLINKS, ROOT_ENV_VAR, SETUP_MARKER
from cwt.exceptions import ProcessLaunchError, SetupAborted
from cwt.logging_config import get_logger
from cwt.models.worktree import DeleteResult, TeardownResult
from cwt.services.git_service import probe_status

if TYPE_CHECKING:
    from cwt.core.repository import Repository

console = Console()
logger = get_logger(__name__)

UNMERGED_WARNING = "Worktree removed, but branch kept (unmerged). Use 'D' to force."
TEARDOWN_FAILED = "Teardown script failed. Use 'D' to force delete."


@dataclass(eq=False)
class Worktree:
    """One worktree of a repository.

    `dirty` and `last_commit` stay None until the first background refresh
    reports them.
    """

    repository: "Repository" = field(repr=False)
    path: str
    branch: Optional[str] = None  # None = detached HEAD
    sha: Optional[str] = None
    dirty: Optional[bool] = None
    last_commit: Optional[str] = None

    def __post_init__(self):
        self.path = os.path.abspath(os.path.expanduser(self.path))

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def setup_marker_path(self) -> str:
        return os.path.join(self.path, SETUP_MARKER)

    def exists(self) -> bool:
        return os.path.isdir(self.path)

    # Setup marker

    def needs_setup(self) -> bool:
        return os.path.exists(self.setup_marker_path)

    def mark_needs_setup(self) -> None:
        with open(self.setup_marker_path, "a"):
            pass

    def mark_setup_complete(self) -> None:
        try:
            os.remove(self.setup_marker_path)
        except FileNotFoundError:
            pass

    # Hooks

    def _hook_env(self) -> Dict[str, str]:
        return {ROOT_ENV_VAR: self.repository.canonical_root()}

    def run_setup(self, visible: bool = True) -> bool:
        """Run .cwt/setup, or link the default entries when there is no script.

        Args:
            visible: Show a banner and the script output, and ask whether to
                continue when the script fails

        Returns:
            True if setup succeeded (or the user chose to continue)

        Raises:
            SetupAborted: If the user cancels at the failure prompt
        """
        if self.repository.has_setup_script():
            return self._run_custom_setup(visible=visible)
        self._setup_default_symlinks()
        return True

    def _run_custom_setup(self, visible: bool) -> bool:
        script = self.repository.setup_script_path
        runner = self.repository.runner

        if not visible:
            result = runner.capture([script], cwd=self.path, env=self._hook_env())
            if not result.success:
                logger.warning(f"Setup failed in {self.path} (exit {result.returncode})")
            return result.success

        console.print("[bold cyan]=== Running .cwt/setup ===[/bold cyan]")
        console.print()
        try:
            returncode = runner.run_attached([script], cwd=self.path, env=self._hook_env())
        except ProcessLaunchError as e:
            logger.error(str(e))
            console.print(f"[red]{e}[/red]")
            returncode = 127
        console.print()

        if returncode == 0:
            return True

        console.print(
            f"[bold yellow]Warning: .cwt/setup failed (exit code: {returncode})[/bold yellow]"
        )
        try:
            console.input("Press Enter to continue or Ctrl+C to abort...")
        except (KeyboardInterrupt, EOFError):
            raise SetupAborted(self.path)
        return False

    def _setup_default_symlinks(self) -> None:
        for entry in DEFAULT_SYMLINKS:
            source = os.path.join(self.repository.root, entry)
            target = os.path.join(self.path, entry)

            if os.path.exists(source) and not os.path.lexists(target):
                os.symlink(source, target)
                logger.debug(f"Linked {target} -> {source}")

    def run_teardown(self) -> TeardownResult:
        """Run .cwt/teardown if the repository has one."""
        if not self.repository.has_teardown_script():
            return TeardownResult(ran=False)

        console.print("[bold cyan]=== Running .cwt/teardown ===[/bold cyan]")
        console.print()
        try:
            returncode = self.repository.runner.run_attached(
                [self.repository.teardown_script_path], cwd=self.path, env=self._hook_env()
            )
        except ProcessLaunchError as e:
            logger.error(str(e))
            returncode = 127
        console.print()

        return TeardownResult(ran=True, success=returncode == 0)

    # Deletion

    def delete(self, force: bool = False) -> DeleteResult:
        """Tear down, remove the worktree, then delete its branch.

        Args:
            force: Ignore a failing teardown, remove a dirty worktree and
                delete an unmerged branch

        Returns:
            DeleteResult; success with a warning means the branch was kept
        """
        if self.exists():
            teardown = self.run_teardown()
            if teardown.ran and not teardown.success and not force:
                return DeleteResult(success=False, error=TEARDOWN_FAILED)

        self._cleanup_symlinks()

        if self.exists():
            removed, error = self.repository.git.remove_worktree(self.path, force=force)
            if not removed:
                return DeleteResult(success=False, error=error)
        else:
            # Directory deleted outside git; drop the stale registration
            self.repository.prune_worktrees()

        return self._delete_branch(force=force)

    def _cleanup_symlinks(self) -> None:
        for entry in DEFAULT_SYMLINKS:
            target = os.path.join(self.path, entry)
            try:
                if os.path.islink(target):
                    os.remove(target)
            except OSError as e:
                logger.debug(f"Could not remove {target}: {e}")

    def _delete_branch(self, force: bool) -> DeleteResult:
        if not self.branch:
            return DeleteResult(success=True)

        deleted, stderr = self.repository.git.delete_branch(self.branch, force=force)
        if deleted or "not found" in stderr:
            return DeleteResult(success=True)

        if force:
            return DeleteResult(
                success=False,
                error=f"Worktree removed, but branch delete failed: {stderr.strip()}",
            )

        if "not fully merged" in stderr:
            return DeleteResult(success=True, warning=UNMERGED_WARNING)
        return DeleteResult(
            success=True,
            warning=f"Worktree removed, but branch kept ({stderr.strip()}). Use 'D' to force.",
        )

    # Status

    def fetch_status(self) -> bool:
        """Check for uncommitted changes and store the dirty flag.

        Any git failure reads as clean so a transient error never reaches the UI.
        """
        self.dirty = probe_status(self.path).dirty_or_clean()
        return self.dirty
