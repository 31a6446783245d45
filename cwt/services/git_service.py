"""Git command service for cwt."""

import os
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import git

from cwt.models.worktree import StatusProbe, WorktreeRecord
from cwt.logging_config import get_logger

logger = get_logger(__name__)

GitOutput = Tuple[int, str, str]


def _execute(argv: Sequence[str]) -> GitOutput:
    """Run a git command through GitPython without raising on a non-zero exit.

    Returns:
        Tuple of (exit status, stdout, stderr)
    """
    try:
        return git.Git().execute(list(argv), with_extended_output=True, with_exceptions=False)
    except git.exc.GitCommandNotFound as e:
        return 127, "", str(e)


def git_common_dir(path: str) -> Optional[str]:
    """Resolve the shared git directory for any path inside a repository or worktree.

    Args:
        path: Directory to start from

    Returns:
        Absolute path of the common git directory, or None outside a repository
    """
    if not os.path.isdir(path):
        return None
    status, stdout, stderr = _execute(
        ["git", "-C", path, "rev-parse", "--path-format=absolute", "--git-common-dir"]
    )
    if status != 0:
        logger.debug(f"Not a git repository: {path} ({stderr.strip()})")
        return None
    common_dir = stdout.strip()
    return common_dir or None


def configured_worktree(git_dir: str) -> Optional[str]:
    """Working tree recorded in a git directory's core.worktree, if any.

    Submodules keep their git directory under the superproject's
    .git/modules/ and point back to their checkout this way.
    """
    status, stdout, _ = _execute(
        ["git", "--git-dir", git_dir, "config", "--get", "core.worktree"]
    )
    value = stdout.strip()
    if status != 0 or not value:
        return None
    return os.path.normpath(os.path.join(git_dir, value))


def parse_porcelain(output: str) -> List[WorktreeRecord]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    A record without a `branch` line is a detached HEAD. The last record is
    kept even when the output has no trailing blank line.
    """
    records: List[WorktreeRecord] = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            records.append(
                WorktreeRecord(
                    path=current["path"],
                    branch=current.get("branch"),
                    sha=current.get("sha"),
                )
            )
        current.clear()

    for raw_line in output.splitlines():
        line = raw_line.strip()

        if not line:
            # Empty line marks end of worktree entry
            flush()
            continue

        if line.startswith("worktree "):
            # A new record without a separating blank line still starts fresh
            flush()
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["sha"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = branch_ref
        elif line == "detached":
            current["branch"] = None

    # Handle last entry if no trailing blank line
    flush()
    return records


def probe_status(path: str) -> StatusProbe:
    """Check a worktree for uncommitted changes.

    Never raises: any failure is returned as the error variant.
    --no-optional-locks keeps git from taking the index lock.
    """
    try:
        status, stdout, stderr = _execute(
            ["git", "--no-optional-locks", "-C", path, "status", "--porcelain"]
        )
    except Exception as e:
        return StatusProbe(error=str(e))

    if status != 0:
        return StatusProbe(error=stderr.strip() or f"git status exited with {status}")
    return StatusProbe(dirty=bool(stdout.strip()))


class GitService:
    """Git commands run against one repository root."""

    def __init__(self, repo_path: str):
        """Initialize the git service.

        Args:
            repo_path: Path to the git repository root
        """
        self.repo_path = repo_path

    def _run(self, *args: str) -> GitOutput:
        return _execute(["git", "-C", self.repo_path, *args])

    def list_worktrees(self) -> List[WorktreeRecord]:
        """List all worktrees registered with the repository.

        Returns:
            Records in git's listing order; empty if the command fails
        """
        status, stdout, stderr = self._run("worktree", "list", "--porcelain")
        if status != 0:
            logger.debug(f"Could not list worktrees: {stderr.strip()}")
            return []

        records = parse_porcelain(stdout)
        logger.debug(f"Found {len(records)} worktrees")
        for record in records:
            logger.debug(f"  {record}")
        return records

    def add_worktree(self, path: str, branch: str) -> Tuple[bool, Optional[str]]:
        """Create a worktree at `path` on a new branch.

        Returns:
            Tuple of (success, error_message). error_message is git's raw stderr.
        """
        status, _stdout, stderr = self._run("worktree", "add", "-b", branch, path)
        if status != 0:
            logger.error(f"Failed to add worktree at {path}: {stderr.strip()}")
            return False, stderr
        logger.info(f"Added worktree at {path} on branch {branch}")
        return True, None

    def remove_worktree(self, path: str, force: bool = False) -> Tuple[bool, Optional[str]]:
        """Remove a worktree registration and its directory.

        Returns:
            Tuple of (success, error_message). error_message is trimmed stderr.
        """
        args = ["worktree", "remove", path]
        if force:
            args.append("--force")

        status, _stdout, stderr = self._run(*args)
        if status != 0:
            error_msg = stderr.strip() or f"git worktree remove failed with exit code {status}"
            logger.error(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg

        logger.info(f"Removed worktree at {path}")
        return True, None

    def delete_branch(self, name: str, force: bool = False) -> Tuple[bool, str]:
        """Delete a local branch with `-d`, or `-D` when forced.

        Returns:
            Tuple of (success, stderr)
        """
        status, _stdout, stderr = self._run("branch", "-D" if force else "-d", name)
        if status == 0:
            logger.info(f"Deleted branch {name}")
        else:
            logger.debug(f"Could not delete branch {name}: {stderr.strip()}")
        return status == 0, stderr

    def commit_ages(self, shas: Iterable[Optional[str]]) -> Dict[str, str]:
        """Look up the relative age of many commits in one call.

        Returns:
            Mapping of full hash to a relative age such as "2 hours ago"
        """
        unique = list(dict.fromkeys(sha for sha in shas if sha))
        if not unique:
            return {}

        status, stdout, stderr = self._run(
            "--no-optional-locks", "show", "-s", "--format=%H|%cr", *unique
        )
        if status != 0:
            logger.debug(f"Could not read commit ages in {self.repo_path}: {stderr.strip()}")
            return {}

        ages: Dict[str, str] = {}
        for line in stdout.splitlines():
            parts = line.strip().split("|")
            if len(parts) == 2:
                ages[parts[0]] = parts[1]
        return ages

    def prune_worktrees(self) -> Tuple[bool, Optional[str]]:
        """Prune metadata of worktrees whose directories are gone.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        status, _stdout, stderr = self._run("worktree", "prune")
        if status != 0:
            error_msg = stderr.strip() or f"git worktree prune failed with exit code {status}"
            logger.error(f"Failed to prune worktrees: {error_msg}")
            return False, error_msg
        logger.info("Pruned orphaned worktree metadata")
        return True, None
