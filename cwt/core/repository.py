"""Repository discovery and worktree creation."""

import os
from typing import List, Optional, Tuple

from cwt.constants import (
    CONFIG_DIR,
    SETUP_SCRIPT,
    SKIP_SCAN_DIRS,
    TEARDOWN_SCRIPT,
    WORKTREE_DIR,
)
from cwt.core.worktree import Worktree
from cwt.logging_config import get_logger
from cwt.services.git_service import GitService, configured_worktree, git_common_dir
from cwt.services.process import ProcessRunner
from cwt.utils.paths import normalize_path, sanitize_name

logger = get_logger(__name__)


def _is_executable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


class Repository:
    """A git repository whose worktrees cwt manages.

    Identified by its absolute root path; immutable after construction.
    """

    def __init__(self, root: str, runner: Optional[ProcessRunner] = None):
        """Initialize the repository.

        Args:
            root: Repository root directory (the main worktree)
            runner: Runner used for setup/teardown hooks
        """
        self.root = os.path.abspath(os.path.expanduser(root))
        self.runner = runner or ProcessRunner()
        self.git = GitService(self.root)

    def __repr__(self) -> str:
        return f"Repository({self.root!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Repository) and other.root == self.root

    def __hash__(self) -> int:
        return hash(self.root)

    @classmethod
    def discover(
        cls, start_path: Optional[str] = None, runner: Optional[ProcessRunner] = None
    ) -> Optional["Repository"]:
        """Find the main repository for any path, including from inside a worktree.

        Returns:
            The Repository, or None when start_path is not inside a repository
        """
        start = os.path.abspath(start_path or os.getcwd())
        common_dir = git_common_dir(start)
        if not common_dir:
            return None

        # --git-common-dir is <root>/.git for a normal repository
        if os.path.basename(common_dir.rstrip(os.sep)) == ".git":
            root = os.path.dirname(common_dir.rstrip(os.sep))
        else:
            # Submodule (<super>/.git/modules/<name>) or bare repository
            root = configured_worktree(common_dir) or common_dir
        return cls(root, runner=runner)

    @classmethod
    def discover_all(
        cls,
        start_path: Optional[str] = None,
        nested: bool = True,
        max_depth: int = 3,
        runner: Optional[ProcessRunner] = None,
    ) -> List["Repository"]:
        """Find the enclosing repository plus repositories nested below start_path.

        Args:
            start_path: Directory to start from (defaults to the current directory)
            nested: Also scan below start_path for nested repositories
            max_depth: How many directory levels below start_path to scan
            runner: Runner shared by all discovered repositories

        Returns:
            Repositories with the enclosing one first; empty when none is found
        """
        start = os.path.abspath(start_path or os.getcwd())
        repositories: List[Repository] = []
        seen = set()

        def add(repository: Optional[Repository]):
            if repository and repository.root not in seen:
                seen.add(repository.root)
                repositories.append(repository)

        add(cls.discover(start, runner=runner))

        if nested:
            for candidate in cls._scan_nested(start, max_depth):
                add(cls.discover(candidate, runner=runner))

        logger.debug(f"Discovered {len(repositories)} repositories from {start}")
        return repositories

    @staticmethod
    def _scan_nested(start: str, max_depth: int) -> List[str]:
        """Directories below start that contain a .git entry."""
        found = []
        base_depth = start.rstrip(os.sep).count(os.sep)
        for dirpath, dirnames, filenames in os.walk(start):
            depth = dirpath.rstrip(os.sep).count(os.sep) - base_depth
            if dirpath != start and (".git" in dirnames or ".git" in filenames):
                found.append(dirpath)
            if depth >= max_depth:
                dirnames[:] = []
                continue
            dirnames[:] = sorted(
                d for d in dirnames if not d.startswith(".") and d not in SKIP_SCAN_DIRS
            )
        return found

    @property
    def worktrees_dir(self) -> str:
        return os.path.join(self.root, WORKTREE_DIR)

    @property
    def config_dir(self) -> str:
        return os.path.join(self.root, CONFIG_DIR)

    @property
    def setup_script_path(self) -> str:
        return os.path.join(self.config_dir, SETUP_SCRIPT)

    @property
    def teardown_script_path(self) -> str:
        return os.path.join(self.config_dir, TEARDOWN_SCRIPT)

    def has_setup_script(self) -> bool:
        return _is_executable_file(self.setup_script_path)

    def has_teardown_script(self) -> bool:
        return _is_executable_file(self.teardown_script_path)

    def canonical_root(self) -> str:
        """Root with symlinks resolved, as exported to hooks."""
        return os.path.realpath(self.root)

    def worktrees(self) -> List[Worktree]:
        """List this repository's worktrees in git's order."""
        return [
            Worktree(repository=self, path=record.path, branch=record.branch, sha=record.sha)
            for record in self.git.list_worktrees()
        ]

    def find_worktree(self, name_or_path: str) -> Optional[Worktree]:
        """Re-list worktrees and match by name or by normalized path."""
        normalized = normalize_path(name_or_path)
        for worktree in self.worktrees():
            if worktree.name == name_or_path or normalize_path(worktree.path) == normalized:
                return worktree
        return None

    def create_worktree(self, name: str) -> Tuple[Optional[Worktree], Optional[str]]:
        """Create a worktree under .worktrees/ on a new branch of the same name.

        The new worktree is marked as needing setup. The worktree list is not
        reloaded; callers decide when to refresh.

        Returns:
            Tuple of (worktree, error_message). error_message is git's raw stderr.
        """
        safe_name = sanitize_name(name)
        if not safe_name:
            return None, "Session name cannot be empty"
        path = os.path.join(self.worktrees_dir, safe_name)

        os.makedirs(self.worktrees_dir, exist_ok=True)

        success, error = self.git.add_worktree(path, safe_name)
        if not success:
            return None, error

        worktree = Worktree(repository=self, path=path, branch=safe_name, sha=None)
        worktree.mark_needs_setup()
        return worktree, None

    def commit_ages(self, shas) -> dict:
        """Relative commit ages for hashes in this repository."""
        return self.git.commit_ages(shas)

    def prune_worktrees(self) -> Tuple[bool, Optional[str]]:
        """Drop registrations of worktrees whose directories are gone."""
        return self.git.prune_worktrees()
