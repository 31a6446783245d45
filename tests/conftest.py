"""Pytest fixtures for cwt tests"""
import os
import stat
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from cwt.core.repository import Repository
from cwt.core.worktree import Worktree
from cwt.services.process import ProcessRunner


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing.

    Resolved so paths compare equal to what git reports (macOS /private/var).
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(os.path.realpath(tmpdir))


def init_repo(path: Path) -> git.Repo:
    """Initialize a repository with one commit on main."""
    path.mkdir(parents=True, exist_ok=True)
    repo = git.Repo.init(path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch("-M", "main")
    except git.GitCommandError:
        pass

    return repo


def write_script(path: Path, body: str) -> Path:
    """Write an executable shell script."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo = init_repo(temp_dir / "test_repo")
    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def repository(git_repo):
    """Repository wrapper around the test repository."""
    return Repository(git_repo.working_dir)


@pytest.fixture
def quiet_console(monkeypatch):
    """Replace the rich console used by hooks so tests stay silent and non-interactive."""
    console = Mock()
    monkeypatch.setattr("cwt.core.worktree.console", console)
    return console


@pytest.fixture
def mock_runner():
    """A ProcessRunner that never starts anything."""
    runner = Mock(spec=ProcessRunner)
    runner.run_attached.return_value = 0
    return runner


@pytest.fixture
def make_worktree():
    """Build detached Worktree objects without touching git."""
    repository = Mock(spec=Repository)
    repository.root = "/repo"

    def _make(path, branch=None, sha=None, repo=None):
        return Worktree(repository=repo or repository, path=path, branch=branch, sha=sha)

    return _make


@pytest.fixture
def make_repo():
    """Factory for additional repositories."""
    return init_repo


@pytest.fixture
def make_script():
    """Factory for executable hook scripts."""
    return write_script
