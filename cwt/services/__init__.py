"""Services wrapping external processes for cwt."""

from .git_service import GitService, git_common_dir, parse_porcelain, probe_status
from .process import ProcessResult, ProcessRunner, clean_environment

__all__ = [
    "GitService",
    "git_common_dir",
    "parse_porcelain",
    "probe_status",
    "ProcessResult",
    "ProcessRunner",
    "clean_environment",
]
