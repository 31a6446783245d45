"""Command-line argument parsing for cwt."""

import argparse

from cwt.__version__ import __version__
from cwt.constants import POOL_SIZE


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="cwt",
        description="Manage git worktrees as isolated coding sessions",
        epilog="Run inside a git repository. Optional hooks live in .cwt/setup and .cwt/teardown.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Write informational logs to ~/.cwt/cwt.log")
    parser.add_argument("--version", action="version", version=f"cwt {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Write debug logs to ~/.cwt/cwt.log"
    )
    parser.add_argument("--log-file", metavar="PATH", help="Write logs to PATH")
    parser.add_argument(
        "--command",
        metavar="CMD",
        help="Command launched in a worktree on resume (default: $CWT_COMMAND or claude)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=POOL_SIZE,
        metavar="N",
        help=f"Number of parallel status workers (default: {POOL_SIZE})",
    )
    parser.add_argument(
        "--no-nested",
        action="store_true",
        help="Only list the enclosing repository, not repositories nested below it",
    )
    parser.add_argument(
        "--no-shell",
        action="store_true",
        help="Exit normally instead of starting a shell in the last resumed worktree",
    )

    return parser.parse_args(argv)
