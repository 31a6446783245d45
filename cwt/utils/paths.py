"""Path and name helpers."""

import os
import re

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


def sanitize_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with an underscore."""
    return _UNSAFE_NAME_CHARS.sub("_", name.strip())


def normalize_path(path: str) -> str:
    """Resolve symlinks when the path exists, otherwise just expand it.

    Handles platforms where temp directories live behind a symlink
    (macOS /var -> /private/var).
    """
    expanded = os.path.expanduser(path)
    try:
        if os.path.exists(expanded):
            return os.path.realpath(expanded)
    except OSError:
        pass
    return os.path.abspath(expanded)
