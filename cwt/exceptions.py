"""Custom exceptions for cwt"""

class CwtError(Exception):
    """Base exception for all cwt errors."""
    pass


class RepositoryNotFoundError(CwtError):
    """Exception raised when no git repository can be found."""

    def __init__(self, start_path: str):
        self.start_path = start_path
        super().__init__(f"Not in a git repository: {start_path}")


class SetupAborted(CwtError):
    """Raised when the user cancels a failing setup script at the prompt."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Setup aborted for {path}")


class ProcessLaunchError(CwtError):
    """Exception raised when a foreground command cannot be started."""

    def __init__(self, argv: list, message: str):
        self.argv = list(argv)
        self.message = message
        super().__init__(f"Could not run '{' '.join(self.argv)}': {message}")
