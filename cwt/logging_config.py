"""Logging configuration for cwt.

The TUI owns the terminal, so log records only ever go to a file.
"""
import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOG_FILE = Path.home() / '.cwt' / 'cwt.log'

LOG_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def log_level(verbose: bool = False, debug: bool = False) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """
    Configure logging for the application.

    Args:
        verbose: Log INFO messages to the default log file
        debug: Log DEBUG messages to the default log file
        log_file: Explicit log file path; logs at the chosen level, WARNING by default

    Returns:
        Path of the log file, or None when logging is discarded
    """
    level = log_level(verbose=verbose, debug=debug)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_file:
        path = Path(log_file).expanduser()
    elif verbose or debug:
        path = DEFAULT_LOG_FILE
    else:
        root_logger.addHandler(logging.NullHandler())
        return None

    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, mode='w')  # Overwrite each run
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(file_handler)
    return path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance
    """
    # Strip the package prefix for cleaner log names
    if name.startswith('cwt.'):
        name = name[len('cwt.'):]

    return logging.getLogger(name)
