"""Tests for logging setup"""
import logging

import pytest

from cwt import logging_config
from cwt.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Test handler selection."""

    def test_discards_by_default(self):
        """Test that nothing is written without -v, --debug or --log-file."""
        assert setup_logging() is None
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)

    def test_explicit_log_file(self, temp_dir):
        """Test that --log-file writes warnings to the given file."""
        path = setup_logging(log_file=temp_dir / "logs" / "cwt.log")
        get_logger("cwt.test").warning("disk is full")
        get_logger("cwt.test").info("not written")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = path.read_text()
        assert "disk is full" in content
        assert "not written" not in content

    def test_debug_uses_default_file(self, temp_dir, monkeypatch):
        """Test that --debug logs everything to the default file."""
        monkeypatch.setattr(logging_config, "DEFAULT_LOG_FILE", temp_dir / "cwt.log")
        path = setup_logging(debug=True)
        assert path == temp_dir / "cwt.log"
        assert logging.getLogger().level == logging.DEBUG

    def test_verbose_level(self, temp_dir):
        """Test that -v logs at INFO."""
        setup_logging(verbose=True, log_file=temp_dir / "cwt.log")
        assert logging.getLogger().level == logging.INFO


class TestGetLogger:
    """Test logger naming."""

    def test_strips_package_prefix(self):
        """Test that module loggers drop the cwt. prefix."""
        assert get_logger("cwt.core.refresh").name == "core.refresh"
        assert get_logger("other").name == "other"
