"""Test logging configuration."""

import io
import logging
import sys
from pathlib import Path

import structlog
from structlog.testing import LogCapture

from qatunnel.logging import get_logger, setup_logging


class TestLogging:
    """Test logging functionality."""

    def setup_method(self) -> None:
        """Setup before each test - reset logging configuration."""
        structlog.reset_defaults()
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    def test_setup_logging_default(self) -> None:
        """Test default logging setup."""
        setup_logging()
        logger = get_logger("test")
        assert logger is not None
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")

    def test_setup_logging_with_level(self) -> None:
        """Test logging setup with custom level."""
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_console_defaults_to_stderr(self) -> None:
        """Test that console logs stay off stdout."""
        setup_logging()
        handler = logging.getLogger().handlers[0]
        assert handler.stream is sys.stderr

    def test_custom_stream(self) -> None:
        stream = io.StringIO()
        setup_logging(level="INFO", stream=stream)

        logging.getLogger("qatunnel.test").info("tunnel ready")

        assert "tunnel ready" in stream.getvalue()

    def test_setup_logging_json_format(self) -> None:
        """Test logging setup with JSON format."""
        setup_logging(json_format=True)
        logger = get_logger("test")

        cap = LogCapture()
        structlog.configure(processors=[cap])

        logger.info("test message", key="value")

        assert len(cap.entries) == 1
        assert cap.entries[0]["event"] == "test message"
        assert cap.entries[0]["key"] == "value"

    def test_setup_logging_with_file(self, tmp_path: Path) -> None:
        """Test logging setup with file output."""
        log_file = tmp_path / "test.log"
        setup_logging(log_file=str(log_file))

        python_logger = logging.getLogger("test_file")
        python_logger.info("test message")

        for handler in logging.getLogger().handlers:
            if hasattr(handler, "flush"):
                handler.flush()

        assert log_file.exists()
        assert "test message" in log_file.read_text()
