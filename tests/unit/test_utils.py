"""Test logging utilities"""

import logging
from collections.abc import Iterator

import pytest

from tiddlymd.config import override_settings
from tiddlymd.utils import LoggerMixin, get_logger, setup_logging


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Iterator[None]:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    try:
        yield
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()


class TestLogger:
    """Test logging setup"""

    def test_setup_logging_uses_configured_level(self) -> None:
        with override_settings(log_level="WARNING"):
            setup_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_level_argument_wins(self) -> None:
        with override_settings(log_level="WARNING"):
            setup_logging("debug")

        assert logging.getLogger().level == logging.DEBUG

    def test_log_file_receives_messages(self, tmp_path) -> None:
        log_file = tmp_path / "logs" / "tiddlymd.log"

        with override_settings(log_file=log_file):
            setup_logging()

        logging.getLogger("format-check").info("logging format check")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert lines[-1].endswith("logging format check")

    def test_structlog_event_reaches_file(self, tmp_path) -> None:
        log_file = tmp_path / "structured.log"

        with override_settings(log_file=log_file, log_format="json"):
            setup_logging()

        get_logger("test").info("Export loaded", tiddlers=3)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert '"event": "Export loaded"' in content
        assert '"tiddlers": 3' in content


class TestLoggerMixin:
    """Test LoggerMixin"""

    def test_logger_named_after_class(self) -> None:
        class Sample(LoggerMixin):
            pass

        logger = Sample().logger
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")

    def test_logger_name_override(self) -> None:
        class Named(LoggerMixin):
            logger_name = "custom"

        assert Named().logger is not None
