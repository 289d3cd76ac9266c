"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from import_atlas.logging_config import get_logger, setup_logging


class TestGetLogger:
    def test_prefixes_module_names(self):
        assert get_logger("graph.builder").name == "import_atlas.graph.builder"

    def test_keeps_package_names(self):
        assert get_logger("import_atlas.api").name == "import_atlas.api"

    def test_root_logger(self):
        assert get_logger().name == "import_atlas"


class TestSetupLogging:
    def test_levels(self):
        assert setup_logging().level == logging.WARNING
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(quiet=True).level == logging.ERROR

    def test_rich_handler_installed(self):
        setup_logging()
        assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "atlas.log"
        logger = setup_logging(log_file=str(log_file))
        logger.warning("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")
