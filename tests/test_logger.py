"""Tests for the shared pipeline logger."""

import logging

import pytest

from dstruct.infrastructure.logger import Logger


@pytest.fixture
def dstruct_logger():
    base = logging.getLogger("dstruct")
    level = base.level
    logger = Logger()
    handlers = list(base.handlers)
    yield logger
    for handler in base.handlers:
        if handler not in handlers:
            handler.close()
    base.handlers[:] = handlers
    base.setLevel(level)


class TestLogger:
    """Tests for Logger."""

    def test_handlers_are_shared(self, dstruct_logger):
        handlers = list(dstruct_logger.logger.handlers)
        Logger()
        Logger()
        assert dstruct_logger.logger.handlers == handlers

    def test_log_file_resets_handlers(self, dstruct_logger, tmp_path):
        path = tmp_path / "run.log"
        Logger(log_file=str(path)).log_success("written")
        assert len(dstruct_logger.logger.handlers) == 2
        assert "written" in path.read_text()
        Logger(log_file=str(tmp_path / "other.log"))
        assert len(dstruct_logger.logger.handlers) == 2

    def test_statistics_and_regions(self, dstruct_logger, caplog):
        caplog.set_level(logging.DEBUG, logger="dstruct")
        dstruct_logger.log_statistics("Significant at FDR 0.05", 3)
        dstruct_logger.log_regions("YAL042W", 5)
        assert "Significant at FDR 0.05: 3" in caplog.text
        assert "YAL042W: 5 regions" in caplog.text

    def test_debug_enabled(self, dstruct_logger):
        dstruct_logger.logger.setLevel(logging.INFO)
        assert not dstruct_logger.debug_enabled()
        dstruct_logger.logger.setLevel(logging.DEBUG)
        assert dstruct_logger.debug_enabled()
