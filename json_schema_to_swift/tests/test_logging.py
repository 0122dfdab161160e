#!/usr/bin/env python3

import logging

import pytest

from json_schema_to_swift.logging import PhaseFilter, configure_logging, get_logger


class TestLogging:
    """Package logger configuration"""

    def test_module_loggers_share_the_package_hierarchy(self):
        assert get_logger("generator").name == "json_schema_to_swift.generator"
        assert get_logger().name == "json_schema_to_swift"

    def test_levels(self):
        assert configure_logging(verbose=False).level == logging.WARNING
        assert configure_logging(verbose=True).level == logging.DEBUG

    def test_handlers_are_not_duplicated(self):
        configure_logging()
        logger = configure_logging()
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "generation.log"
        logger = configure_logging(verbose=True, log_file=log_file)
        get_logger("tests").debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_records_carry_their_phase(self, tmp_path):
        log_file = tmp_path / "generation.log"
        logger = configure_logging(verbose=True, log_file=log_file)
        get_logger("reifier").debug("hello")
        get_logger("generator").warning("done")
        get_logger("tests").debug("other")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        text = log_file.read_text()
        assert "DEBUG [reify] hello" in text
        assert "WARNING [emit] done" in text
        assert "DEBUG [tests] other" in text

    @pytest.mark.parametrize("name, phase", [("parser", "parse"), ("promotion", "promote"), (None, "-")])
    def test_phase_filter(self, name, phase):
        record = logging.LogRecord(get_logger(name).name, logging.INFO, __file__, 1, "message", None, None)
        assert PhaseFilter().filter(record)
        assert record.phase == phase


if __name__ == "__main__":
    pytest.main([__file__])
