"""
Unit Tests for Structured Logging
"""
import io
import logging

from tmdscreen.utils import get_logger, setup_logging
from tmdscreen.utils.logging import StructuredFormatter


def _record(msg="completed", context=None, level=logging.INFO):
    record = logging.LogRecord("tmdscreen.test", level, __file__, 1, msg, None, None)
    if context is not None:
        record.context = context
    return record


class TestStructuredFormatter:

    def test_plain_output_has_no_color_codes(self):
        line = StructuredFormatter(use_color=False).format(_record())
        assert "\033[" not in line
        assert "INFO" in line and "[tmdscreen.test] completed" in line

    def test_context_rendered_sorted(self):
        line = StructuredFormatter(use_color=False).format(
            _record(context={"tier": "high", "duration_ms": 1.5})
        )
        assert line.endswith("completed | duration_ms=1.5 tier=high")

    def test_colored_output(self):
        line = StructuredFormatter(use_color=True).format(_record(level=logging.WARNING))
        assert line.startswith(StructuredFormatter.COLORS["WARNING"])
        assert line.endswith(StructuredFormatter.COLORS["RESET"])


class TestSetupLogging:

    def teardown_method(self):
        setup_logging("INFO")

    def test_writes_to_given_stream_without_color(self):
        stream = io.StringIO()
        setup_logging("DEBUG", stream=stream)
        get_logger("tmdscreen.core.test").debug("stage done", extra={"context": {"step": 2}})
        output = stream.getvalue()
        assert "stage done | step=2" in output
        assert "\033[" not in output

    def test_level_filters_records(self):
        stream = io.StringIO()
        setup_logging("WARNING", stream=stream)
        get_logger("tmdscreen.core.test").info("hidden")
        assert stream.getvalue() == ""

    def test_unknown_level_falls_back_to_info(self):
        logger = setup_logging("LOUD", stream=io.StringIO())
        assert logger.level == logging.INFO

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging("INFO", stream=io.StringIO())
        logger = setup_logging("INFO", stream=io.StringIO())
        assert len(logger.handlers) == 1

    def test_file_handler_includes_context(self, tmp_path):
        log_file = tmp_path / "tmd.log"
        logger = setup_logging("INFO", log_file=str(log_file), stream=io.StringIO())
        get_logger("tmdscreen.core.test").info("stored", extra={"context": {"ref": "a-1"}})
        for handler in logger.handlers:
            handler.flush()
        assert "stored | ref=a-1" in log_file.read_text()


class TestGetLogger:

    def test_foreign_names_nested_under_package(self):
        assert get_logger("scripts.batch").name == "tmdscreen.scripts.batch"

    def test_package_names_kept(self):
        assert get_logger("tmdscreen.core.scoring").name == "tmdscreen.core.scoring"
        assert get_logger("tmdscreen").name == "tmdscreen"
