"""Unit tests for logging setup and structured errors."""

import json
import logging
import sys

from recursica_vars.errors import (
    ConfigurationError,
    ErrorCategory,
    InvalidCssVarValueError,
    SourceLoadError,
    ThemePatchError,
)
from recursica_vars.vars_logging import (
    LOGGER_NAME,
    JSONFormatter,
    LogCategory,
    debug_context,
    get_category_logger,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_level(self):
        """Test the console handler level."""
        logger = setup_logging(level="warning")

        assert logger.name == LOGGER_NAME
        assert logger.handlers[0].level == logging.WARNING

    def test_quiet_and_verbose(self):
        """Test the quiet and verbose shortcuts."""
        assert setup_logging(quiet=True).handlers[0].level == logging.ERROR
        assert setup_logging(verbose=True).handlers[0].level == logging.DEBUG

    def test_json_file_handler(self, tmp_path):
        """Test that file output uses the JSON formatter."""
        log_file = tmp_path / "vars.log"
        logger = setup_logging(log_file=log_file, log_format="json")

        logger.info("built", extra={"var_count": 3})
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "built"
        assert entry["var_count"] == 3
        assert entry["level"] == "INFO"

    def test_category_logger_is_child(self):
        """Test category logger naming."""
        assert get_category_logger(LogCategory.LAYERS).name == f"{LOGGER_NAME}.layers"
        assert get_logger().name == LOGGER_NAME

    def test_debug_context_restores_level(self):
        """Test that debug_context restores the previous level."""
        logger = logging.getLogger(f"{LOGGER_NAME}.scratch")
        logger.setLevel(logging.WARNING)

        with debug_context(logger) as active:
            assert active.level == logging.DEBUG

        assert logger.level == logging.WARNING


def test_json_formatter_includes_exception():
    """Test that exceptions are serialized."""
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "recursica_vars", logging.ERROR, __file__, 1, "failed", None, None
        )
        record.exc_info = sys.exc_info()

    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "failed"
    assert "ValueError: boom" in entry["exception"]
    assert entry["category"] is None


def test_json_formatter_category():
    """Test that the component is taken from the logger name."""
    record = logging.LogRecord(f"{LOGGER_NAME}.layers", logging.INFO, __file__, 1, "ok", None, None)
    record.var_name = "--recursica-brand-x"

    entry = json.loads(JSONFormatter().format(record))

    assert entry["category"] == "layers"
    assert entry["var_name"] == "--recursica-brand-x"


class TestErrors:
    """Tests for structured errors."""

    def test_invalid_css_var_value(self):
        """Test the validation error."""
        error = InvalidCssVarValueError("--recursica-brand-x", "12px")

        assert error.category == ErrorCategory.VALIDATION
        assert error.exit_code == 2
        assert error.details == {"var_name": "--recursica-brand-x", "value": "12px"}

    def test_source_load_error_message(self):
        """Test the original error is carried in the message."""
        error = SourceLoadError("tokens.json", "No such file")

        assert error.message == "Cannot load JSON source: tokens.json: No such file"
        assert error.category == ErrorCategory.SOURCE

    def test_format_without_color(self):
        """Test plain formatting with suggestion and details."""
        error = ConfigurationError("Bad value", config_file="config.json")

        text = error.format(use_color=False)

        assert text.splitlines() == [
            "Error: Bad value",
            "Suggestion: Check your configuration file syntax and value ranges",
            "  config_file: config.json",
        ]
        assert str(error) == text

    def test_absent_details_are_omitted(self):
        """Test that a None detail does not render."""
        error = ConfigurationError("Bad value", suggestion="Fix it")

        assert error.details == {}
        assert error.format(use_color=False).splitlines() == [
            "Error: Bad value",
            "Suggestion: Fix it",
        ]

    def test_patch_error_defaults(self):
        """Test the class level category and exit code."""
        error = ThemePatchError("Core color patch", "KeyError")

        assert error.category == ErrorCategory.RUNTIME
        assert error.exit_code == 1
        assert error.details == {"operation": "Core color patch"}

    def test_format_with_color(self):
        """Test that color codes are added."""
        assert "\033[91m" in ThemePatchError("Core color patch", "KeyError").format()

    def test_errors_are_exceptions(self):
        """Test that errors can be raised and caught."""
        try:
            raise ThemePatchError("Core color patch", "bad shape")
        except ThemePatchError as e:
            assert e.message == "Core color patch abandoned: bad shape"
