"""
Unit tests for the error taxonomy and error handling helpers.
"""

import logging

import pytest

from hostos.validation import (
    CommandExecutionError,
    ErrorSeverity,
    GroupResolutionError,
    HostOSError,
    UnsupportedPlatformParse,
    ValidationError,
    handle_error,
    handle_subprocess_error,
    validate_positive_float,
)


@pytest.mark.unit
class TestErrorTypes:
    """Test cases for the exception hierarchy."""

    @pytest.mark.parametrize(
        "error_class", [CommandExecutionError, GroupResolutionError, UnsupportedPlatformParse]
    )
    def test_runtime_errors_share_base(self, error_class):
        assert issubclass(error_class, HostOSError)

    def test_command_error_attributes(self):
        error = CommandExecutionError("failed", ["net", "user"], returncode=2, stderr="denied")

        assert error.argv == ("net", "user")
        assert error.returncode == 2
        assert error.stderr == "denied"
        assert str(error) == "failed"

    def test_validation_error_attributes(self):
        error = ValidationError("bad", field_name="host.x", value=3)

        assert error.field_name == "host.x"
        assert error.value == 3
        assert error.severity is ErrorSeverity.ERROR


@pytest.mark.unit
class TestHandleError:
    """Test cases for handle_error."""

    def test_logs_and_reraises(self, caplog):
        test_logger = logging.getLogger("tests.handle_error")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError):
                handle_error(ValueError("bad"), "parsing", logger=test_logger)

        assert "Error in parsing: bad" in caplog.text

    def test_swallow_with_string_severity(self, caplog):
        test_logger = logging.getLogger("tests.handle_error")

        with caplog.at_level(logging.WARNING):
            handle_error(OSError("gone"), "reading", severity="warning", reraise=False, logger=test_logger)

        assert caplog.records[-1].levelno == logging.WARNING

    def test_subprocess_context(self, caplog):
        with caplog.at_level(logging.ERROR):
            handle_subprocess_error(CommandExecutionError("exit 1"), "groups", reraise=False)

        assert "subprocess command 'groups'" in caplog.text


@pytest.mark.unit
class TestValidatePositiveFloat:
    """Test cases for numeric validation."""

    def test_accepts_int_and_float(self):
        assert validate_positive_float(3) == 3.0
        assert validate_positive_float("2.5") == 2.5

    def test_bounds(self):
        with pytest.raises(ValidationError, match=">= 1.0"):
            validate_positive_float(0.5, min_value=1.0, field_name="x")
        with pytest.raises(ValidationError, match="<= 2.0"):
            validate_positive_float(3.0, max_value=2.0, field_name="x")

    def test_rejects_nan(self):
        with pytest.raises(ValidationError):
            validate_positive_float(float("nan"))
