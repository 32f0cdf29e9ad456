"""
Tests for stream_progress/error_handler.py

Tests the error hierarchy, friendly messages, and the estimation_step
decorator.
"""

import logging

import pytest

from stream_progress.error_handler import (
    EstimationFailure,
    InvalidConfiguration,
    ProgressError,
    SessionClosed,
    estimation_step,
    get_friendly_message,
    handle_error,
)


class TestErrorTypes:
    def test_invalid_configuration_fields(self):
        err = InvalidConfiguration("interval", 0, "must be at least 1")
        assert err.field == "interval"
        assert err.value == 0
        assert str(err) == "Invalid interval=0: must be at least 1"

    def test_invalid_configuration_is_value_error(self):
        assert isinstance(InvalidConfiguration("x", 1, "bad"), ValueError)
        assert isinstance(InvalidConfiguration("x", 1, "bad"), ProgressError)

    def test_estimation_failure_message(self):
        err = EstimationFailure("fudge factor", ValueError("math domain error"))
        assert str(err) == "Estimation failed in fudge factor: math domain error"


class TestGetFriendlyMessage:
    def test_invalid_configuration(self):
        msg = get_friendly_message(InvalidConfiguration("interval", -3, "must be at least 1"))
        assert "interval" in msg
        assert "-3" in msg

    def test_session_closed(self):
        assert "finished" in get_friendly_message(SessionClosed("done"))

    def test_file_not_found(self):
        err = FileNotFoundError(2, "No such file", "rows.csv")
        assert "rows.csv" in get_friendly_message(err)

    def test_fallback(self):
        assert get_friendly_message(RuntimeError("boom")).startswith("Unexpected error")


class TestHandleError:
    def test_returns_message_and_logs(self, caplog):
        caplog.set_level(logging.ERROR, logger="stream_progress")
        msg = handle_error(RuntimeError("boom"), "streaming")
        assert isinstance(msg, str)
        assert any("Error in streaming: boom" in r.getMessage() for r in caplog.records)

    def test_custom_level(self, caplog):
        caplog.set_level(logging.WARNING, logger="stream_progress")
        handle_error(RuntimeError("soft"), "display", level=logging.WARNING)
        assert caplog.records[0].levelno == logging.WARNING

    def test_custom_logger(self, caplog):
        caplog.set_level(logging.WARNING)
        handle_error(RuntimeError("soft"), "display", level=logging.WARNING, log=logging.getLogger("tests.pipeline"))
        assert [r.name for r in caplog.records] == ["tests.pipeline"]


class TestEstimationStep:
    def test_normal_return_value(self):
        @estimation_step("test")
        def good():
            return 1.5
        assert good() == 1.5

    def test_wraps_arithmetic_error(self):
        @estimation_step("ratio")
        def bad():
            return 1 / 0
        with pytest.raises(EstimationFailure) as exc_info:
            bad()
        assert exc_info.value.context == "ratio"
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_other_errors_propagate(self):
        @estimation_step("test")
        def bad():
            raise TypeError("wrong type")
        with pytest.raises(TypeError):
            bad()

    def test_nested_failure_not_rewrapped(self):
        @estimation_step("inner")
        def inner():
            raise ValueError("domain")

        @estimation_step("outer")
        def outer():
            return inner()

        with pytest.raises(EstimationFailure) as exc_info:
            outer()
        assert exc_info.value.context == "inner"

    def test_metadata_preserved(self):
        @estimation_step("test")
        def my_function():
            """My docstring."""
        assert my_function.__name__ == "my_function"
        assert my_function.__doc__ == "My docstring."
