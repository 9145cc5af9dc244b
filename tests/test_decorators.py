"""
Tests for decorators.py - logging around batch entry points.
"""

import logging

import pytest

from nimbus.decorators import with_logging


def test_with_logging_returns_result(caplog):
    """Test that the wrapped function's result is passed through."""

    @with_logging("nimbus.tests")
    def double(x):
        return x * 2

    with caplog.at_level(logging.DEBUG, logger="nimbus.tests"):
        assert double(4) == 8

    messages = [r.getMessage() for r in caplog.records]
    assert "Calling double" in messages
    assert any(m.startswith("Completed double in") for m in messages)


def test_with_logging_logs_and_reraises(caplog):
    """Test that errors are logged at ERROR and re-raised unchanged."""

    @with_logging("nimbus.tests")
    def fail():
        raise ValueError("bad reading")

    with caplog.at_level(logging.DEBUG, logger="nimbus.tests"):
        with pytest.raises(ValueError, match="bad reading"):
            fail()

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].error_type == "ValueError"
    assert errors[0].exc_info is not None


def test_with_logging_preserves_metadata():
    """Test that functools.wraps keeps the name and docstring."""

    @with_logging()
    def documented():
        """Docstring."""

    assert documented.__name__ == "documented"
    assert documented.__doc__ == "Docstring."
