# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for chatmark/logging.py."""

import logging

import pytest

from chatmark.logging import (
    ControlCharFilter,
    configure_logging,
    escape_control_chars,
    get_logger,
)


def _record(msg: str, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestControlCharFilter:
    """Tests for ControlCharFilter class."""

    def test_filter_returns_true(self) -> None:
        """Filter should always return True (never suppress records)."""
        assert ControlCharFilter().filter(_record("test message")) is True

    def test_escapes_newline_in_message(self) -> None:
        """Newlines cannot start a forged log line."""
        record = _record("a\nFAKE - ERROR - injected")
        ControlCharFilter().filter(record)
        assert record.msg == "a\\x0aFAKE - ERROR - injected"

    def test_escapes_string_args(self) -> None:
        """String arguments are escaped, others left alone."""
        record = _record("%s %d", ("x\x1b[31m", 5))
        ControlCharFilter().filter(record)
        assert record.args == ("x\\x1b[31m", 5)
        assert record.getMessage() == "x\\x1b[31m 5"

    def test_tab_preserved(self) -> None:
        """Tabs are not escaped."""
        record = _record("a\tb")
        ControlCharFilter().filter(record)
        assert record.msg == "a\tb"


def test_escape_control_chars() -> None:
    """DEL and NUL are escaped."""
    assert escape_control_chars("\x00x\x7f") == "\\x00x\\x7f"


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        handlers = root.handlers[:]
        level = root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_single_handler_with_filter(self) -> None:
        """One handler carrying the control character filter."""
        configure_logging(level=logging.DEBUG)
        configure_logging(level=logging.DEBUG)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert any(
            isinstance(f, ControlCharFilter) for f in root.handlers[0].filters
        )

    def test_without_filter(self) -> None:
        """The filter can be disabled."""
        configure_logging(add_control_filter=False)
        assert logging.getLogger().handlers[0].filters == []

    def test_custom_format(self) -> None:
        """A custom format string is applied."""
        configure_logging(format_string="%(message)s")
        formatter = logging.getLogger().handlers[0].formatter
        assert formatter is not None
        assert formatter._fmt == "%(message)s"


def test_get_logger() -> None:
    """get_logger returns the named logger."""
    assert get_logger("chatmark.test") is logging.getLogger("chatmark.test")
