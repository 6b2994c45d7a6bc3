# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Centralized logging configuration with control character escaping.

Chat messages are untrusted; when fragments of them end up in log output
they must not be able to start new log lines or emit terminal escape
sequences.

Usage:
    # In entry points (scripts, CLI tools)
    from chatmark.logging import configure_logging
    configure_logging(level=logging.INFO)

    # In library modules
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Rendered message of %d chars", len(text))
"""

import logging
import re


#: ASCII control characters except tab.
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


def escape_control_chars(text: str) -> str:
    """Replace control characters with ``\\xNN`` escapes."""
    return _CONTROL_PATTERN.sub(lambda m: f"\\x{ord(m.group(0)):02x}", text)


class ControlCharFilter(logging.Filter):
    """Logging filter that escapes control characters in log output.

    Example:
        handler.addFilter(ControlCharFilter())
        logger.info("Got: %s", "line1\\nFAKE - ERROR - injected")
        # Output: "Got: line1\\x0aFAKE - ERROR - injected"
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record by escaping control characters.

        Args:
            record: The log record to filter.

        Returns:
            Always True (record is never suppressed, only modified).
        """
        if isinstance(record.msg, str):
            record.msg = escape_control_chars(record.msg)
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                escape_control_chars(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


def configure_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    add_control_filter: bool = True,
) -> None:
    """Configure logging for the application.

    Sets up the root logger with a standard format and optional control
    character escaping.

    Args:
        level: The logging level (e.g., logging.INFO, logging.DEBUG).
        format_string: Custom format string. If None, uses default format.
        add_control_filter: Whether to add the ControlCharFilter.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string))

    if add_control_filter:
        handler.addFilter(ControlCharFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Convenience wrapper around logging.getLogger().

    Args:
        name: The logger name, typically __name__.

    Returns:
        A logger instance.
    """
    return logging.getLogger(name)
