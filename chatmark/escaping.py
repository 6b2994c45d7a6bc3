# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""HTML escaping helpers.

Raw message text is escaped exactly once, before any Markdown parsing, so
no later stage ever sees a literal ``<`` or ``&`` that came from the user.
"""

import html
import re


_NEWLINE_PATTERN = re.compile(r"\r\n?")


def normalize_newlines(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``."""
    return _NEWLINE_PATTERN.sub("\n", text)


def escape_html(text: str) -> str:
    """Normalize newlines and entity-encode ``& < > " '``.

    Args:
        text: Untrusted raw text.

    Returns:
        Text safe to place in HTML element content or attribute values.
    """
    return html.escape(normalize_newlines(text), quote=True)


def escape_attribute(value: str) -> str:
    """Escape a value for a double-quoted HTML attribute."""
    return html.escape(value, quote=True)


def decode_entities(text: str) -> str:
    """Decode named and numeric HTML character references."""
    return html.unescape(text)
