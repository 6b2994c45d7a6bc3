# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Chat message rendering.

Turns untrusted chat text into safe HTML suitable for ``innerHTML``:

1. Escape the raw text (the only place raw input is touched).
2. Pull fenced code blocks out into placeholder tokens.
3. Render blocks, with inline formatting and auto-links per block.
4. Merge ordered lists split by interleaved content.
5. Put the code blocks back.

Rendering never raises.  Every emitted anchor carries
``target="_blank" rel="noopener noreferrer"``.
"""

import logging
from collections.abc import Iterable

from chatmark.autolink import EMPTY_RULES, AutoLinkRules, prepare_rules
from chatmark.blocks import merge_consecutive_ordered_lists, render_blocks
from chatmark.code_blocks import extract_code_blocks, restore_code_blocks
from chatmark.escaping import escape_html
from chatmark.html_to_text import html_to_text


logger = logging.getLogger(__name__)


class MessageRenderer:
    """Renders chat messages with a fixed auto-link rule set.

    The rule set is immutable, so one renderer can be shared freely
    between callers and threads.
    """

    def __init__(self, rules: AutoLinkRules = EMPTY_RULES) -> None:
        self.rules = rules

    @classmethod
    def from_config(cls, records: Iterable[object]) -> "MessageRenderer":
        """Create a renderer from raw ``{phrase, url}`` records."""
        return cls(prepare_rules(records))

    def render(self, raw: str | None) -> str:
        """Render a raw chat message to HTML.

        Args:
            raw: Untrusted message text.

        Returns:
            HTML fragment; empty string for empty input.
        """
        if not raw:
            return ""

        escaped = escape_html(str(raw))
        try:
            text, registry = extract_code_blocks(escaped)
            html = render_blocks(text, self.rules, registry.is_token_line)
            html = merge_consecutive_ordered_lists(html)
            return restore_code_blocks(html, registry)
        except Exception:
            logger.exception("Failed to render message; falling back to text")
            return f"<p>{escaped}</p>"

    def render_text(self, raw: str | None) -> str:
        """Render a raw chat message and convert the result to plain text."""
        return html_to_text(self.render(raw))


_DEFAULT_RENDERER = MessageRenderer()


def format_message(raw: str | None, rules: AutoLinkRules | None = None) -> str:
    """Render *raw* to HTML, optionally applying auto-link *rules*."""
    if rules is None:
        return _DEFAULT_RENDERER.render(raw)
    return MessageRenderer(rules).render(raw)
