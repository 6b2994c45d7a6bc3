# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Safe HTML rendering of untrusted chat messages."""

from chatmark.autolink import (
    EMPTY_RULES,
    MAX_RULES,
    AutoLinkRule,
    AutoLinkRules,
    Match,
    apply_auto_links,
    find_matches,
    prepare_rules,
)
from chatmark.code_blocks import (
    CodeBlock,
    CodeBlockRegistry,
    extract_code_blocks,
    restore_code_blocks,
)
from chatmark.escaping import escape_html
from chatmark.href import sanitize_href
from chatmark.html_to_text import html_to_text
from chatmark.renderer import MessageRenderer, format_message


__all__ = [
    "EMPTY_RULES",
    "MAX_RULES",
    "AutoLinkRule",
    "AutoLinkRules",
    "CodeBlock",
    "CodeBlockRegistry",
    "Match",
    "MessageRenderer",
    "apply_auto_links",
    "escape_html",
    "extract_code_blocks",
    "find_matches",
    "format_message",
    "html_to_text",
    "prepare_rules",
    "restore_code_blocks",
    "sanitize_href",
]
