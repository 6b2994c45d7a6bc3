# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Inline Markdown rendering for a single block of escaped text.

Supported syntax:
- Inline code: `code`
- Links: [label](url), with the URL passed through ``sanitize_href``
- Bold: **text**
- Italic: *text*
- Auto-links for configured phrases
"""

import re

from chatmark.autolink import (
    EMPTY_RULES,
    LINK_TARGET_ATTRS,
    AutoLinkRules,
    apply_auto_links,
)
from chatmark.fragment import parse_fragment, serialize
from chatmark.href import sanitize_href
from chatmark.tokens import Placeholders


_CODE_SPAN_PATTERN = re.compile(r"`([^`]+)`")
_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BOLD_PATTERN = re.compile(r"\*\*([^*]+)\*\*")
# Single asterisks not touching another asterisk, so **bold** is skipped.
_ITALIC_PATTERN = re.compile(r"(^|[^*])\*([^*\n]+)\*(?!\*)")

_TARGET = "".join(f' {name}="{value}"' for name, value in LINK_TARGET_ATTRS)


def render_inline(text: str, rules: AutoLinkRules = EMPTY_RULES) -> str:
    """Convert inline Markdown in *text* to HTML.

    Code spans are protected first so nothing inside them is formatted.
    Opening anchor tags are protected while emphasis runs so asterisks in
    a URL cannot be turned into ``<em>`` inside the ``href`` attribute.
    A link whose URL contains a code span is left as text.  Emphasis that
    crosses a link boundary is rebalanced through the fragment tree.

    Args:
        text: HTML-escaped text of one block.
        rules: Auto-link rules applied to the formatted text.

    Returns:
        Inline HTML.
    """
    if not text:
        return ""

    spans = Placeholders("CODESPAN", text)
    span_html: list[str] = []

    def protect_span(match: re.Match[str]) -> str:
        span_html.append(f"<code>{match.group(1)}</code>")
        return spans.token(len(span_html) - 1)

    out = _CODE_SPAN_PATTERN.sub(protect_span, text)

    anchors = Placeholders("LINK", text)
    anchor_tags: list[str] = []

    def replace_link(match: re.Match[str]) -> str:
        label, url = match.group(1), match.group(2)
        href = "" if spans.pattern.search(url) else sanitize_href(url)
        if not href:
            return f"{label} ({url})"
        anchor_tags.append(f'<a href="{href}"{_TARGET}>')
        return f"{anchors.token(len(anchor_tags) - 1)}{label}</a>"

    out = _LINK_PATTERN.sub(replace_link, out)
    out = _BOLD_PATTERN.sub(r"<strong>\1</strong>", out)
    out = _ITALIC_PATTERN.sub(r"\1<em>\2</em>", out)
    out = anchors.restore(out, anchor_tags)
    if "<" in out:
        out = serialize(parse_fragment(out))

    out = apply_auto_links(out, rules, protected=spans.pattern)

    return spans.restore(out, span_html)
