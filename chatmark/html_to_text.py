# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Plain text conversion of rendered message HTML.

Used for clipboard copy and export, where the reader sees text rather
than markup.

Conversions:
- Paragraphs, headings, blockquotes (<p>, <h1>-<h6>, <blockquote>) →
  blocks separated by a blank line
- Preformatted (<pre>) → text kept verbatim
- Ordered lists (<ol>/<li>) → 1. item
- Unordered lists (<ul>/<li>) → • item
- Nested list items → indented two spaces per level
- Line breaks (<br>) → newline
- Rules (<hr>) → blank line
- HTML entities → decoded characters
"""

import re
from dataclasses import dataclass, field

from chatmark.fragment import Element, Text, parse_fragment


_HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_BLOCK_TAGS = frozenset({"p", "div", "section", "blockquote"}) | _HEADING_TAGS

UNORDERED_BULLET = "• "


@dataclass
class _ListLevel:
    tag: str
    index: int = 0


@dataclass
class _Context:
    lists: list[_ListLevel] = field(default_factory=list)


def html_to_text(html_content: str) -> str:
    """Convert rendered message HTML to plain text.

    Args:
        html_content: HTML fragment produced by the renderer.

    Returns:
        Plain text with trailing spaces removed, at most one blank line
        between blocks, and no leading/trailing whitespace.
    """
    if not html_content:
        return ""

    text = _node_text(parse_fragment(html_content), _Context())
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _ensure_newline(text: str) -> str:
    """Ensure *text* ends with a newline."""
    return text if text.endswith("\n") else text + "\n"


def _ensure_block_break(text: str) -> str:
    """Ensure *text* ends with a blank line."""
    text = _ensure_newline(text)
    return text if text.endswith("\n\n") else text + "\n"


def _children_text(node: Element, ctx: _Context) -> str:
    return "".join(_node_text(child, ctx) for child in node.children)


def _node_text(node: Element | Text, ctx: _Context) -> str:
    """Convert one node (recursively) to text."""
    if isinstance(node, Text):
        return node.value

    tag = node.tag
    if tag == "br":
        return "\n"
    if tag == "hr":
        return "\n\n"
    if tag == "pre":
        return _ensure_block_break(node.text_content().removesuffix("\n"))
    if tag in _BLOCK_TAGS:
        content = _children_text(node, ctx).strip()
        return _ensure_block_break(content) if content else ""
    if tag in ("ul", "ol"):
        ctx.lists.append(_ListLevel(tag))
        content = _children_text(node, ctx)
        ctx.lists.pop()
        return _ensure_block_break(content.strip())
    if tag == "li":
        return _list_item_text(node, ctx)

    return _children_text(node, ctx)


def _list_item_text(node: Element, ctx: _Context) -> str:
    """Render a list item with its bullet or number."""
    current = ctx.lists[-1] if ctx.lists else None
    if current is None:
        prefix = "- "
    elif current.tag == "ol":
        current.index += 1
        prefix = f"{current.index}. "
    else:
        prefix = UNORDERED_BULLET

    indent = "  " * (len(ctx.lists) - 1) if len(ctx.lists) > 1 else ""
    content = _children_text(node, ctx).strip()
    return f"{indent}{prefix}{content}\n" if content else ""
