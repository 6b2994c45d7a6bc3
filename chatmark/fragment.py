# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Minimal HTML fragment tree.

Parses the HTML produced by the renderer into ``Element``/``Text`` nodes so
text content can be inspected and rewritten without regexes touching tags
or attributes, then serializes it back.  Text is serialized with the same
escaping the renderer applies to raw input, so an untouched fragment
round-trips byte for byte.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from html.parser import HTMLParser

from chatmark.escaping import escape_attribute, escape_html


#: Elements that never have children or a closing tag.
VOID_ELEMENTS = frozenset({"br", "hr", "img", "input", "meta", "link", "wbr"})


@dataclass
class Text:
    """A text node holding decoded character data."""

    value: str


@dataclass
class Element:
    """An element node.

    Attributes:
        tag: Lowercase tag name (empty for the fragment root).
        attrs: Attributes in source order.
        children: Child nodes.
    """

    tag: str
    attrs: list[tuple[str, str | None]] = field(default_factory=list)
    children: list[Element | Text] = field(default_factory=list)

    def iter_text(
        self, *, skip: frozenset[str] = frozenset()
    ) -> Iterator[tuple[Element, int, Text]]:
        """Yield ``(parent, index, text)`` for every text node.

        Args:
            skip: Tag names whose whole subtree is excluded.
        """
        for index, child in enumerate(self.children):
            if isinstance(child, Text):
                yield self, index, child
            elif child.tag not in skip:
                yield from child.iter_text(skip=skip)

    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        return "".join(text.value for _, _, text in self.iter_text())


class _TreeBuilder(HTMLParser):
    """HTML parser that builds an ``Element`` tree."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = Element("")
        self._stack: list[Element] = [self.root]

    def handle_starttag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        """Open an element (void elements are closed immediately)."""
        element = Element(tag.lower(), list(attrs))
        self._stack[-1].children.append(element)
        if element.tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        """Handle ``<br/>``-style self-closing tags."""
        self._stack[-1].children.append(Element(tag.lower(), list(attrs)))

    def handle_endtag(self, tag: str) -> None:
        """Close the nearest open element named *tag*.

        Elements opened after it are closed implicitly.  A closing tag
        with no matching open element is ignored.
        """
        tag = tag.lower()
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data: str) -> None:
        """Append text, merging with a preceding text node."""
        children = self._stack[-1].children
        if children and isinstance(children[-1], Text):
            children[-1].value += data
        else:
            children.append(Text(data))


def parse_fragment(html: str) -> Element:
    """Parse an HTML fragment into a tree under a nameless root element."""
    builder = _TreeBuilder()
    builder.feed(html)
    builder.close()
    return builder.root


def serialize(node: Element | Text) -> str:
    """Serialize a node back to HTML.

    The nameless root element contributes only its children.
    """
    if isinstance(node, Text):
        return escape_html(node.value)

    inner = "".join(serialize(child) for child in node.children)
    if not node.tag:
        return inner

    attrs = "".join(
        f" {name}" if value is None else f' {name}="{escape_attribute(value)}"'
        for name, value in node.attrs
    )
    if node.tag in VOID_ELEMENTS:
        return f"<{node.tag}{attrs}>"
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
