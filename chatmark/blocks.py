# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Block-level Markdown rendering.

Escaped message text is scanned line by line.  Each line is classified
into a ``LineKind`` by ``classify_line``; the kinds are checked in a fixed
priority order, so a line such as ``***`` is a rule, never an unordered
list item or emphasis.

Supported syntax:
- Headings: # through ######
- Horizontal rules: --- or *** (three or more)
- Blockquotes: > prefix (contents are parsed recursively)
- Unordered lists: -, + or * followed by a space
- Ordered lists: 1. followed by a space
- Code block placeholders produced by ``extract_code_blocks``
- Paragraphs: everything else
"""

import re
from collections.abc import Callable
from enum import Enum

from chatmark.autolink import EMPTY_RULES, AutoLinkRules
from chatmark.inline import render_inline


class LineKind(Enum):
    """Classification of a single source line, in priority order."""

    BLANK = "blank"
    CODE_BLOCK = "code_block"
    RULE = "rule"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    UNORDERED_ITEM = "unordered_item"
    ORDERED_ITEM = "ordered_item"
    TEXT = "text"


_RULE_PATTERN = re.compile(r"^\s{0,3}(?:-{3,}|\*{3,})\s*$")
_HEADING_PATTERN = re.compile(r"^\s{0,3}(#{1,6})\s+(.+?)\s*$")
# Text is already escaped, so the quote marker arrives as "&gt;".
_BLOCKQUOTE_PATTERN = re.compile(r"^\s{0,3}&gt;\s?")
_UNORDERED_PATTERN = re.compile(r"^\s{0,3}[-+*]\s+")
_ORDERED_PATTERN = re.compile(r"^\s{0,3}\d+\.\s+")

#: Recognizes a code block placeholder line; None disables the check.
TokenLineCheck = Callable[[str], bool] | None


def classify_line(line: str, is_token_line: TokenLineCheck = None) -> LineKind:
    """Classify *line* into the highest-priority matching ``LineKind``.

    Args:
        line: One line of escaped text.
        is_token_line: Predicate for code block placeholder lines.

    Returns:
        The line kind.
    """
    if not line.strip():
        return LineKind.BLANK
    if is_token_line is not None and is_token_line(line):
        return LineKind.CODE_BLOCK
    if _RULE_PATTERN.match(line):
        return LineKind.RULE
    if _HEADING_PATTERN.match(line):
        return LineKind.HEADING
    if _BLOCKQUOTE_PATTERN.match(line):
        return LineKind.BLOCKQUOTE
    if _UNORDERED_PATTERN.match(line):
        return LineKind.UNORDERED_ITEM
    if _ORDERED_PATTERN.match(line):
        return LineKind.ORDERED_ITEM
    return LineKind.TEXT


_LIST_PATTERNS = {
    LineKind.UNORDERED_ITEM: (_UNORDERED_PATTERN, "ul"),
    LineKind.ORDERED_ITEM: (_ORDERED_PATTERN, "ol"),
}


def parse_blocks(
    text: str,
    rules: AutoLinkRules = EMPTY_RULES,
    is_token_line: TokenLineCheck = None,
) -> list[str]:
    """Render escaped text into a list of block-level HTML fragments.

    Code block placeholder lines are emitted as-is for later restoration.
    Lists continue across blank lines when the next non-blank line is an
    item of the same kind.  Paragraph lines are trimmed and joined with a
    single space; empty paragraphs are dropped.

    Args:
        text: HTML-escaped text, possibly containing placeholder lines.
        rules: Auto-link rules for inline rendering.
        is_token_line: Predicate for code block placeholder lines.

    Returns:
        Block HTML fragments in document order.
    """
    if not text:
        return []

    lines = text.split("\n")
    kinds = [classify_line(line, is_token_line) for line in lines]
    out: list[str] = []
    i = 0

    while i < len(lines):
        line = lines[i]
        kind = kinds[i]

        if kind is LineKind.BLANK:
            i += 1

        elif kind is LineKind.CODE_BLOCK:
            out.append(line.strip())
            i += 1

        elif kind is LineKind.RULE:
            out.append("<hr>")
            i += 1

        elif kind is LineKind.HEADING:
            match = _HEADING_PATTERN.match(line)
            assert match is not None
            level = len(match.group(1))
            content = render_inline(match.group(2), rules)
            out.append(f"<h{level}>{content}</h{level}>")
            i += 1

        elif kind is LineKind.BLOCKQUOTE:
            quote_lines: list[str] = []
            while i < len(lines) and kinds[i] is LineKind.BLOCKQUOTE:
                quote_lines.append(_BLOCKQUOTE_PATTERN.sub("", lines[i], 1))
                i += 1
            inner = parse_blocks("\n".join(quote_lines), rules, is_token_line)
            out.append(f"<blockquote>{''.join(inner)}</blockquote>")

        elif kind in _LIST_PATTERNS:
            pattern, tag = _LIST_PATTERNS[kind]
            items: list[str] = []
            while i < len(lines):
                if kinds[i] is LineKind.BLANK:
                    # Blank runs stay inside the list if another item follows.
                    j = i + 1
                    while j < len(lines) and kinds[j] is LineKind.BLANK:
                        j += 1
                    if j < len(lines) and kinds[j] is kind:
                        i = j
                        continue
                    break
                if kinds[i] is not kind:
                    break
                item = render_inline(pattern.sub("", lines[i], 1), rules)
                items.append(f"<li>{item}</li>")
                i += 1
            out.append(f"<{tag}>{''.join(items)}</{tag}>")

        else:
            para_lines: list[str] = []
            while i < len(lines) and kinds[i] is LineKind.TEXT:
                para_lines.append(lines[i].strip())
                i += 1
            para = " ".join(para_lines).strip()
            if para:
                out.append(f"<p>{render_inline(para, rules)}</p>")

    return out


def render_blocks(
    text: str,
    rules: AutoLinkRules = EMPTY_RULES,
    is_token_line: TokenLineCheck = None,
) -> str:
    """Render escaped text to concatenated block HTML."""
    return "".join(parse_blocks(text, rules, is_token_line))


_BETWEEN_LISTS = (
    r"(?:(?!</?ol>).)*?"  # any content that does not open or close a list
)

#: ``</ol>`` followed by interleaved blocks and another ``<ol>``.
_SPLIT_ORDERED_LIST_PATTERN = re.compile(
    r"</ol>(\s*(?:"
    rf"<p>{_BETWEEN_LISTS}</p>"
    rf"|<ul>{_BETWEEN_LISTS}</ul>"
    rf"|<blockquote>{_BETWEEN_LISTS}</blockquote>"
    r"|<hr>"
    r")+\s*)<ol>",
    re.DOTALL,
)
_ADJACENT_ORDERED_LISTS_PATTERN = re.compile(r"</ol>\s*<ol>")


def merge_consecutive_ordered_lists(html: str) -> str:
    """Merge ordered lists split apart by interleaved content.

    AI answers often number steps with explanatory paragraphs between
    them; each fragment would otherwise restart its numbering at 1.  The
    intervening paragraphs, unordered lists, blockquotes and rules are
    moved inside the first list and the lists are joined.

    Args:
        html: Block HTML.

    Returns:
        HTML with split ordered lists merged.
    """
    if not html:
        return html

    result = html
    previous = None
    while result != previous:
        previous = result
        result = _SPLIT_ORDERED_LIST_PATTERN.sub(r"\1</ol><ol>", result)

    return _ADJACENT_ORDERED_LISTS_PATTERN.sub("", result)
