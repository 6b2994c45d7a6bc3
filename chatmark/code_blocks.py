# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Fenced code block extraction and restoration.

Fenced blocks are pulled out of the escaped text before block parsing and
replaced by placeholder tokens on lines of their own, so nothing inside a
code block is ever interpreted as Markdown.
"""

import re
from dataclasses import dataclass, field

from chatmark.tokens import Placeholders


#: Fenced block: opening fence, optional language, body, closing fence.
_FENCE_PATTERN = re.compile(r"```([A-Za-z0-9_-]*)\n?(.*?)```", re.DOTALL)

_LANGUAGE_STRIP_PATTERN = re.compile(r"[^a-z0-9_-]+")

DEFAULT_LANGUAGE = "plaintext"


def sanitize_code_language(language: str) -> str:
    """Reduce a fence language tag to ``[a-z0-9_-]`` for a CSS class name.

    Returns ``plaintext`` when nothing usable remains.
    """
    clean = _LANGUAGE_STRIP_PATTERN.sub("", language.lower())
    return clean or DEFAULT_LANGUAGE


@dataclass(frozen=True)
class CodeBlock:
    """An extracted fenced code block.

    Attributes:
        language: Sanitized language tag.
        body: Captured body, still HTML-escaped.
    """

    language: str
    body: str

    def to_html(self) -> str:
        """Render as ``<pre><code class="language-...">``."""
        return (
            f'<pre><code class="language-{self.language}">'
            f"{self.body.strip()}</code></pre>"
        )


@dataclass
class CodeBlockRegistry:
    """Ordered code blocks extracted from one message.

    Attributes:
        placeholders: Token factory for this message.
        blocks: Extracted blocks, addressed by token index.
    """

    placeholders: Placeholders
    blocks: list[CodeBlock] = field(default_factory=list)

    def add(self, block: CodeBlock) -> str:
        """Register *block* and return its placeholder token."""
        token = self.placeholders.token(len(self.blocks))
        self.blocks.append(block)
        return token

    def is_token_line(self, line: str) -> bool:
        """Check whether *line* consists of a single placeholder token."""
        return self.placeholders.pattern.fullmatch(line.strip()) is not None


def extract_code_blocks(text: str) -> tuple[str, CodeBlockRegistry]:
    """Replace fenced code blocks in *text* with placeholder tokens.

    Each token is surrounded by newlines so it becomes a standalone block
    for the block parser.  Unterminated fences are left untouched.

    Args:
        text: HTML-escaped message text.

    Returns:
        Tuple of (text with tokens, registry of extracted blocks).
    """
    registry = CodeBlockRegistry(Placeholders("CODEBLOCK", text))

    def replace(match: re.Match[str]) -> str:
        language = sanitize_code_language(match.group(1) or DEFAULT_LANGUAGE)
        token = registry.add(CodeBlock(language, match.group(2)))
        return f"\n{token}\n"

    return _FENCE_PATTERN.sub(replace, text), registry


def restore_code_blocks(html: str, registry: CodeBlockRegistry) -> str:
    """Substitute each placeholder token with its rendered code block.

    Tokens whose index is not in the registry resolve to empty string.
    """
    rendered = [block.to_html() for block in registry.blocks]
    return registry.placeholders.restore(html, rendered)
