# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Phrase to link substitution ("auto-links").

Configured phrases are located in the text content of already rendered
inline HTML and wrapped in anchors.  Matching is case-insensitive and
literal, respects word boundaries, never nests inside an existing anchor
or code element, and lets longer phrases claim contested text first.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from chatmark.escaping import decode_entities
from chatmark.fragment import Element, Text, parse_fragment, serialize
from chatmark.href import sanitize_href


logger = logging.getLogger(__name__)

#: Upper bound on prepared rules; bounds matching cost per text node.
MAX_RULES = 200

#: Text under these elements is never auto-linked.
_EXCLUDED_TAGS = frozenset({"a", "code", "pre"})

LINK_TARGET_ATTRS: tuple[tuple[str, str], ...] = (
    ("target", "_blank"),
    ("rel", "noopener noreferrer"),
)


def is_word_char(ch: str) -> bool:
    """Check whether *ch* is an ASCII letter or digit."""
    return len(ch) == 1 and ch.isascii() and ch.isalnum()


def _lower(text: str) -> str:
    """Lowercase *text* without changing its length.

    A few characters (e.g. ``İ``) lowercase to more than one code point;
    only the first is kept so offsets stay aligned with the original.
    """
    lowered = text.lower()
    if len(lowered) == len(text):
        return lowered
    return "".join(ch.lower()[:1] for ch in text)


@dataclass(frozen=True)
class AutoLinkRule:
    """A prepared phrase to URL rule.

    Attributes:
        phrase: Trimmed phrase as configured.
        phrase_lower: Lowercased phrase used for searching.
        href: Decoded, sanitized URL.
        starts_word: First character of the phrase is a word character.
        ends_word: Last character of the phrase is a word character.
    """

    phrase: str
    phrase_lower: str
    href: str
    starts_word: bool
    ends_word: bool

    @property
    def length(self) -> int:
        return len(self.phrase)


@dataclass(frozen=True)
class AutoLinkRules:
    """Immutable rule set sorted by phrase length, longest first."""

    rules: tuple[AutoLinkRule, ...] = ()

    def __iter__(self) -> Iterator[AutoLinkRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __bool__(self) -> bool:
        return bool(self.rules)


EMPTY_RULES = AutoLinkRules()


@dataclass(frozen=True)
class Match:
    """An accepted phrase occurrence in one text node (half-open)."""

    start: int
    end: int
    href: str


def _field(record: object, name: str) -> object:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def prepare_rules(records: Iterable[object]) -> AutoLinkRules:
    """Build the rule set from configured ``{phrase, url}`` records.

    Records may be mappings or objects with ``phrase``/``url`` attributes.
    Records with an empty phrase or URL, or a URL rejected by
    ``sanitize_href``, are skipped.  At most ``MAX_RULES`` rules are kept.

    Args:
        records: Configured records in priority order.

    Returns:
        Rules sorted by phrase length descending (ties keep input order).
    """
    prepared: list[AutoLinkRule] = []
    for position, record in enumerate(records):
        if len(prepared) >= MAX_RULES:
            logger.warning(
                "Auto-link rules truncated to %d entries (record %d onward "
                "ignored)",
                MAX_RULES,
                position,
            )
            break

        raw_phrase = _field(record, "phrase")
        raw_url = _field(record, "url")
        phrase = str(raw_phrase).strip() if raw_phrase is not None else ""
        url = str(raw_url).strip() if raw_url is not None else ""
        if not phrase or not url:
            logger.debug("Skipping auto-link record %d: empty field", position)
            continue

        safe_href = sanitize_href(url)
        if not safe_href:
            logger.debug("Skipping auto-link record %d: unsafe URL", position)
            continue

        prepared.append(
            AutoLinkRule(
                phrase=phrase,
                phrase_lower=_lower(phrase),
                href=decode_entities(safe_href),
                starts_word=is_word_char(phrase[0]),
                ends_word=is_word_char(phrase[-1]),
            )
        )

    prepared.sort(key=lambda rule: rule.length, reverse=True)
    return AutoLinkRules(tuple(prepared))


def find_matches(text: str, rules: Iterable[AutoLinkRule]) -> list[Match]:
    """Find non-overlapping rule matches in a single text run.

    Rules are tried in the given order, so with a length-sorted rule set a
    longer phrase wins any span it shares with a shorter one.

    Args:
        text: Decoded text content.
        rules: Prepared rules, longest phrase first.

    Returns:
        Accepted matches sorted by start offset.
    """
    if not text:
        return []

    lower = _lower(text)
    matches: list[Match] = []

    def overlaps(start: int, end: int) -> bool:
        return any(start < m.end and m.start < end for m in matches)

    for rule in rules:
        needle = rule.phrase_lower
        if not needle:
            continue

        idx = lower.find(needle)
        while idx != -1:
            start = idx
            end = idx + len(needle)

            # Avoid matching inside longer words ("liver" in "Deliver").
            if rule.starts_word and start > 0 and is_word_char(text[start - 1]):
                idx = lower.find(needle, idx + 1)
                continue
            if rule.ends_word and end < len(text) and is_word_char(text[end]):
                idx = lower.find(needle, idx + 1)
                continue

            if not overlaps(start, end):
                matches.append(Match(start, end, rule.href))
            idx = lower.find(needle, end)

    matches.sort(key=lambda m: m.start)
    return matches


def _link_runs(text: str, matches: list[Match]) -> list[Element | Text]:
    """Split *text* into plain runs and anchors for *matches*."""
    nodes: list[Element | Text] = []
    last = 0
    for match in matches:
        if match.start < last:
            continue
        if match.start > last:
            nodes.append(Text(text[last : match.start]))
        anchor = Element("a", [("href", match.href), *LINK_TARGET_ATTRS])
        anchor.children.append(Text(text[match.start : match.end]))
        nodes.append(anchor)
        last = match.end
    if last < len(text):
        nodes.append(Text(text[last:]))
    return nodes


def _link_text(
    text: str,
    rules: AutoLinkRules,
    protected: re.Pattern[str] | None,
) -> list[Element | Text] | None:
    """Link one text node, keeping *protected* tokens intact.

    Returns the replacement nodes, or None when nothing matched.
    """
    segments: list[tuple[str, bool]] = []
    if protected is None:
        segments.append((text, True))
    else:
        last = 0
        for token in protected.finditer(text):
            segments.append((text[last : token.start()], True))
            segments.append((token.group(0), False))
            last = token.end()
        segments.append((text[last:], True))

    replaced = False
    nodes: list[Element | Text] = []
    for segment, eligible in segments:
        if not segment:
            continue
        matches = find_matches(segment, rules) if eligible else []
        if matches:
            replaced = True
            nodes.extend(_link_runs(segment, matches))
        else:
            nodes.append(Text(segment))
    return nodes if replaced else None


def apply_auto_links(
    html: str,
    rules: AutoLinkRules,
    *,
    protected: re.Pattern[str] | None = None,
) -> str:
    """Wrap configured phrases in anchors within an inline HTML fragment.

    Text inside ``<a>``, ``<code>`` and ``<pre>`` is left alone, as is
    whitespace-only text.

    Args:
        html: Inline HTML fragment.
        rules: Prepared rule set.
        protected: Pattern of placeholder tokens that must not be split
            or linked.

    Returns:
        The fragment with auto-links applied; *html* itself when no rules
        are configured.
    """
    if not html or not rules:
        return html

    root = parse_fragment(html)
    replacements: list[tuple[Element, int, list[Element | Text]]] = []
    for parent, index, text in root.iter_text(skip=_EXCLUDED_TAGS):
        if not text.value.strip():
            continue
        nodes = _link_text(text.value, rules, protected)
        if nodes is not None:
            replacements.append((parent, index, nodes))

    if not replacements:
        return html

    # Splice from the end so earlier indices stay valid.
    for parent, index, nodes in reversed(replacements):
        parent.children[index : index + 1] = nodes

    return serialize(root)
