# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Link href sanitization.

Only a fixed allowlist of URL schemes may become a clickable link.
Relative references, anchors and protocol-relative URLs are accepted
because they cannot switch the browser into a script-executing scheme.
"""

import re

from chatmark.escaping import decode_entities, escape_attribute


#: Schemes allowed in rendered links (compared lowercase).
ALLOWED_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

#: Prefixes of relative, anchor and protocol-relative references.
_RELATIVE_PREFIXES = ("#", "/", "./", "../", "?", "//")

#: Control characters and whitespace ignored when sniffing the scheme.
_IGNORED_CHARS_PATTERN = re.compile(r"[\x00-\x1f\x7f\s]+")

_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*):")


def sanitize_href(raw: str) -> str:
    """Return an attribute-safe href, or empty string if *raw* is unsafe.

    Entities are decoded first so a scheme cannot hide behind
    ``&#106;avascript:``, and whitespace/control characters are removed
    before the scheme is inspected so ``java\\tscript:`` is caught too.

    Args:
        raw: Candidate URL, possibly HTML-escaped.

    Returns:
        The decoded URL, HTML-attribute-escaped, or ``""`` when rejected.
    """
    if not raw:
        return ""

    decoded = decode_entities(raw).strip()
    if not decoded:
        return ""

    cleaned = _IGNORED_CHARS_PATTERN.sub("", decoded)
    if not cleaned:
        return ""

    if cleaned.startswith(_RELATIVE_PREFIXES):
        return escape_attribute(decoded)

    match = _SCHEME_PATTERN.match(cleaned)
    if match and match.group(1).lower() not in ALLOWED_SCHEMES:
        return ""

    return escape_attribute(decoded)
