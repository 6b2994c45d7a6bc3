# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Placeholder tokens for protected fragments.

Code blocks, inline code spans and generated link tags are swapped out for
opaque ``%%MARKER_<n>%%`` tokens while later parsing stages run, then
swapped back in.  The marker is chosen per call so that it never occurs in
the text being parsed, which makes it impossible for user input to forge a
token that resolves to protected content.
"""

import re


class Placeholders:
    """Factory and lookup for one kind of placeholder token.

    Attributes:
        marker: Marker string embedded in every token of this kind.
        pattern: Compiled regex matching a token; group 1 is the index.
    """

    def __init__(self, kind: str, text: str) -> None:
        marker = f"CHATMARK_{kind}"
        attempt = 0
        while marker in text:
            attempt += 1
            marker = f"CHATMARK{attempt}_{kind}"
        self.marker = marker
        self.pattern = re.compile(rf"%%{re.escape(marker)}_(\d+)%%")

    def token(self, index: int) -> str:
        """Return the token for *index*."""
        return f"%%{self.marker}_{index}%%"

    def restore(
        self, text: str, values: list[str], *, default: str = ""
    ) -> str:
        """Replace every token in *text* with its value.

        Args:
            text: Text containing tokens.
            values: Values addressed by token index.
            default: Replacement for tokens whose index is out of range.

        Returns:
            Text with tokens substituted.
        """

        def replace(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if index < len(values):
                return values[index]
            return default

        return self.pattern.sub(replace, text)
