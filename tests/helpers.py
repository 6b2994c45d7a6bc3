# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Helpers for building expected HTML in tests."""

LINK_ATTRS = 'target="_blank" rel="noopener noreferrer"'


def anchor(href: str, text: str) -> str:
    """Expected HTML of a rendered link."""
    return f'<a href="{href}" {LINK_ATTRS}>{text}</a>'
