# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Shared pytest fixtures used across multiple test modules."""

import pytest

from chatmark.autolink import AutoLinkRules, prepare_rules


@pytest.fixture
def liver_rules() -> AutoLinkRules:
    """Rule set with a single word phrase."""
    return prepare_rules([{"phrase": "liver", "url": "https://x.example"}])


@pytest.fixture
def shipping_rules() -> AutoLinkRules:
    """Overlapping phrases where the longer one must win."""
    return prepare_rules(
        [
            {"phrase": "ship", "url": "https://a.example"},
            {"phrase": "shipping", "url": "https://b.example"},
        ]
    )
