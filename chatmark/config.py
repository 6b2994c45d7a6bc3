# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Configuration for message rendering.

Configuration is loaded from a YAML file.  The default location follows
the XDG Base Directory Specification:

    ``$XDG_CONFIG_HOME/chatmark/chatmark.yaml``
    (typically ``~/.config/chatmark/chatmark.yaml``)

``!env`` tags resolve values from environment variables.

Example::

    auto_links:
      - phrase: Liver health
        url: https://example.com/liver
      - phrase: Docs
        url: !env CHATMARK_DOCS_URL

Auto-link rows are kept as plain records; filtering of unusable rows
(empty phrase, unsafe URL) happens when the rule set is prepared.
"""

import logging
import os
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path

import yaml
from platformdirs import user_config_path

from chatmark.autolink import AutoLinkRules, prepare_rules


logger = logging.getLogger(__name__)

#: Application name for XDG path resolution.
_APP_NAME = "chatmark"


def get_config_path() -> Path:
    """Return the default config file path.

    Uses XDG: ``$XDG_CONFIG_HOME/chatmark/chatmark.yaml`` (typically
    ``~/.config/chatmark/chatmark.yaml``).

    Returns:
        Path to the config file.
    """
    return user_config_path(_APP_NAME) / "chatmark.yaml"


class ConfigError(Exception):
    """Base exception for configuration errors."""


# ---------------------------------------------------------------------------
# YAML tag placeholders
# ---------------------------------------------------------------------------


class _EnvVar:
    """Placeholder for an unresolved ``!env VAR_NAME`` tag."""

    def __init__(self, var_name: str) -> None:
        self.var_name = var_name


def _env_constructor(loader: yaml.SafeLoader, node: yaml.Node) -> _EnvVar:
    """Handle ``!env VAR_NAME`` in YAML."""
    value = loader.construct_scalar(node)
    return _EnvVar(str(value))


def _make_loader() -> type[yaml.SafeLoader]:
    """Create a YAML loader that understands ``!env``."""

    class EnvLoader(yaml.SafeLoader):
        pass

    EnvLoader.add_constructor("!env", _env_constructor)
    return EnvLoader


def _resolve_str(value: object) -> str | None:
    """Resolve an ``_EnvVar`` or literal to a string.

    Returns None if the value is None or the env var is not set.
    """
    if isinstance(value, _EnvVar):
        return os.environ.get(value.var_name)
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class AutoLinkRecord:
    """A configured phrase to URL mapping, before preparation.

    Attributes:
        phrase: Phrase as written in the config (may be empty).
        url: URL as written in the config (may be empty).
    """

    phrase: str
    url: str


@dataclass(frozen=True)
class ChatmarkConfig:
    """Rendering configuration.

    Attributes:
        auto_links: Auto-link records in priority order.
    """

    auto_links: tuple[AutoLinkRecord, ...] = ()

    @cached_property
    def auto_link_rules(self) -> AutoLinkRules:
        """Prepared rule set, computed once per config instance."""
        rules = prepare_rules(self.auto_links)
        logger.debug(
            "Prepared %d of %d auto-link rules",
            len(rules),
            len(self.auto_links),
        )
        return rules

    @classmethod
    def from_yaml(cls, config_path: Path | None = None) -> "ChatmarkConfig":
        """Load configuration from a YAML file.

        Args:
            config_path: Path to YAML config file.  Defaults to
                ``~/.config/chatmark/chatmark.yaml`` (XDG); a missing
                default file yields an empty configuration.

        Returns:
            ChatmarkConfig instance.

        Raises:
            ConfigError: If an explicitly given file is missing or the
                file is malformed.
        """
        if config_path is None:
            config_path = get_config_path()
            if not config_path.exists():
                logger.debug("No config at %s, using defaults", config_path)
                return cls()

        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            with open(config_path) as f:
                raw = yaml.load(f, Loader=_make_loader())
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(
                f"Config file must be a YAML mapping: {config_path}"
            )

        config = cls.from_raw(raw)
        logger.info(
            "Config loaded from %s: %d auto-link records",
            config_path,
            len(config.auto_links),
        )
        return config

    @classmethod
    def from_raw(cls, raw: dict) -> "ChatmarkConfig":
        """Build config from a parsed (but unresolved) YAML mapping."""
        raw_links = raw.get("auto_links", [])
        if raw_links is None:
            raw_links = []
        if not isinstance(raw_links, list):
            raise ConfigError("'auto_links' must be a YAML list")

        records: list[AutoLinkRecord] = []
        for index, row in enumerate(raw_links):
            if not isinstance(row, dict):
                logger.debug("Skipping auto_links[%d]: not a mapping", index)
                continue
            records.append(
                AutoLinkRecord(
                    phrase=_resolve_str(row.get("phrase")) or "",
                    url=_resolve_str(row.get("url")) or "",
                )
            )

        return cls(auto_links=tuple(records))
