# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for configuration loading."""

from pathlib import Path

import pytest

from chatmark.config import (
    AutoLinkRecord,
    ChatmarkConfig,
    ConfigError,
    get_config_path,
)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "chatmark.yaml"
    path.write_text(content)
    return path


class TestFromYaml:
    """Tests for ChatmarkConfig.from_yaml."""

    def test_loads_auto_links(self, tmp_path: Path) -> None:
        """Records are read in file order."""
        path = _write(
            tmp_path,
            "auto_links:\n"
            "  - phrase: liver\n"
            "    url: https://x.example\n"
            "  - phrase: Docs\n"
            "    url: /docs\n",
        )
        config = ChatmarkConfig.from_yaml(path)
        assert config.auto_links == (
            AutoLinkRecord("liver", "https://x.example"),
            AutoLinkRecord("Docs", "/docs"),
        )
        assert [rule.phrase for rule in config.auto_link_rules] == [
            "liver",
            "Docs",
        ]

    def test_env_tag(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """``!env`` values are resolved from the environment."""
        monkeypatch.setenv("CHATMARK_TEST_URL", "https://docs.example")
        path = _write(
            tmp_path,
            "auto_links:\n"
            "  - phrase: docs\n"
            "    url: !env CHATMARK_TEST_URL\n",
        )
        config = ChatmarkConfig.from_yaml(path)
        assert config.auto_links[0].url == "https://docs.example"

    def test_unset_env_drops_rule(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An unset variable leaves the URL empty and the rule unused."""
        monkeypatch.delenv("CHATMARK_TEST_URL", raising=False)
        path = _write(
            tmp_path,
            "auto_links:\n"
            "  - phrase: docs\n"
            "    url: !env CHATMARK_TEST_URL\n",
        )
        config = ChatmarkConfig.from_yaml(path)
        assert config.auto_links[0].url == ""
        assert len(config.auto_link_rules) == 0

    def test_unsafe_url_kept_as_record_but_not_rule(
        self, tmp_path: Path
    ) -> None:
        """Filtering happens when rules are prepared."""
        path = _write(
            tmp_path,
            "auto_links:\n"
            "  - phrase: bad\n"
            "    url: javascript:alert(1)\n",
        )
        config = ChatmarkConfig.from_yaml(path)
        assert len(config.auto_links) == 1
        assert not config.auto_link_rules

    def test_non_mapping_rows_skipped(self, tmp_path: Path) -> None:
        """Rows that are not mappings are ignored."""
        path = _write(
            tmp_path,
            "auto_links:\n"
            "  - just a string\n"
            "  - phrase: ok\n"
            "    url: /ok\n",
        )
        config = ChatmarkConfig.from_yaml(path)
        assert config.auto_links == (AutoLinkRecord("ok", "/ok"),)

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file is an empty configuration."""
        config = ChatmarkConfig.from_yaml(_write(tmp_path, ""))
        assert config.auto_links == ()

    def test_null_auto_links(self, tmp_path: Path) -> None:
        """``auto_links:`` with no value is treated as empty."""
        config = ChatmarkConfig.from_yaml(_write(tmp_path, "auto_links:\n"))
        assert config.auto_links == ()

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """A missing explicitly given file is an error."""
        with pytest.raises(ConfigError, match="not found"):
            ChatmarkConfig.from_yaml(tmp_path / "missing.yaml")

    def test_missing_default_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A missing default file yields defaults."""
        monkeypatch.setattr(
            "chatmark.config.get_config_path",
            lambda: tmp_path / "missing.yaml",
        )
        assert ChatmarkConfig.from_yaml() == ChatmarkConfig()

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """The top level must be a mapping."""
        with pytest.raises(ConfigError, match="YAML mapping"):
            ChatmarkConfig.from_yaml(_write(tmp_path, "- a\n- b\n"))

    def test_auto_links_not_a_list(self, tmp_path: Path) -> None:
        """``auto_links`` must be a list."""
        with pytest.raises(ConfigError, match="must be a YAML list"):
            ChatmarkConfig.from_yaml(_write(tmp_path, "auto_links: foo\n"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Syntax errors are reported as ConfigError."""
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ChatmarkConfig.from_yaml(_write(tmp_path, "auto_links: [\n"))


class TestAutoLinkRules:
    """Tests for the prepared rule set cache."""

    def test_computed_once(self) -> None:
        """The same rule set object is returned on every access."""
        config = ChatmarkConfig.from_raw(
            {"auto_links": [{"phrase": "a", "url": "/a"}]}
        )
        assert config.auto_link_rules is config.auto_link_rules

    def test_non_string_values_stringified(self) -> None:
        """Scalars parsed as numbers are used as text."""
        config = ChatmarkConfig.from_raw(
            {"auto_links": [{"phrase": 2024, "url": "/y"}]}
        )
        assert config.auto_links == (AutoLinkRecord("2024", "/y"),)


def test_get_config_path() -> None:
    """The default path ends with the app directory and file name."""
    path = get_config_path()
    assert path.name == "chatmark.yaml"
    assert path.parent.name == "chatmark"
