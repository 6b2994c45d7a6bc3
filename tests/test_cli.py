# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for the chatmark command line interface."""

import io
from pathlib import Path

import pytest

from chatmark import cli
from tests.helpers import anchor


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from replacing pytest's log handlers."""
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "chatmark.yaml"
    path.write_text(
        "auto_links:\n  - phrase: liver\n    url: https://x.example\n"
    )
    return path


class TestRender:
    """Tests for the render subcommand."""

    def test_render_file(self, tmp_path, config_file, capsys):
        """A message file is rendered to HTML on stdout."""
        message = tmp_path / "message.md"
        message.write_text("**liver** health")
        code = cli.main(["render", str(message), "--config", str(config_file)])
        assert code == 0
        out = capsys.readouterr().out
        assert out == (
            f"<p><strong>{anchor('https://x.example', 'liver')}</strong>"
            " health</p>\n"
        )

    def test_render_stdin_as_text(self, config_file, capsys, monkeypatch):
        """Stdin is read when no file is given; --text gives plain text."""
        monkeypatch.setattr("sys.stdin", io.StringIO("# Hi\n\n- a\n- b"))
        code = cli.main(["render", "--text", "--config", str(config_file)])
        assert code == 0
        assert capsys.readouterr().out == "Hi\n\n• a\n• b\n"

    def test_dash_reads_stdin(self, config_file, capsys, monkeypatch):
        """A file argument of '-' reads stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("plain"))
        code = cli.main(["render", "-", "--config", str(config_file)])
        assert code == 0
        assert capsys.readouterr().out == "<p>plain</p>\n"

    def test_missing_config(self, tmp_path, capsys):
        """A missing config file is reported with exit code 1."""
        code = cli.main(
            ["render", "-", "--config", str(tmp_path / "missing.yaml")]
        )
        assert code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_missing_message_file(self, tmp_path, config_file, capsys):
        """An unreadable message file is reported with exit code 1."""
        code = cli.main(
            [
                "render",
                str(tmp_path / "nope.md"),
                "--config",
                str(config_file),
            ]
        )
        assert code == 1
        assert "Error:" in capsys.readouterr().err


def test_requires_subcommand():
    """Running without a subcommand is a usage error."""
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 2
