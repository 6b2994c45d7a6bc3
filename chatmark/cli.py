# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command line interface for rendering chat messages.

Usage:
    chatmark render [FILE] [--config PATH] [--text] [-v]

Reads the message from FILE, or stdin when FILE is omitted or ``-``, and
writes HTML (or plain text with ``--text``) to stdout.

Exit codes:
    0 - Success
    1 - Configuration or I/O error
"""

import argparse
import logging
import sys
from pathlib import Path

from chatmark.config import ChatmarkConfig, ConfigError
from chatmark.logging import configure_logging
from chatmark.renderer import MessageRenderer


logger = logging.getLogger(__name__)


def _read_input(source: str | None) -> str:
    if source is None or source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def cmd_render(args: argparse.Namespace) -> int:
    """Render a message to stdout.

    Returns:
        Exit code.
    """
    try:
        config = ChatmarkConfig.from_yaml(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        raw = _read_input(args.file)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    renderer = MessageRenderer(config.auto_link_rules)
    logger.debug("Rendering %d chars", len(raw))
    if args.text:
        print(renderer.render_text(raw))
    else:
        print(renderer.render(raw))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        prog="chatmark",
        description="Render untrusted chat text to safe HTML",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser(
        "render",
        help="Render a message",
        description="Render a Markdown chat message to HTML",
    )
    render_parser.add_argument(
        "file",
        nargs="?",
        help="Message file (default: stdin)",
    )
    render_parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: ~/.config/chatmark/chatmark.yaml)",
    )
    render_parser.add_argument(
        "--text",
        action="store_true",
        help="Output plain text instead of HTML",
    )
    render_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "render":
        return cmd_render(args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
