"""
Command-line access to the content normalization pipeline.

Usage:
    python -m editor_content.main detect [FILE]
    python -m editor_content.main render [--no-escape] [FILE]
    python -m editor_content.main text [FILE]
    python -m editor_content.main commit ORIGINAL NEW_TEXT
    python -m editor_content.main from-html [FILE]

FILE defaults to stdin.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from editor_content.config import JSON_INDENT, setup_logging
from editor_content.detector import detect
from editor_content.editable import commit_edited_text, to_editable_text
from editor_content.html_import import html_to_document
from editor_content.renderer import process_content

logger = logging.getLogger(__name__)


def _read(path: Optional[str]) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="editor-content", description="Normalize stored editor content")
    commands = parser.add_subparsers(dest="command", required=True)

    detect_cmd = commands.add_parser("detect", help="Print the content kind")
    detect_cmd.add_argument("file", nargs="?")

    render_cmd = commands.add_parser("render", help="Print content as display HTML")
    render_cmd.add_argument("file", nargs="?")
    render_cmd.add_argument("--no-escape", action="store_true", help="Insert block text verbatim")

    text_cmd = commands.add_parser("text", help="Print content as editable text")
    text_cmd.add_argument("file", nargs="?")

    commit_cmd = commands.add_parser("commit", help="Commit edited text against the original content")
    commit_cmd.add_argument("original")
    commit_cmd.add_argument("new_text")

    import_cmd = commands.add_parser("from-html", help="Convert an HTML fragment to a block document")
    import_cmd.add_argument("file", nargs="?")

    return parser


def run(args: argparse.Namespace) -> str:
    if args.command == "detect":
        return detect(_read(args.file)).value

    if args.command == "render":
        return process_content(_read(args.file), escape=False if args.no_escape else None)

    if args.command == "text":
        return to_editable_text(_read(args.file)) or ""

    if args.command == "commit":
        return commit_edited_text(_read(args.original), _read(args.new_text))

    if args.command == "from-html":
        return html_to_document(_read(args.file)).to_json(indent=JSON_INDENT)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        output = run(args)
    except (OSError, UnicodeDecodeError) as e:
        logger.critical(f"Could not read input: {e}")
        return 1

    sys.stdout.write(output)
    if output and not output.endswith("\n"):
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
