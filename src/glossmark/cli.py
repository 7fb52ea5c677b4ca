"""Command-line tools for annotated editor documents.

Usage:
    glossmark export notes.html                  # Markdown to stdout
    glossmark export notes.html -o notes.md      # Markdown to a file
    glossmark export notes.html --clear-formatting
    glossmark markers notes.html                 # table of tooltips
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from glossmark import _setup_logging, get_version_string
from glossmark.document.tree import text_content
from glossmark.editor import Editor

console = Console()
logger = logging.getLogger(__name__)

MAX_PREVIEW_LENGTH = 40


def _load_editor(path: Path) -> Editor | None:
    """Read an HTML file into an Editor, reporting a missing file."""
    try:
        html = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        console.print(f"[red]Error:[/] file not found: {path}")
        return None
    return Editor(html)


def _preview(text: str) -> str:
    text = " ".join(text.split())
    if len(text) > MAX_PREVIEW_LENGTH:
        return f"{text[:MAX_PREVIEW_LENGTH]}…"
    return text


def _cmd_export(args: argparse.Namespace) -> int:
    editor = _load_editor(args.input)
    if editor is None:
        return 1

    if args.clear_formatting:
        editor.clear_formatting()

    markdown = editor.export_markdown()
    if args.output is None:
        # Plain write: rich markup parsing would eat [link](…) brackets.
        sys.stdout.write(markdown + "\n")
        return 0

    args.output.write_text(markdown, encoding="utf-8")
    console.print(f"[green]Markdown written:[/] {args.output}")
    return 0


def _cmd_markers(args: argparse.Namespace) -> int:
    editor = _load_editor(args.input)
    if editor is None:
        return 1

    entries = editor.overlay.list_markers()
    if not entries:
        console.print("[dim]No tooltips in this document.[/]")
        return 0

    table = Table(title=f"Tooltips in {args.input.name}")
    table.add_column("#", justify="right")
    table.add_column("Label")
    table.add_column("Tooltip", style="cyan")
    table.add_column("Annotated text")
    table.add_column("Id", style="dim")

    for entry in entries:
        table.add_row(
            str(entry.display_index),
            escape(entry.label),
            escape(entry.text),
            escape(_preview(text_content(entry.marker))),
            entry.marker_id or "",
        )
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the glossmark subcommands."""
    parser = argparse.ArgumentParser(
        prog="glossmark",
        description="Export and inspect tooltip-annotated editor documents.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version_string()}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to console"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # export
    export_p = sub.add_parser("export", help="Convert editor HTML to Markdown")
    export_p.add_argument("input", type=Path, help="Editor HTML file")
    export_p.add_argument(
        "-o", "--output", type=Path, default=None, help="Write Markdown here"
    )
    export_p.add_argument(
        "--clear-formatting",
        action="store_true",
        help="Drop <font> and styled <span> wrappers before converting",
    )
    export_p.set_defaults(handler=_cmd_export)

    # markers
    markers_p = sub.add_parser("markers", help="List tooltip markers")
    markers_p.add_argument("input", type=Path, help="Editor HTML file")
    markers_p.set_defaults(handler=_cmd_markers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    _setup_logging(console_level=logging.DEBUG if args.verbose else None)
    logger.debug("Running %s", args.command)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
