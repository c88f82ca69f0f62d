"""Command-line front door for fuzzview.

Runs a preview command against entries given as arguments (or read from
stdin) and prints the rendered preview pane for each one. Uses the same
previewer and pane code paths as the interactive finder.
"""

from __future__ import annotations

import argparse
import shutil
import sys
from dataclasses import replace
from pathlib import Path

from .config import load_preview_settings
from .entry import Entry, PreviewCommand
from .logs import init_logging, shutdown_logging
from .preview import Preview, PreviewCommandError, PreviewPane, Previewer, RenderedPreviewCache, render_title


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _read_stdin_entries() -> list[str]:
    return [line.rstrip("\r\n") for line in sys.stdin]


def collect_preview(previewer: Previewer, entry: Entry, command: PreviewCommand) -> Preview:
    """Request a preview and wait for its background job to settle."""
    previewer.preview(entry, command)
    previewer.wait_idle()
    return previewer.preview(entry, command)


def format_preview_block(
    pane: PreviewPane,
    entry: Entry,
    preview: Preview,
    command: PreviewCommand,
    width: int,
    height: int,
) -> str:
    rows = pane.render(entry, preview, command, width, height)
    out = [render_title(preview, width), *rows]
    return "\n".join(out) + "\n"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fuzzview",
        description="Run a preview command against entries and print the rendered preview pane.",
    )
    parser.add_argument("entries", nargs="*", help="Entries to preview. Read from stdin when omitted.")
    parser.add_argument(
        "-p",
        "--preview",
        required=True,
        metavar="TEMPLATE",
        help="Preview command; {} is the entry, {N} its Nth delimiter-separated field.",
    )
    parser.add_argument("-d", "--delimiter", default=None, help="Field delimiter for {N} placeholders.")
    parser.add_argument("--width", type=_positive_int, default=None, help="Pane width (default: terminal width).")
    parser.add_argument("--height", type=_positive_int, default=None, help="Pane height (default: terminal height).")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Seconds before a preview command is abandoned.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("--log-level", default=None, help="Log level (default: $FUZZVIEW_LOG or INFO).")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and print one preview block per entry.

    Returns ``2`` when the preview template does not fit the entries.
    """
    args = build_parser().parse_args(argv)
    init_logging(args.log_file, args.log_level)
    try:
        settings = load_preview_settings()
        if args.timeout is not None:
            settings = replace(settings, preview_command_timeout=args.timeout)
        command = PreviewCommand(args.preview, args.delimiter or settings.default_delimiter)

        term = shutil.get_terminal_size((80, 24))
        width = args.width or max(1, term.columns)
        height = args.height or max(1, term.lines)

        names = args.entries or _read_stdin_entries()
        entries = [Entry(name) for name in names if name.strip()]

        previewer = Previewer.from_settings(settings)
        pane = PreviewPane(RenderedPreviewCache(settings.rendered_cache_size))
        for entry in entries:
            try:
                preview = collect_preview(previewer, entry, command)
            except PreviewCommandError as exc:
                print(f"fuzzview: {exc}", file=sys.stderr)
                return 2
            sys.stdout.write(format_preview_block(pane, entry, preview, command, width, height))
        sys.stdout.flush()
        return 0
    finally:
        shutdown_logging()


if __name__ == "__main__":
    raise SystemExit(main())
