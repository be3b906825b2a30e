"""Command-line front door for lazypager.

Parses CLI options, merges them with persisted preferences, and builds a
reader for a file or for piped stdin. Then dispatches into the interactive
pager runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_preferences
from .highlight import read_text
from .reader import Reader
from .runtime import run_pager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s[%(process)d]: %(levelname)s %(message)s"


def configure_logging(log_path: Path | None) -> None:
    """Send debug records to ``log_path``; the terminal itself belongs to the pager."""
    if log_path is None:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.FileHandler(log_path, mode="a", encoding="utf-8")],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazypager",
        description="Page through a file or piped input with search and line wrapping.",
    )
    parser.add_argument("path", nargs="?", default=None, help="File to page. Reads stdin when omitted.")
    parser.add_argument("--style", default=None, help="Pygments style name for syntax highlighting.")
    parser.add_argument("--no-color", action="store_true", help="Disable syntax highlighting.")
    parser.add_argument("--wrap", action="store_true", help="Wrap long lines.")
    parser.add_argument("--no-wrap", dest="wrap", action="store_false", help="Do not wrap long lines.")
    parser.add_argument("--no-linenumbers", action="store_true", help="Hide line numbers.")
    parser.add_argument("--no-statusbar", action="store_true", help="Hide the status bar.")
    parser.add_argument("--nopager", action="store_true", help="Print output directly without interactive paging.")
    parser.add_argument("--debug-log", metavar="PATH", type=Path, default=None, help="Append debug logging to PATH.")
    parser.set_defaults(wrap=None)
    return parser


def build_reader(path_arg: str | None, style: str | None) -> Reader:
    """Load ``path_arg`` eagerly, or stream stdin when no path is given."""
    if path_arg is None:
        if sys.stdin.isatty():
            raise SystemExit('Missing filename ("lazypager --help" for help)')
        return Reader.from_stream(sys.stdin.buffer)

    path = Path(path_arg)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if path.is_dir():
        raise SystemExit(f"Is a directory: {path}")
    try:
        text = read_text(path)
    except OSError as exc:
        raise SystemExit(f"Cannot read {path}: {exc}") from exc
    return Reader.from_text(text, name=str(path), style=style)


def main() -> None:
    """Parse CLI arguments and launch the pager."""
    args = build_parser().parse_args()
    configure_logging(args.debug_log)

    preferences = load_preferences()
    style = None if args.no_color else (args.style or preferences.style)
    wrap_long_lines = preferences.wrap_long_lines if args.wrap is None else args.wrap
    show_line_numbers = preferences.show_line_numbers and not args.no_linenumbers
    show_status_bar = preferences.show_status_bar and not args.no_statusbar

    reader = build_reader(args.path, style)
    logger.debug(
        "starting: path=%s wrap=%s line_numbers=%s status_bar=%s style=%s",
        args.path,
        wrap_long_lines,
        show_line_numbers,
        show_status_bar,
        style,
    )
    run_pager(reader, wrap_long_lines, show_line_numbers, show_status_bar, args.nopager)
