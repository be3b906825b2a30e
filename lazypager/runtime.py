"""Interactive pager bootstrap and main event loop.

The loop is single-threaded: keys are handled one at a time and each handler
runs to completion before the next key is read. The only other thread is the
reader's stream worker; the loop polls it for new lines between keys.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from .config import save_wrap_long_lines
from .input import read_key
from .pager import Pager
from .position import LineIndex
from .reader import Reader
from .screen import TerminalScreen
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    poll_timeout_ms: int = 100


def run_main_loop(
    pager: Pager,
    terminal: TerminalController,
    key_fd: int,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
    on_wrap_changed: Callable[[bool], None] | None = None,
) -> None:
    """Run the interactive loop until a quit key is pressed.

    Each iteration handles terminal resizes, repaints when content arrived,
    and dispatches at most one key to the pager.
    """
    seen_content: tuple[int, bool] | None = None
    wrap_long_lines = pager.wrap_long_lines
    with terminal.raw_mode():
        while not pager.quit_requested:
            dirty = False
            screen = pager.screen
            if isinstance(screen, TerminalScreen) and screen.refresh_size():
                pager.clamp()
                dirty = True
            content = (pager.reader.line_count(), pager.reader.done)
            if content != seen_content:
                seen_content = content
                dirty = True
            if dirty:
                pager.redraw()

            key = read_key(key_fd, timeout_ms=timing.poll_timeout_ms)
            if not key:
                continue
            pager.handle_key(key)

            if pager.wrap_long_lines != wrap_long_lines:
                wrap_long_lines = pager.wrap_long_lines
                if on_wrap_changed is not None:
                    on_wrap_changed(wrap_long_lines)


def write_lines(reader: Reader, out: TextIO) -> None:
    """Print every line without paging, waiting for a stream to finish first."""
    reader.wait_until_done()
    for line in reader.get_lines(LineIndex(0), reader.line_count()):
        out.write(line.styled)
        if "\033" in line.styled:
            out.write("\033[0m")
        out.write("\n")
    out.flush()


def _keyboard_fd() -> tuple[int, bool]:
    """Return the descriptor to read keys from and whether we opened it."""
    if sys.stdin.isatty():
        return sys.stdin.fileno(), False
    return os.open("/dev/tty", os.O_RDONLY), True


def run_pager(
    reader: Reader,
    wrap_long_lines: bool = False,
    show_line_numbers: bool = True,
    show_status_bar: bool = True,
    nopager: bool = False,
) -> None:
    """Page ``reader`` interactively, or print it when output is not a terminal."""
    if nopager or not sys.stdout.isatty():
        write_lines(reader, sys.stdout)
        return

    try:
        key_fd, opened = _keyboard_fd()
    except OSError as exc:
        raise SystemExit(f"Cannot open terminal for keyboard input: {exc}") from exc

    stdout_fd = sys.stdout.fileno()
    try:
        terminal = TerminalController(key_fd, stdout_fd)
        pager = Pager(
            reader,
            TerminalScreen(stdout_fd),
            wrap_long_lines=wrap_long_lines,
            show_status_bar=show_status_bar,
            show_line_numbers=show_line_numbers,
        )
        logger.info("paging %s", reader.name or "<stdin>")
        run_main_loop(pager, terminal, key_fd, on_wrap_changed=save_wrap_long_lines)
    finally:
        if opened:
            os.close(key_fd)
