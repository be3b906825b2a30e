"""Logical-line source for the pager.

A ``Reader`` holds the lines of one document. Static text is split up front;
streams are consumed on a background thread, so the line count may keep
growing while the pager runs. Lookups never block and never raise for lines
that have not arrived yet.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import BinaryIO

from .highlight import highlight_lines, sanitize_terminal_text
from .position import LineIndex

logger = logging.getLogger(__name__)


def strip_line_ending(text: str) -> str:
    r"""Drop one trailing ``\n`` and then one trailing ``\r``."""
    if text.endswith("\n"):
        text = text[:-1]
    if text.endswith("\r"):
        text = text[:-1]
    return text


def split_lines(text: str) -> list[str]:
    r"""Split on ``\n`` only, like a line-by-line stream read.

    Other Unicode line boundaries (form feed, ``\x85``, ``\u2028``) stay
    inside their line. A trailing newline does not start an extra line.
    """
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [strip_line_ending(part) for part in parts]


@dataclass(frozen=True)
class Line:
    """One logical line: ``plain`` is what search sees, ``styled`` adds SGR colors."""

    plain: str
    styled: str

    @classmethod
    def from_plain(cls, text: str) -> Line:
        plain = sanitize_terminal_text(text)
        return cls(plain=plain, styled=plain)


class Reader:
    """Thread-safe, append-only list of logical lines."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._lines: list[Line] = []
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._on_lines_added: Callable[[], None] | None = None

    @classmethod
    def from_text(cls, text: str, name: str = "", style: str | None = None) -> Reader:
        """Build a finished reader from in-memory text.

        When ``style`` is given and ``name`` has a known file extension the
        lines are syntax highlighted; otherwise they are shown as-is.
        """
        reader = cls(name)
        plain = [sanitize_terminal_text(line) for line in split_lines(text)]
        styled = highlight_lines(plain, name, style) if style is not None else plain
        with reader._lock:
            reader._lines = [Line(plain=p, styled=s) for p, s in zip(plain, styled)]
        reader.mark_done()
        return reader

    @classmethod
    def from_stream(cls, stream: BinaryIO, name: str = "") -> Reader:
        """Start consuming ``stream`` on a daemon thread and return immediately."""
        reader = cls(name)
        worker = threading.Thread(
            target=reader._consume,
            args=(stream,),
            name="lazypager-reader",
            daemon=True,
        )
        worker.start()
        return reader

    def _consume(self, stream: BinaryIO) -> None:
        try:
            for raw in stream:
                text = strip_line_ending(raw.decode("utf-8", errors="replace"))
                self.add_lines([text])
        except (OSError, ValueError):
            logger.exception("reading %s failed", self.name or "<stream>")
        finally:
            self.mark_done()

    def set_lines_added_callback(self, callback: Callable[[], None] | None) -> None:
        """Register a hook invoked (from the producing thread) after lines arrive."""
        self._on_lines_added = callback

    def add_lines(self, lines: Iterable[str]) -> None:
        """Append unstyled lines; used by the stream worker and by tests."""
        new_lines = [Line.from_plain(text) for text in lines]
        if not new_lines:
            return
        with self._lock:
            self._lines.extend(new_lines)
        callback = self._on_lines_added
        if callback is not None:
            callback()

    def mark_done(self) -> None:
        self._done.set()

    @property
    def done(self) -> bool:
        """Whether no more lines will ever arrive."""
        return self._done.is_set()

    def wait_until_done(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    def line_count(self) -> int:
        """Return the number of lines available right now."""
        with self._lock:
            return len(self._lines)

    def get_line(self, index: LineIndex) -> Line | None:
        """Return the line at ``index`` or ``None`` when it has not arrived."""
        with self._lock:
            if index.index() >= len(self._lines):
                return None
            return self._lines[index.index()]

    def get_lines(self, start: LineIndex, count: int) -> list[Line]:
        """Return up to ``count`` consecutive lines beginning at ``start``."""
        with self._lock:
            return self._lines[start.index() : start.index() + max(0, count)]
