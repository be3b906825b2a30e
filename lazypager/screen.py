"""Cell-buffer screen abstraction.

The pager renders whole rows of styled cells into a ``Screen``. A
``FakeScreen`` keeps them in memory for tests; a ``TerminalScreen`` paints
them onto the real terminal with SGR escape sequences.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass

from .ansi import char_display_width


@dataclass(frozen=True)
class Cell:
    """One screen cell; ``style`` holds SGR parameters (``""`` is the default style).

    The right half of a double-width character is stored as a cell with an
    empty ``char``.
    """

    char: str = " "
    style: str = ""


BLANK = Cell()


def row_to_string(cells: list[Cell]) -> str:
    """Return the visible text of a row with trailing blanks removed."""
    return "".join(cell.char for cell in cells).rstrip()


class Screen:
    """Fixed-size grid of cells addressed by row."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._rows: list[list[Cell]] = [self._blank_row() for _ in range(self.height)]

    def _blank_row(self) -> list[Cell]:
        return [BLANK] * self.width

    def size(self) -> tuple[int, int]:
        """Return ``(width, height)``."""
        return self.width, self.height

    def resize(self, width: int, height: int) -> None:
        width = max(0, width)
        height = max(0, height)
        if (width, height) == (self.width, self.height):
            return
        self.width = width
        self.height = height
        self._rows = [self._blank_row() for _ in range(height)]

    def clear(self) -> None:
        self._rows = [self._blank_row() for _ in range(self.height)]

    def set_row(self, row: int, cells: list[Cell]) -> None:
        """Replace ``row`` with ``cells``, clipped and padded to the screen width.

        Wide characters take two columns; zero-width characters attach to the
        previous cell.
        """
        if not 0 <= row < self.height:
            return
        out: list[Cell] = []
        col = 0
        for cell in cells:
            w = char_display_width(cell.char[0], col) if cell.char else 0
            if w == 0:
                if cell.char and out:
                    prev = out[-1]
                    out[-1] = Cell(prev.char + cell.char, prev.style)
                continue
            if col + w > self.width:
                break
            out.append(cell)
            if w == 2:
                out.append(Cell("", cell.style))
            col += w
        out.extend([BLANK] * (self.width - col))
        self._rows[row] = out

    def get_row(self, row: int) -> list[Cell]:
        if not 0 <= row < self.height:
            return []
        return list(self._rows[row])

    def show(self) -> None:
        """Make the current buffer visible; the fake screen has nothing to do."""


class FakeScreen(Screen):
    """In-memory screen for tests."""


class TerminalScreen(Screen):
    """Screen that paints its buffer onto a terminal file descriptor."""

    def __init__(self, stdout_fd: int) -> None:
        self.stdout_fd = stdout_fd
        term = shutil.get_terminal_size((80, 24))
        super().__init__(term.columns, term.lines)

    def refresh_size(self) -> bool:
        """Adopt the current terminal size; return whether it changed."""
        term = shutil.get_terminal_size((80, 24))
        if (term.columns, term.lines) == self.size():
            return False
        self.resize(term.columns, term.lines)
        return True

    def render_ansi(self) -> str:
        out: list[str] = []
        for row_idx, row in enumerate(self._rows):
            out.append(f"\033[{row_idx + 1};1H")
            style = ""
            for cell in row:
                if not cell.char:
                    continue
                if cell.style != style:
                    out.append("\033[0m")
                    if cell.style:
                        out.append(f"\033[{cell.style}m")
                    style = cell.style
                out.append(cell.char)
            out.append("\033[0m")
        return "".join(out)

    def show(self) -> None:
        os.write(self.stdout_fd, self.render_ansi().encode("utf-8"))
