"""Turn pager state into rows of screen cells.

Content rows come from the pager's visible segments, decorated with the
line-number gutter and search-hit emphasis. The last row carries the status
bar, or the search/goto prompt while one is open.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .ansi import char_display_width, styled_chars
from .modes import PagerModeGotoLine, PagerModeSearch
from .reader import Line
from .screen import Cell
from .search import SearchPattern

if TYPE_CHECKING:
    from .pager import Pager

HIT_SGR = "7"
LINE_NUMBER_SGR = "2"
STATUS_SGR = "7"
CURSOR_SGR = "7"
STATUS_RIGHT_TEXT = "│ q quit"


def add_sgr(style: str, extra: str) -> str:
    if not style:
        return extra
    return f"{style};{extra}"


def line_cells(line: Line, pattern: SearchPattern | None = None) -> list[Cell]:
    """Return one cell per character of ``line`` with hits shown in reverse video."""
    cells = [Cell(ch, style) for ch, style in styled_chars(line.styled)]
    if pattern is None:
        return cells
    for start, end in pattern.spans(line.plain):
        for idx in range(start, min(end, len(cells))):
            cell = cells[idx]
            cells[idx] = Cell(cell.char, add_sgr(cell.style, HIT_SGR))
    return cells


def slice_cells(cells: list[Cell], start_col: int, max_cols: int) -> list[Cell]:
    """Return the cells covering display columns ``[start_col, start_col + max_cols)``."""
    out: list[Cell] = []
    col = 0
    shown = 0
    for cell in cells:
        w = char_display_width(cell.char, col)
        if col < start_col:
            col += w
            continue
        if shown + w > max_cols:
            break
        out.append(cell)
        shown += w
        col += w
    return out


def gutter_cells(width: int, line_index: int, sub_line: int) -> list[Cell]:
    """Right-aligned one-based line number; continuation rows get a blank gutter."""
    if width <= 0:
        return []
    label = str(line_index + 1) if sub_line == 0 else ""
    return [Cell(ch, LINE_NUMBER_SGR) for ch in label.rjust(width - 1)] + [Cell(" ")]


def render_content_rows(pager: Pager) -> list[list[Cell]]:
    pattern = pager.active_search_pattern()
    gutter_width = pager.gutter_width()
    content_width = pager.content_width()
    rows: list[list[Cell]] = []
    cached: tuple[int, list[Cell]] | None = None
    for line_index, sub_line, line, (start, end) in pager.visible_segments():
        if cached is None or cached[0] != line_index:
            cached = (line_index, line_cells(line, pattern))
        cells = cached[1]
        if pager.wrap_long_lines:
            body = cells[start:end]
        else:
            body = slice_cells(cells, pager.left_column, content_width)
        rows.append(gutter_cells(gutter_width, line_index, sub_line) + body)
    return rows


def build_status_line(left_text: str, width: int, right_text: str = STATUS_RIGHT_TEXT) -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def render_status_row(pager: Pager, width: int) -> list[Cell]:
    mode = pager.mode
    if isinstance(mode, (PagerModeSearch, PagerModeGotoLine)):
        text = mode.status_text()
        prompt_len = len(text) - len(mode.input_box.text)
        cursor = prompt_len + mode.input_box.cursor
        cells = [Cell(ch) for ch in text]
        if cursor < len(cells):
            cells[cursor] = Cell(cells[cursor].char, CURSOR_SGR)
        else:
            cells.append(Cell(" ", CURSOR_SGR))
        # Keep the cursor in view when the query is longer than the row.
        overflow = len(cells) - width
        if overflow > 0:
            cells = cells[overflow:]
        return cells
    return [Cell(ch, STATUS_SGR) for ch in build_status_line(pager.status_text(), width)]


def render_screen(pager: Pager) -> list[list[Cell]]:
    """Return exactly one cell row per screen row."""
    assert pager.screen is not None
    width, height = pager.screen.size()
    content_rows = pager.content_rows()
    rows = render_content_rows(pager)
    rows.extend([] for _ in range(content_rows - len(rows)))
    if content_rows < height:
        rows.append(render_status_row(pager, width))
    return rows[:height]
