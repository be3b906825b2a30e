"""Pager core: viewport geometry, scrolling and the search engine.

All mutation of the scroll position and the active mode goes through
``Pager`` methods. Positions are tracked in screen rows: a logical line
contributes one row, or one row per wrapped segment when long lines wrap.
Every scan re-queries the reader's line count, so content that is still
streaming in is searched as far as it reaches at the time of the call.
"""

from __future__ import annotations

import logging

from .ansi import wrap_spans
from .modes import (
    PagerMode,
    PagerModeGotoLine,
    PagerModeNotFound,
    PagerModeSearch,
    PagerModeViewing,
    mode_name,
)
from .position import LineIndex, ScrollPosition
from .reader import Line, Reader
from .render import render_screen
from .screen import Screen
from .search import SearchDirection, SearchPattern

logger = logging.getLogger(__name__)


class Pager:
    def __init__(
        self,
        reader: Reader,
        screen: Screen | None = None,
        *,
        wrap_long_lines: bool = False,
        show_status_bar: bool = True,
        show_line_numbers: bool = True,
    ) -> None:
        self.reader = reader
        self.screen = screen
        self.wrap_long_lines = wrap_long_lines
        self.show_status_bar = show_status_bar
        self.show_line_numbers = show_line_numbers

        self.scroll_position = ScrollPosition()
        self.left_column = 0

        self.search_string = ""
        self.search_pattern: SearchPattern | None = None
        self.search_direction = SearchDirection.FORWARD

        self.quit_requested = False
        self.mode: PagerMode = PagerModeViewing(self)

    # Geometry

    def _screen_size(self) -> tuple[int, int]:
        if self.screen is None:
            return 0, 0
        return self.screen.size()

    def content_rows(self) -> int:
        """Screen rows available for content, excluding a reserved status bar row.

        An open search or goto prompt needs the bottom row even when the
        status bar is hidden.
        """
        _width, height = self._screen_size()
        prompt_open = isinstance(self.mode, (PagerModeSearch, PagerModeGotoLine))
        if (self.show_status_bar or prompt_open) and height > 1:
            return height - 1
        return height

    def gutter_width(self) -> int:
        """Columns taken by line numbers plus their separating space."""
        if not self.show_line_numbers:
            return 0
        count = self.reader.line_count()
        if count == 0:
            return 0
        return len(str(count)) + 1

    def content_width(self) -> int:
        width, _height = self._screen_size()
        return max(1, width - self.gutter_width())

    def segments(self, line: Line) -> list[tuple[int, int]]:
        """Return the ``(start, end)`` spans of ``line.plain`` shown on separate rows."""
        if not self.wrap_long_lines:
            return [(0, len(line.plain))]
        return wrap_spans(line.plain, self.content_width())

    def sub_line_count(self, index: int) -> int:
        line = self.reader.get_line(LineIndex(index))
        if line is None:
            return 1
        return len(self.segments(line))

    # Positions

    def _normalized(self, position: ScrollPosition) -> ScrollPosition:
        """Pull ``position`` back inside the content that exists right now."""
        count = self.reader.line_count()
        if count == 0:
            return ScrollPosition()
        line = min(position.line_index.index(), count - 1)
        sub_line = max(0, min(position.sub_line, self.sub_line_count(line) - 1))
        return ScrollPosition.at(line, sub_line)

    def _moved(self, position: ScrollPosition, rows: int) -> ScrollPosition:
        """Move ``position`` by ``rows`` screen rows, stopping at either end of the content."""
        count = self.reader.line_count()
        if count == 0:
            return ScrollPosition()
        position = self._normalized(position)
        line = position.line_index.index()
        sub_line = position.sub_line

        while rows > 0:
            last_sub_line = self.sub_line_count(line) - 1
            remaining = last_sub_line - sub_line
            if rows <= remaining:
                sub_line += rows
                break
            if line + 1 >= count:
                sub_line = last_sub_line
                break
            rows -= remaining + 1
            line += 1
            sub_line = 0

        while rows < 0:
            if -rows <= sub_line:
                sub_line += rows
                break
            if line == 0:
                sub_line = 0
                break
            rows += sub_line + 1
            line -= 1
            sub_line = self.sub_line_count(line) - 1

        return ScrollPosition.at(line, sub_line)

    def _end_position(self) -> ScrollPosition:
        """Top position that puts the last row of content on the bottom content row."""
        count = self.reader.line_count()
        if count == 0:
            return ScrollPosition()
        last = count - 1
        bottom = ScrollPosition.at(last, self.sub_line_count(last) - 1)
        return self._moved(bottom, -(max(1, self.content_rows()) - 1))

    def _clamped(self, position: ScrollPosition) -> ScrollPosition:
        position = self._normalized(position)
        end = self._end_position()
        if position > end:
            return end
        return position

    def clamp(self) -> None:
        """Keep the scroll position inside the content without trailing blank rows."""
        self.scroll_position = self._clamped(self.scroll_position)

    def line_index(self) -> LineIndex:
        """Return the logical line at the top of the content area."""
        return self._normalized(self.scroll_position).line_index

    def last_visible_position(self) -> ScrollPosition:
        top = self._normalized(self.scroll_position)
        return self._moved(top, max(1, self.content_rows()) - 1)

    def is_visible(self, position: ScrollPosition) -> bool:
        top = self._normalized(self.scroll_position)
        return top <= position <= self.last_visible_position()

    def visible_segments(self) -> list[tuple[int, int, Line, tuple[int, int]]]:
        """Return ``(line_index, sub_line, line, span)`` for every content row in view."""
        rows = self.content_rows()
        top = self._normalized(self.scroll_position)
        out: list[tuple[int, int, Line, tuple[int, int]]] = []
        index = top.line_index.index()
        sub_line = top.sub_line
        while len(out) < rows:
            line = self.reader.get_line(LineIndex(index))
            if line is None:
                break
            segments = self.segments(line)
            while sub_line < len(segments) and len(out) < rows:
                out.append((index, sub_line, line, segments[sub_line]))
                sub_line += 1
            index += 1
            sub_line = 0
        return out

    # Scrolling

    def scroll_lines(self, delta: int) -> None:
        """Scroll by ``delta`` screen rows (negative scrolls up)."""
        self.scroll_position = self._clamped(self._moved(self.scroll_position, delta))

    def scroll_pages(self, delta: int) -> None:
        self.scroll_lines(delta * max(1, self.content_rows()))

    def scroll_to_start(self) -> None:
        self.scroll_position = ScrollPosition()

    def scroll_to_end(self) -> None:
        self.scroll_position = self._end_position()

    def scroll_to_line(self, index: LineIndex) -> None:
        """Put ``index`` on the top content row, clamped to the available content."""
        self.scroll_position = self._clamped(ScrollPosition(index, 0))

    def horizontal_step(self) -> int:
        return max(1, self.content_width() // 2)

    def scroll_columns(self, delta: int) -> None:
        """Shift the unwrapped view sideways; wrapped views never scroll horizontally."""
        if self.wrap_long_lines:
            self.left_column = 0
            return
        self.left_column = max(0, self.left_column + delta)

    def toggle_wrap(self) -> None:
        self.wrap_long_lines = not self.wrap_long_lines
        self.left_column = 0
        self.scroll_position = self._clamped(ScrollPosition(self.scroll_position.line_index, 0))
        logger.debug("wrap long lines: %s", self.wrap_long_lines)

    # Searching

    def _hit_sub_lines(self, index: int, pattern: SearchPattern) -> list[int]:
        line = self.reader.get_line(LineIndex(index))
        if line is None or not pattern.matches(line.plain):
            return []
        if not self.wrap_long_lines:
            return [0]
        return pattern.hit_sub_lines(line.plain, self.segments(line))

    def _find_hit(
        self,
        pattern: SearchPattern,
        start: int,
        *,
        backwards: bool = False,
        stop: int | None = None,
    ) -> ScrollPosition | None:
        """Scan logical lines from ``start`` towards one end, ``stop`` excluded.

        Forward scans return the first hit row of the matching line, backward
        scans the last one.
        """
        if backwards:
            index = min(start, self.reader.line_count() - 1)
            while index >= 0 and (stop is None or index > stop):
                hits = self._hit_sub_lines(index, pattern)
                if hits:
                    return ScrollPosition.at(index, hits[-1])
                index -= 1
            return None

        index = max(0, start)
        while index < self.reader.line_count() and (stop is None or index < stop):
            hits = self._hit_sub_lines(index, pattern)
            if hits:
                return ScrollPosition.at(index, hits[0])
            index += 1
        return None

    def _hit_beyond_viewport(self, pattern: SearchPattern, direction: SearchDirection) -> ScrollPosition | None:
        """Find the nearest hit strictly outside the viewport in ``direction``."""
        if direction is SearchDirection.FORWARD:
            last = self.last_visible_position()
            line = last.line_index.index()
            below = [sub_line for sub_line in self._hit_sub_lines(line, pattern) if sub_line > last.sub_line]
            if below:
                return ScrollPosition.at(line, below[0])
            return self._find_hit(pattern, line + 1)

        top = self._normalized(self.scroll_position)
        line = top.line_index.index()
        above = [sub_line for sub_line in self._hit_sub_lines(line, pattern) if sub_line < top.sub_line]
        if above:
            return ScrollPosition.at(line, above[-1])
        if line == 0:
            return None
        return self._find_hit(pattern, line - 1, backwards=True)

    def _position_showing_hit(self, hit: ScrollPosition, direction: SearchDirection) -> ScrollPosition:
        """Forward hits end up with their line's last row at the bottom, backward hits at the top."""
        rows = max(1, self.content_rows())
        line = hit.line_index.index()
        if direction is SearchDirection.FORWARD:
            bottom = ScrollPosition.at(line, self.sub_line_count(line) - 1)
            top = self._moved(bottom, -(rows - 1))
            if top > hit:
                top = hit
        else:
            top = ScrollPosition.at(line, 0)
            if self._moved(top, rows - 1) < hit:
                top = self._moved(hit, -(rows - 1))
        return self._clamped(top)

    def scroll_to_next_search_hit(self) -> None:
        self._scroll_to_search_hit(SearchDirection.FORWARD)

    def scroll_to_previous_search_hit(self) -> None:
        self._scroll_to_search_hit(SearchDirection.BACKWARD)

    def scroll_to_search_hit(self, direction: SearchDirection) -> None:
        if direction is SearchDirection.FORWARD:
            self.scroll_to_next_search_hit()
        else:
            self.scroll_to_previous_search_hit()

    def _scroll_to_search_hit(self, direction: SearchDirection) -> None:
        """Move to the next committed-search hit beyond the viewport.

        From ``Viewing`` the scan stops at the content boundary and switches
        to ``NotFound`` on failure. From ``NotFound`` it restarts at the
        opposite boundary, which is how searches wrap around.
        """
        pattern = self.search_pattern
        if pattern is None:
            return

        mode = self.mode
        if isinstance(mode, PagerModeViewing):
            hit = self._hit_beyond_viewport(pattern, direction)
        elif isinstance(mode, PagerModeNotFound):
            if direction is SearchDirection.FORWARD:
                hit = self._find_hit(pattern, 0)
            else:
                hit = self._find_hit(pattern, self.reader.line_count() - 1, backwards=True)
        elif isinstance(mode, (PagerModeSearch, PagerModeGotoLine)):
            raise AssertionError(f"search hit navigation is not available in {mode_name(mode)} mode")
        else:
            raise AssertionError(f"unknown pager mode: {mode!r}")

        if hit is None:
            logger.debug("no %s hit for %r", direction.value, self.search_string)
            self.set_mode(PagerModeNotFound(self))
            return

        self.scroll_position = self._position_showing_hit(hit, direction)
        if not isinstance(self.mode, PagerModeViewing):
            self.set_mode(PagerModeViewing(self))

    def scroll_to_search_hits(
        self,
        pattern: SearchPattern | None,
        origin: ScrollPosition,
        direction: SearchDirection = SearchDirection.FORWARD,
    ) -> None:
        """Live-search scrolling: show the first hit as seen from ``origin``.

        Starts over from ``origin`` on every call, so each keystroke is judged
        against where the user was when the search began. A hit that is
        already visible from there does not scroll; otherwise it is centered.
        """
        self.scroll_position = self._clamped(origin)
        if pattern is None:
            return

        if direction is SearchDirection.FORWARD:
            start = self.scroll_position.line_index.index()
            hit = self._find_hit(pattern, start)
            if hit is None and start > 0:
                hit = self._find_hit(pattern, 0, stop=start)
        else:
            start = self.last_visible_position().line_index.index()
            hit = self._find_hit(pattern, start, backwards=True)
            if hit is None:
                hit = self._find_hit(pattern, self.reader.line_count() - 1, backwards=True, stop=start)

        if hit is None or self.is_visible(hit):
            return
        self.scroll_position = self._clamped(self._moved(hit, -(max(1, self.content_rows()) // 2)))

    def active_search_pattern(self) -> SearchPattern | None:
        """Pattern to highlight: the in-progress query while searching, else the committed one."""
        if isinstance(self.mode, PagerModeSearch):
            return self.mode.pattern
        return self.search_pattern

    # Modes

    def set_mode(self, mode: PagerMode) -> None:
        """Atomically replace the active mode."""
        if type(mode) is not type(self.mode):
            logger.debug("mode %s -> %s", mode_name(self.mode), mode_name(mode))
        self.mode = mode

    def mode_name(self) -> str:
        return mode_name(self.mode)

    def enter_search_mode(self, direction: SearchDirection = SearchDirection.FORWARD) -> None:
        self.set_mode(PagerModeSearch(self, direction, self.scroll_position))

    def enter_goto_line_mode(self) -> None:
        self.set_mode(PagerModeGotoLine(self))

    def quit(self) -> None:
        self.quit_requested = True

    def handle_key(self, key: str) -> None:
        """Route one key token to the active mode, then repaint."""
        self.mode.handle_key(key)
        self.redraw()

    # Rendering

    def position_status(self) -> str:
        name = self.reader.name or "<stdin>"
        total = self.reader.line_count()
        if total == 0:
            return f"{name}: <empty>"
        first = self.line_index().line_number()
        last = self.last_visible_position().line_index.line_number()
        percent = (last / total) * 100.0
        total_label = str(total) if self.reader.done else f"{total}+"
        return f"{name} ({first}-{last}/{total_label} {percent:5.1f}%)"

    def status_text(self) -> str:
        return self.mode.status_text()

    def redraw(self) -> None:
        """Render the current position and mode onto the screen."""
        if self.screen is None:
            return
        for row_idx, cells in enumerate(render_screen(self)):
            self.screen.set_row(row_idx, cells)
        self.screen.show()
