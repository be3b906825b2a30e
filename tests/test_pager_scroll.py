"""Viewport scrolling and clamping tests for the pager core."""

from __future__ import annotations

import unittest

from lazypager.pager import Pager
from lazypager.position import LineIndex, ScrollPosition
from lazypager.reader import Reader
from lazypager.screen import FakeScreen, row_to_string

TEN_LINES = "\n".join(f"line {n}" for n in range(1, 11))
LONG_LINE = "1miss 2träff 3miss 4miss 5träff 6miss 7miss 8träff 9miss"


def ten_lines_pager() -> Pager:
    # Four rows: three for content plus the status bar.
    return Pager(Reader.from_text(TEN_LINES, name="doc.txt"), FakeScreen(40, 4))


class ScrollTests(unittest.TestCase):
    def test_scroll_to_end_puts_last_line_on_bottom_row(self) -> None:
        pager = ten_lines_pager()

        pager.scroll_to_end()

        self.assertEqual(pager.scroll_position, ScrollPosition.at(7))
        self.assertEqual(pager.last_visible_position(), ScrollPosition.at(9))

    def test_scroll_to_end_is_idempotent(self) -> None:
        pager = ten_lines_pager()
        pager.scroll_to_end()
        first = pager.scroll_position

        pager.scroll_to_end()

        self.assertEqual(pager.scroll_position, first)

    def test_scroll_lines_stops_at_both_ends(self) -> None:
        pager = ten_lines_pager()

        pager.scroll_lines(100)
        self.assertEqual(pager.scroll_position, ScrollPosition.at(7))

        pager.scroll_lines(-100)
        self.assertEqual(pager.scroll_position, ScrollPosition())

    def test_scroll_pages_moves_by_content_rows(self) -> None:
        pager = ten_lines_pager()

        pager.scroll_pages(1)
        self.assertEqual(pager.line_index(), LineIndex(3))

        pager.scroll_pages(-1)
        self.assertEqual(pager.line_index(), LineIndex(0))

    def test_short_content_never_scrolls(self) -> None:
        pager = Pager(Reader.from_text("one\ntwo\n"), FakeScreen(40, 10))

        pager.scroll_lines(5)
        pager.scroll_to_end()

        self.assertEqual(pager.scroll_position, ScrollPosition())

    def test_empty_document(self) -> None:
        pager = Pager(Reader.from_text(""), FakeScreen(40, 4))

        pager.scroll_to_end()
        pager.scroll_lines(3)
        pager.redraw()

        self.assertEqual(pager.scroll_position, ScrollPosition())
        self.assertEqual(pager.status_text(), "<stdin>: <empty>")

    def test_scroll_to_line_is_clamped(self) -> None:
        pager = ten_lines_pager()

        pager.scroll_to_line(LineIndex.from_one_based(3))
        self.assertEqual(pager.line_index(), LineIndex(2))

        pager.scroll_to_line(LineIndex.from_one_based(1000))
        self.assertEqual(pager.line_index(), LineIndex(7))

    def test_clamp_after_screen_grows(self) -> None:
        pager = ten_lines_pager()
        pager.scroll_to_end()
        assert pager.screen is not None

        pager.screen.resize(40, 8)
        pager.clamp()

        self.assertEqual(pager.scroll_position, ScrollPosition.at(3))

    def test_horizontal_scroll_only_when_not_wrapping(self) -> None:
        pager = Pager(Reader.from_text(LONG_LINE), FakeScreen(10, 3), show_line_numbers=False)

        pager.scroll_columns(pager.horizontal_step())
        self.assertEqual(pager.left_column, 5)
        pager.redraw()
        assert pager.screen is not None
        self.assertEqual(row_to_string(pager.screen.get_row(0)), " 2träff 3m")

        pager.scroll_columns(-100)
        self.assertEqual(pager.left_column, 0)

        pager.toggle_wrap()
        pager.scroll_columns(5)
        self.assertEqual(pager.left_column, 0)


class WrappedScrollTests(unittest.TestCase):
    def wrapped_pager(self) -> Pager:
        return Pager(
            Reader.from_text(LONG_LINE + "\nnext"),
            FakeScreen(10, 3),
            wrap_long_lines=True,
            show_status_bar=False,
            show_line_numbers=False,
        )

    def test_scroll_lines_moves_through_sub_lines(self) -> None:
        pager = self.wrapped_pager()

        pager.scroll_lines(1)
        self.assertEqual(pager.scroll_position, ScrollPosition.at(0, 1))

        pager.scroll_lines(100)
        self.assertEqual(pager.scroll_position, ScrollPosition.at(0, 7))
        self.assertEqual(pager.last_visible_position(), ScrollPosition.at(1, 0))

    def test_sub_line_count_follows_content_width(self) -> None:
        pager = self.wrapped_pager()

        self.assertEqual(pager.sub_line_count(0), 9)
        self.assertEqual(pager.sub_line_count(1), 1)
        self.assertEqual(pager.sub_line_count(5), 1)

    def test_toggle_wrap_resets_sub_line(self) -> None:
        pager = self.wrapped_pager()
        pager.scroll_lines(4)

        pager.toggle_wrap()

        self.assertFalse(pager.wrap_long_lines)
        self.assertEqual(pager.scroll_position, ScrollPosition.at(0))

    def test_continuation_rows_have_blank_gutter(self) -> None:
        pager = Pager(Reader.from_text(LONG_LINE + "\nnext"), FakeScreen(12, 4), wrap_long_lines=True)

        pager.redraw()
        assert pager.screen is not None
        rows = [row_to_string(pager.screen.get_row(row)) for row in range(3)]

        self.assertEqual(rows, ["1 1miss", "  2träff", "  3miss"])


class StatusTests(unittest.TestCase):
    def test_position_status_reports_visible_range(self) -> None:
        pager = ten_lines_pager()

        self.assertEqual(pager.position_status(), "doc.txt (1-3/10  30.0%)")

        pager.scroll_to_end()
        self.assertEqual(pager.position_status(), "doc.txt (8-10/10 100.0%)")

    def test_position_status_marks_unfinished_stream(self) -> None:
        reader = Reader()
        reader.add_lines(["one", "two"])
        pager = Pager(reader, FakeScreen(40, 4))

        self.assertEqual(pager.position_status(), "<stdin> (1-2/2+ 100.0%)")

    def test_hidden_status_bar_gives_content_the_whole_screen(self) -> None:
        pager = Pager(Reader.from_text(TEN_LINES), FakeScreen(40, 4), show_status_bar=False)

        self.assertEqual(pager.content_rows(), 4)

        pager.enter_goto_line_mode()
        self.assertEqual(pager.content_rows(), 3)


if __name__ == "__main__":
    unittest.main()
