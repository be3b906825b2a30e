"""Line source tests for static text and background streams."""

from __future__ import annotations

import io
import unittest

from lazypager.ansi import strip_ansi
from lazypager.position import LineIndex
from lazypager.reader import Line, Reader, split_lines


class ReaderFromTextTests(unittest.TestCase):
    def test_splits_lines_and_is_done(self) -> None:
        reader = Reader.from_text("one\ntwo\r\nthree\n", name="doc.txt")

        self.assertTrue(reader.done)
        self.assertEqual(reader.name, "doc.txt")
        self.assertEqual(reader.line_count(), 3)
        self.assertEqual([line.plain for line in reader.get_lines(LineIndex(0), 10)], ["one", "two", "three"])

    def test_missing_lines_are_none(self) -> None:
        reader = Reader.from_text("only\n")

        self.assertIsNone(reader.get_line(LineIndex(1)))
        self.assertEqual(reader.get_lines(LineIndex(5), 3), [])

    def test_tabs_and_control_bytes_are_neutralized(self) -> None:
        reader = Reader.from_text("a\tb\x07\n")
        line = reader.get_line(LineIndex(0))
        assert line is not None

        self.assertEqual(line.plain, "a       b\\x07")
        self.assertEqual(line.styled, line.plain)

    def test_highlighting_keeps_plain_text(self) -> None:
        reader = Reader.from_text("def f():\n    return 1\n", name="example.py", style="default")
        line = reader.get_line(LineIndex(0))
        assert line is not None

        self.assertEqual(line.plain, "def f():")
        self.assertIn("\x1b[", line.styled)
        self.assertEqual(strip_ansi(line.styled), line.plain)

    def test_split_lines_only_breaks_on_newline(self) -> None:
        self.assertEqual(split_lines(""), [])
        self.assertEqual(split_lines("\n"), [""])
        self.assertEqual(split_lines("a\n\nb"), ["a", "", "b"])
        self.assertEqual(split_lines("a\r\nb\r\n"), ["a", "b"])
        self.assertEqual(split_lines("x\u2028y\x0bz"), ["x\u2028y\x0bz"])

    def test_line_from_plain(self) -> None:
        self.assertEqual(Line.from_plain("x\ty"), Line("x       y", "x       y"))


class ReaderStreamTests(unittest.TestCase):
    def test_stream_is_consumed_in_background(self) -> None:
        reader = Reader.from_stream(io.BytesIO(b"one\r\ntwo\n\xffthree"), name="pipe")

        self.assertTrue(reader.wait_until_done(timeout=5))
        self.assertEqual(
            [line.plain for line in reader.get_lines(LineIndex(0), reader.line_count())],
            ["one", "two", "�three"],
        )

    def test_static_and_streamed_text_split_into_the_same_lines(self) -> None:
        text = "a\x0cb\nc d\r\n\x85e\n"
        static = Reader.from_text(text)
        streamed = Reader.from_stream(io.BytesIO(text.encode("utf-8")))
        self.assertTrue(streamed.wait_until_done(timeout=5))

        static_lines = [line.plain for line in static.get_lines(LineIndex(0), static.line_count())]
        streamed_lines = [line.plain for line in streamed.get_lines(LineIndex(0), streamed.line_count())]

        self.assertEqual(static_lines, streamed_lines)
        self.assertEqual(static_lines, ["a\\x0cb", "c d", "\\x85e"])

    def test_add_lines_grows_and_notifies(self) -> None:
        calls: list[int] = []
        reader = Reader()
        reader.set_lines_added_callback(lambda: calls.append(reader.line_count()))

        reader.add_lines(["a"])
        reader.add_lines([])
        reader.add_lines(["b", "c"])

        self.assertFalse(reader.done)
        self.assertEqual(calls, [1, 3])

        reader.mark_done()
        self.assertTrue(reader.done)

    def test_read_error_still_finishes_stream(self) -> None:
        class BrokenStream:
            def __iter__(self):
                yield b"first\n"
                raise OSError("gone")

        with self.assertLogs("lazypager.reader", level="ERROR"):
            reader = Reader.from_stream(BrokenStream())  # type: ignore[arg-type]
            self.assertTrue(reader.wait_until_done(timeout=5))

        self.assertEqual(reader.line_count(), 1)


if __name__ == "__main__":
    unittest.main()
