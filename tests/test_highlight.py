"""Targeted tests for text sanitization and syntax highlighting.

Ensures control bytes are escaped and that highlighted lines always strip
back to exactly the text that search operates on.
"""

import tempfile
import unittest
from pathlib import Path

from lazypager.ansi import strip_ansi
from lazypager.highlight import DEFAULT_STYLE, highlight_lines, normalize_style, read_text, sanitize_terminal_text


class SanitizeTests(unittest.TestCase):
    def test_control_bytes_are_escaped(self) -> None:
        sanitized = sanitize_terminal_text("c\rd\x07e\x1bf\x9b")

        self.assertEqual(sanitized, "c\\x0dd\\x07e\\x1bf\\x9b")
        self.assertNotIn("\x1b", sanitized)

    def test_tabs_expand_to_eight_column_stops(self) -> None:
        self.assertEqual(sanitize_terminal_text("ab\tc"), "ab      c")

    def test_ordinary_text_is_unchanged(self) -> None:
        self.assertEqual(sanitize_terminal_text("héllo 界"), "héllo 界")


class HighlightLinesTests(unittest.TestCase):
    def test_python_source_is_highlighted_line_by_line(self) -> None:
        lines = ["def f():", "", "    return 'x'  # done"]

        styled = highlight_lines(lines, "module.py", DEFAULT_STYLE)

        self.assertEqual(len(styled), len(lines))
        self.assertEqual([strip_ansi(line) for line in styled], lines)
        self.assertTrue(any("\x1b[" in line for line in styled))

    def test_unknown_file_type_is_left_plain(self) -> None:
        lines = ["some text", "more"]

        self.assertEqual(highlight_lines(lines, "notes.unknown-extension"), lines)
        self.assertEqual(highlight_lines(lines, ""), lines)

    def test_plain_text_lexer_is_left_plain(self) -> None:
        lines = ["Permission  is  hereby granted"]

        self.assertEqual(highlight_lines(lines, "LICENSE.txt"), lines)

    def test_unknown_style_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_style("no-such-style-anywhere"), DEFAULT_STYLE)
        self.assertEqual(normalize_style("monokai"), "monokai")


class ReadTextTests(unittest.TestCase):
    def test_latin1_fallback(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "latin.txt"
            path.write_bytes(b"caf\xe9\n")

            self.assertEqual(read_text(path), "café\n")


if __name__ == "__main__":
    unittest.main()
