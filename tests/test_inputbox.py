"""Prompt line-editing tests."""

from __future__ import annotations

import unittest

from lazypager.inputbox import InputBox


class InputBoxTests(unittest.TestCase):
    def test_typing_inserts_at_cursor_and_notifies(self) -> None:
        seen: list[str] = []
        box = InputBox(on_text_changed=seen.append)

        for key in ("a", "c", "LEFT", "b"):
            box.handle_key(key)

        self.assertEqual(box.text, "abc")
        self.assertEqual(box.cursor, 2)
        self.assertEqual(seen, ["a", "ac", "abc"])

    def test_cursor_motion_does_not_notify(self) -> None:
        seen: list[str] = []
        box = InputBox(on_text_changed=seen.append)
        box.set_text("abc")
        seen.clear()

        for key in ("HOME", "RIGHT", "END", "CTRL_A", "CTRL_E", "LEFT"):
            box.handle_key(key)

        self.assertEqual(seen, [])
        self.assertEqual(box.cursor, 2)

    def test_deletion_keys(self) -> None:
        box = InputBox()
        box.set_text("hello world")

        box.handle_key("BACKSPACE")
        self.assertEqual(box.text, "hello worl")

        box.handle_key("HOME")
        box.handle_key("DELETE")
        self.assertEqual(box.text, "ello worl")

        box.cursor = 4
        box.handle_key("CTRL_K")
        self.assertEqual(box.text, "ello")

        box.handle_key("LEFT")
        box.handle_key("CTRL_U")
        self.assertEqual(box.text, "o")
        self.assertEqual(box.cursor, 0)

    def test_backspace_at_start_is_a_no_op(self) -> None:
        seen: list[str] = []
        box = InputBox(on_text_changed=seen.append)

        self.assertTrue(box.handle_key("BACKSPACE"))
        self.assertEqual(seen, [])

    def test_callback_sees_final_state(self) -> None:
        snapshots: list[tuple[str, int]] = []
        box = InputBox()
        box.on_text_changed = lambda _text: snapshots.append((box.text, box.cursor))

        box.set_text("xyz")
        box.handle_key("BACKSPACE")

        self.assertEqual(snapshots, [("xyz", 3), ("xy", 2)])

    def test_accept_filter_rejects_characters(self) -> None:
        box = InputBox(accept=str.isdigit)

        self.assertFalse(box.insert("4a"))
        box.handle_key("4")
        box.handle_key("x")
        box.handle_key("2")

        self.assertEqual(box.text, "42")

    def test_unknown_keys_are_not_consumed(self) -> None:
        box = InputBox()

        self.assertFalse(box.handle_key("PAGE_DOWN"))
        self.assertFalse(box.handle_key("TAB"))
        self.assertEqual(box.text, "")


if __name__ == "__main__":
    unittest.main()
