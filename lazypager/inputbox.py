"""Single-line text entry used by the search and goto-line prompts."""

from __future__ import annotations

from collections.abc import Callable


class InputBox:
    """Editable text buffer with a cursor and an optional change callback.

    ``on_text_changed`` runs synchronously after every edit that changes the
    text, once the buffer and cursor are final, so the callback may freely
    re-enter the owning pager. ``accept`` filters typed characters.
    """

    def __init__(
        self,
        on_text_changed: Callable[[str], None] | None = None,
        accept: Callable[[str], bool] | None = None,
    ) -> None:
        self.text = ""
        self.cursor = 0
        self.on_text_changed = on_text_changed
        self.accept = accept

    def set_text(self, text: str) -> None:
        """Replace the buffer, move the cursor to the end and notify the callback."""
        self.text = text
        self.move_cursor_end()
        if self.on_text_changed is not None:
            self.on_text_changed(self.text)

    def move_cursor_end(self) -> None:
        self.cursor = len(self.text)

    def _edit(self, text: str, cursor: int) -> None:
        changed = text != self.text
        self.text = text
        self.cursor = max(0, min(cursor, len(text)))
        if changed and self.on_text_changed is not None:
            self.on_text_changed(self.text)

    def insert(self, chars: str) -> bool:
        if self.accept is not None and not all(self.accept(ch) for ch in chars):
            return False
        self._edit(self.text[: self.cursor] + chars + self.text[self.cursor :], self.cursor + len(chars))
        return True

    def handle_key(self, key: str) -> bool:
        """Apply one key token; return whether the box consumed it."""
        if key == "BACKSPACE":
            if self.cursor > 0:
                self._edit(self.text[: self.cursor - 1] + self.text[self.cursor :], self.cursor - 1)
            return True
        if key == "DELETE":
            if self.cursor < len(self.text):
                self._edit(self.text[: self.cursor] + self.text[self.cursor + 1 :], self.cursor)
            return True
        if key == "LEFT":
            self.cursor = max(0, self.cursor - 1)
            return True
        if key == "RIGHT":
            self.cursor = min(len(self.text), self.cursor + 1)
            return True
        if key in {"HOME", "CTRL_A"}:
            self.cursor = 0
            return True
        if key in {"END", "CTRL_E"}:
            self.move_cursor_end()
            return True
        if key == "CTRL_U":
            self._edit(self.text[self.cursor :], 0)
            return True
        if key == "CTRL_K":
            self._edit(self.text[: self.cursor], self.cursor)
            return True
        if len(key) == 1 and key.isprintable():
            self.insert(key)
            return True
        return False
