"""Raw-mode session handling for the pager.

Keys are read from ``key_fd`` and frames are written to ``output_fd``. When
content is piped in these differ: stdin carries the document and keys come
from the controlling terminal.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

ALTERNATE_SCREEN_ON = b"\x1b[?1049h"
ALTERNATE_SCREEN_OFF = b"\x1b[?1049l"
CURSOR_HIDE = b"\x1b[?25l"
CURSOR_SHOW = b"\x1b[?25h"
# Button press reporting in SGR encoding; wheel events arrive as buttons 64/65.
MOUSE_WHEEL_ON = b"\x1b[?1000h\x1b[?1006h"
MOUSE_WHEEL_OFF = b"\x1b[?1000l\x1b[?1006l"

ENTER_TUI_SEQUENCE = ALTERNATE_SCREEN_ON + CURSOR_HIDE + MOUSE_WHEEL_ON
EXIT_TUI_SEQUENCE = MOUSE_WHEEL_OFF + CURSOR_SHOW + ALTERNATE_SCREEN_OFF


class TerminalController:
    """Enter and leave the full-screen pager session on one terminal."""

    def __init__(self, key_fd: int, output_fd: int) -> None:
        self.key_fd = key_fd
        self.output_fd = output_fd
        self._saved_tty_state = termios.tcgetattr(key_fd)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable_tui_mode(self) -> None:
        """Switch the keyboard to raw input and paint on the alternate screen."""
        if self._active:
            return
        tty.setraw(self.key_fd, termios.TCSAFLUSH)
        os.write(self.output_fd, ENTER_TUI_SEQUENCE)
        self._active = True

    def disable_tui_mode(self) -> None:
        """Give the terminal back exactly as it was before the session."""
        if not self._active:
            return
        self._active = False
        os.write(self.output_fd, EXIT_TUI_SEQUENCE)
        termios.tcsetattr(self.key_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()
