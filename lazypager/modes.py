"""Pager modes: the closed set of states that own keyboard input.

Exactly one mode is active on a :class:`~lazypager.pager.Pager`. Each mode
handles keys and supplies the status-bar text; any code that needs the
concrete variant goes through an explicit chain that rejects unknown objects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from .inputbox import InputBox
from .position import LineIndex, ScrollPosition
from .search import SearchDirection, SearchPattern, to_pattern

if TYPE_CHECKING:
    from .pager import Pager

ENTER_KEYS = {"ENTER_CR", "ENTER_LF"}
CANCEL_KEYS = {"ESC", "CTRL_C", "CTRL_G"}
QUIT_KEYS = {"q", "Q", "ESC", "CTRL_C"}
MOUSE_WHEEL_ROWS = 3


class PagerModeViewing:
    """Default mode: navigation keys move the viewport."""

    def __init__(self, pager: Pager) -> None:
        self.pager = pager

    def handle_key(self, key: str) -> None:
        pager = self.pager
        if key in QUIT_KEYS:
            pager.quit()
        elif key in {"UP", "k", "y"}:
            pager.scroll_lines(-1)
        elif key in {"DOWN", "j", "e"} or key in ENTER_KEYS:
            pager.scroll_lines(1)
        elif key in {"PAGE_DOWN", " ", "f", "CTRL_F"}:
            pager.scroll_pages(1)
        elif key in {"PAGE_UP", "b", "CTRL_B"}:
            pager.scroll_pages(-1)
        elif key == "CTRL_D":
            pager.scroll_lines(max(1, pager.content_rows() // 2))
        elif key == "CTRL_U":
            pager.scroll_lines(-max(1, pager.content_rows() // 2))
        elif key in {"HOME", "<"}:
            pager.scroll_to_start()
        elif key in {"END", ">", "G"}:
            pager.scroll_to_end()
        elif key == "LEFT":
            pager.scroll_columns(-pager.horizontal_step())
        elif key == "RIGHT":
            pager.scroll_columns(pager.horizontal_step())
        elif key.startswith("MOUSE_WHEEL_UP"):
            pager.scroll_lines(-MOUSE_WHEEL_ROWS)
        elif key.startswith("MOUSE_WHEEL_DOWN"):
            pager.scroll_lines(MOUSE_WHEEL_ROWS)
        elif key == "w":
            pager.toggle_wrap()
        elif key == "/":
            pager.enter_search_mode(SearchDirection.FORWARD)
        elif key == "?":
            pager.enter_search_mode(SearchDirection.BACKWARD)
        elif key == "g":
            pager.enter_goto_line_mode()
        elif key == "n":
            pager.scroll_to_search_hit(pager.search_direction)
        elif key == "N":
            pager.scroll_to_search_hit(pager.search_direction.reversed())

    def status_text(self) -> str:
        return self.pager.position_status()


class PagerModeNotFound:
    """Entered when a search scan hit the content boundary without a match.

    The next ``n``/``N`` wraps around; any other key falls back to viewing.
    """

    def __init__(self, pager: Pager) -> None:
        self.pager = pager

    def handle_key(self, key: str) -> None:
        pager = self.pager
        if key == "n":
            pager.scroll_to_search_hit(pager.search_direction)
            return
        if key == "N":
            pager.scroll_to_search_hit(pager.search_direction.reversed())
            return
        viewing = PagerModeViewing(pager)
        pager.set_mode(viewing)
        viewing.handle_key(key)

    def status_text(self) -> str:
        boundary = "top" if self.pager.search_direction is SearchDirection.FORWARD else "bottom"
        return f"Not found: {self.pager.search_string}, press 'n' to search from the {boundary}"


class PagerModeSearch:
    """Search-entry mode; scrolls live to the first hit while the query is typed."""

    def __init__(
        self,
        pager: Pager,
        direction: SearchDirection = SearchDirection.FORWARD,
        initial_position: ScrollPosition | None = None,
    ) -> None:
        self.pager = pager
        self.direction = direction
        self.initial_position = pager.scroll_position if initial_position is None else initial_position
        self.pattern: SearchPattern | None = None
        self.input_box = InputBox(on_text_changed=self._on_text_changed)

    def _on_text_changed(self, _text: str) -> None:
        self.update_search_pattern()

    def update_search_pattern(self) -> None:
        """Recompile the in-progress query and move to its first hit."""
        self.pattern = to_pattern(self.input_box.text)
        self.pager.scroll_to_search_hits(self.pattern, self.initial_position, self.direction)

    def prompt(self) -> str:
        return "/" if self.direction is SearchDirection.FORWARD else "?"

    def confirm(self) -> None:
        pager = self.pager
        text = self.input_box.text
        if text:
            pager.search_string = text
            pager.search_pattern = to_pattern(text)
            pager.search_direction = self.direction
        else:
            # An empty query keeps the previous search.
            pager.scroll_position = self.initial_position
        pager.set_mode(PagerModeViewing(pager))

    def cancel(self) -> None:
        self.pager.scroll_position = self.initial_position
        self.pager.set_mode(PagerModeViewing(self.pager))

    def handle_key(self, key: str) -> None:
        if key in ENTER_KEYS:
            self.confirm()
        elif key in CANCEL_KEYS:
            self.cancel()
        elif key in {"UP", "DOWN", "PAGE_UP", "PAGE_DOWN"}:
            self.confirm()
            self.pager.mode.handle_key(key)
        else:
            self.input_box.handle_key(key)

    def status_text(self) -> str:
        return self.prompt() + self.input_box.text


class PagerModeGotoLine:
    """Line-number entry mode; only digits are accepted."""

    PROMPT = "Go to line number: "

    def __init__(self, pager: Pager) -> None:
        self.pager = pager
        self.input_box = InputBox(accept=str.isdecimal)

    def confirm(self) -> None:
        pager = self.pager
        text = self.input_box.text
        if text.isdecimal():
            pager.scroll_to_line(LineIndex.from_one_based(int(text)))
        pager.set_mode(PagerModeViewing(pager))

    def cancel(self) -> None:
        self.pager.set_mode(PagerModeViewing(self.pager))

    def handle_key(self, key: str) -> None:
        if key in ENTER_KEYS:
            self.confirm()
        elif key in CANCEL_KEYS:
            self.cancel()
        else:
            self.input_box.handle_key(key)

    def status_text(self) -> str:
        return self.PROMPT + self.input_box.text


PagerMode = Union[PagerModeViewing, PagerModeNotFound, PagerModeSearch, PagerModeGotoLine]


def mode_name(mode: PagerMode) -> str:
    if isinstance(mode, PagerModeViewing):
        return "Viewing"
    if isinstance(mode, PagerModeNotFound):
        return "NotFound"
    if isinstance(mode, PagerModeSearch):
        return "Search"
    if isinstance(mode, PagerModeGotoLine):
        return "GotoLine"
    raise AssertionError(f"unknown pager mode: {mode!r}")
