"""ANSI-aware text measurement and line shaping utilities.

Provides display-width measurement, word wrapping into character spans, and
decoding of SGR-styled text into per-character styles. Wrapping works on the
plain text of a line so search offsets and rendered segments share one
coordinate system.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return display width of ``text`` after removing ANSI escape sequences."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def wrap_spans(text: str, width: int) -> list[tuple[int, int]]:
    """Word-wrap plain ``text`` into ``(start, end)`` spans fitting ``width`` columns.

    Breaks go after the last space that fits; the spaces at a break belong to
    no span. Words wider than ``width`` are split hard. Leading indentation of
    the first segment is kept. Every line yields at least one span.
    """
    n = len(text)
    if width <= 0 or n == 0:
        return [(0, n)]

    spans: list[tuple[int, int]] = []
    start = 0
    while start < n:
        col = 0
        i = start
        last_break = -1
        seen_word = False
        while i < n:
            ch = text[i]
            w = char_display_width(ch, col)
            if col + w > width:
                break
            if ch == " ":
                if seen_word:
                    last_break = i
            else:
                seen_word = True
            col += w
            i += 1

        if i >= n:
            spans.append((start, n))
            break

        if text[i] == " ":
            end = i
        elif last_break > start:
            end = last_break
        else:
            # Nothing to break on; always make progress even for a too-wide glyph.
            end = max(i, start + 1)
        next_start = end

        trimmed_end = end
        while trimmed_end > start and text[trimmed_end - 1] == " ":
            trimmed_end -= 1
        spans.append((start, trimmed_end))

        while next_start < n and text[next_start] == " ":
            next_start += 1
        start = next_start

    return spans or [(0, 0)]


_SGR_ATTRIBUTE_RESETS = {
    "21": {"1"},
    "22": {"1", "2"},
    "23": {"3"},
    "24": {"4"},
    "25": {"5"},
    "27": {"7"},
    "28": {"8"},
    "29": {"9"},
}

SgrState = tuple[str, str, frozenset[str]]
_EMPTY_SGR: SgrState = ("", "", frozenset())


def _apply_sgr(state: SgrState, params: str) -> SgrState:
    """Fold one SGR parameter list into ``(foreground, background, attributes)``."""
    fg, bg, frozen_attrs = state
    attrs = set(frozen_attrs)
    codes = params.split(";") if params else ["0"]
    i = 0
    while i < len(codes):
        code = codes[i] or "0"
        if not code.isdigit():
            i += 1
            continue
        if code in {"38", "48"}:
            kind = codes[i + 1] if i + 1 < len(codes) else ""
            take = 3 if kind == "5" else 5 if kind == "2" else 1
            value = ";".join(codes[i : i + take])
            if code == "38":
                fg = value
            else:
                bg = value
            i += take
            continue
        number = int(code)
        if number == 0:
            fg, bg = "", ""
            attrs.clear()
        elif number == 39:
            fg = ""
        elif number == 49:
            bg = ""
        elif code in _SGR_ATTRIBUTE_RESETS:
            attrs -= _SGR_ATTRIBUTE_RESETS[code]
        elif 30 <= number <= 37 or 90 <= number <= 97:
            fg = code
        elif 40 <= number <= 47 or 100 <= number <= 107:
            bg = code
        else:
            attrs.add(code)
        i += 1
    return fg, bg, frozenset(attrs)


def sgr_style_string(state: SgrState) -> str:
    """Render an SGR state as a canonical parameter string (``""`` for default)."""
    fg, bg, attrs = state
    parts = sorted(attrs, key=int)
    if fg:
        parts.append(fg)
    if bg:
        parts.append(bg)
    return ";".join(parts)


def styled_chars(text: str) -> list[tuple[str, str]]:
    """Decode styled text into ``(char, sgr_params)`` pairs.

    Only SGR sequences affect the style; other escape sequences are dropped.
    The plain characters of the result equal ``strip_ansi(text)``.
    """
    out: list[tuple[str, str]] = []
    state = _EMPTY_SGR
    style = ""
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                if seq.endswith("m"):
                    state = _apply_sgr(state, seq[2:-1])
                    style = sgr_style_string(state)
                i = match.end()
                continue
        out.append((text[i], style))
        i += 1
    return out
