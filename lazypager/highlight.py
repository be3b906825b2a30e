"""Source loading, sanitization, and syntax highlighting.

Highlights whole documents with Pygments and splits the result back into
logical lines. Also neutralizes terminal control bytes so paged content
cannot move the cursor or ring the bell.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ansi import TAB_STOP, strip_ansi

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "native"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(line: str) -> str:
    """Escape control bytes in one logical line and expand tabs to 8-column stops."""
    if "\t" in line:
        line = line.expandtabs(TAB_STOP)
    if _CONTROL_RE.search(line) is None:
        return line

    out: list[str] = []
    for ch in line:
        code = ord(ch)
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Validate a Pygments style name, falling back to :data:`DEFAULT_STYLE`."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE

    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.debug("unknown pygments style %r, using %r", style, DEFAULT_STYLE)
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_lines(lines: list[str], name: str, style: str = DEFAULT_STYLE) -> list[str]:
    """Return ANSI-styled versions of already sanitized ``lines``.

    The lexer is picked from the file name only. Unknown names, plain-text
    lexers and any line whose visible text would change come back unstyled,
    so ``strip_ansi(result[i]) == lines[i]`` always holds.
    """
    if not lines or not name:
        return list(lines)

    source = "\n".join(lines) + "\n"
    try:
        lexer = get_lexer_for_filename(Path(name).name, source, stripnl=False)
    except ClassNotFound:
        return list(lines)
    if isinstance(lexer, TextLexer):
        return list(lines)

    rendered = pygments_highlight(source, lexer, _formatter_for_style(normalize_style(style)))
    styled = rendered.split("\n")
    if styled and strip_ansi(styled[-1]) == "":
        styled.pop()
    if len(styled) != len(lines):
        logger.debug("highlighter changed line count for %s, showing plain text", name)
        return list(lines)

    return [styled_line if strip_ansi(styled_line) == plain else plain for styled_line, plain in zip(styled, lines)]
