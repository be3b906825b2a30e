"""Search query compilation and per-line hit lookup.

Queries use smart case: all-lowercase queries match case-insensitively, any
uppercase character makes the match case-sensitive. Valid regular
expressions are used as such; anything else is matched literally.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class SearchDirection(enum.Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    def reversed(self) -> SearchDirection:
        if self is SearchDirection.FORWARD:
            return SearchDirection.BACKWARD
        return SearchDirection.FORWARD


def has_uppercase(query: str) -> bool:
    return any(ch.isupper() for ch in query)


@dataclass(frozen=True)
class SearchPattern:
    """Compiled matcher for one query string."""

    query: str
    regex: re.Pattern[str]
    is_literal: bool = False

    @property
    def case_sensitive(self) -> bool:
        return not (self.regex.flags & re.IGNORECASE)

    def spans(self, text: str) -> list[tuple[int, int]]:
        """Return every non-empty match span in ``text``."""
        return [(m.start(), m.end()) for m in self.regex.finditer(text) if m.end() > m.start()]

    def matches(self, text: str) -> bool:
        match = self.regex.search(text)
        if match is None:
            return False
        if match.end() > match.start():
            return True
        return bool(self.spans(text))

    def hit_sub_lines(self, text: str, segments: list[tuple[int, int]]) -> list[int]:
        """Return sorted indexes of wrapped ``segments`` in which a match starts.

        A match starting in whitespace dropped at a wrap point is attributed
        to the following segment.
        """
        if not segments:
            return []
        hits: set[int] = set()
        for start, _end in self.spans(text):
            sub_line = len(segments) - 1
            for idx, (_seg_start, seg_end) in enumerate(segments):
                if start < seg_end:
                    sub_line = idx
                    break
            hits.add(sub_line)
        return sorted(hits)


def to_pattern(query: str) -> SearchPattern | None:
    """Compile ``query`` into a :class:`SearchPattern`; empty queries yield ``None``."""
    if not query:
        return None

    flags = 0 if has_uppercase(query) else re.IGNORECASE
    try:
        return SearchPattern(query=query, regex=re.compile(query, flags))
    except re.error:
        return SearchPattern(query=query, regex=re.compile(re.escape(query), flags), is_literal=True)
