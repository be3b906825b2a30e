"""Value types naming logical lines and the top-of-viewport position.

``LineIndex`` is zero-based; one-based numbers only appear at the user
boundary (line-number gutter, goto-line prompt, status bar).
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class LineIndex:
    """Zero-based index of one logical line."""

    value: int = 0

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"line index must be non-negative, got {self.value}")

    @classmethod
    def from_one_based(cls, line_number: int) -> LineIndex:
        """Build an index from a user-facing line number, clamping below 1."""
        return cls(max(0, line_number - 1))

    def index(self) -> int:
        return self.value

    def is_zero(self) -> bool:
        return self.value == 0

    def line_number(self) -> int:
        """Return the one-based number shown to users."""
        return self.value + 1

    def non_wrapping_add(self, delta: int) -> LineIndex:
        """Add ``delta``, stopping at the first line instead of going negative."""
        return LineIndex(max(0, self.value + delta))


@dataclass(frozen=True, order=True)
class ScrollPosition:
    """Logical line at the top of the content area plus its first visible segment.

    ``sub_line`` counts wrapped segments of ``line_index``; it is always 0
    when long lines are not wrapped.
    """

    line_index: LineIndex = field(default_factory=LineIndex)
    sub_line: int = 0

    @classmethod
    def at(cls, line: int, sub_line: int = 0) -> ScrollPosition:
        return cls(LineIndex(line), sub_line)

    def key(self) -> tuple[int, int]:
        return self.line_index.index(), self.sub_line
