from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """
    Half-open range [start, end) of character offsets into a source text.

    Invariant:
    - 0 <= start <= end
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < 0:
            raise ValueError("TextRange positions cannot be negative")
        if self.start > self.end:
            raise ValueError("TextRange invariant violated: start > end")

    @staticmethod
    def at(offset: int, length: int) -> "TextRange":
        """Create a range starting at offset with the given length."""
        return TextRange(offset, offset + length)

    @staticmethod
    def empty(offset: int) -> "TextRange":
        return TextRange(offset, offset)

    def len(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def contains_range(self, other: "TextRange") -> bool:
        """Check if the range fully contains another range."""
        return self.start <= other.start and other.end <= self.end

    def cover(self, other: "TextRange") -> "TextRange":
        """Get the minimal range that covers both ranges."""
        return TextRange(min(self.start, other.start), max(self.end, other.end))

    def ordering(self, other: "TextRange") -> Literal[-1, 0, 1]:
        """Compare this range to another range.

        Returns:
        - -1 if this range is before the other range
        - 0 if the ranges overlap
        - 1 if this range is after the other range
        """
        if self.end <= other.start:
            return -1
        if other.end <= self.start:
            return 1
        return 0

    def shift(self, delta: int) -> "TextRange":
        return TextRange(self.start + delta, self.end + delta)

    def __repr__(self) -> str:
        return f"TextRange({self.start}, {self.end})"


def slice_text_range(source: str, range: TextRange) -> str:
    """Get the substring of the source text covered by the given TextRange."""
    return source[range.start : range.end]


def line_col(source: str, offset: int) -> tuple[int, int]:
    """One-based line and column of an offset, for diagnostics."""
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1
