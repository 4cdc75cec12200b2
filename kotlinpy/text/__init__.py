"""Text offsets and ranges."""

from kotlinpy.text.text import TextRange, line_col, slice_text_range

__all__ = [
    "TextRange",
    "line_col",
    "slice_text_range",
]
