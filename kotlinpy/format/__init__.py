"""Formatting passes and the format runner."""

from kotlinpy.format.minimum_viable_spacing import MinimumViableSpacingVisitor, ensure_space
from kotlinpy.format.options import FormatOptions
from kotlinpy.format.runner import format_tree, run_format
from kotlinpy.format.semicolons import RemoveTrailingSemicolonVisitor
from kotlinpy.format.spaces import SpacesVisitor, spaced

__all__ = [
    "FormatOptions",
    "MinimumViableSpacingVisitor",
    "RemoveTrailingSemicolonVisitor",
    "SpacesVisitor",
    "ensure_space",
    "format_tree",
    "run_format",
    "spaced",
]
