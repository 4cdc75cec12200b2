"""Concrete syntax tree (green storage + red navigation)."""

from kotlinpy.cst.green import GreenElement, GreenNode, GreenToken, TreeBuilder
from kotlinpy.cst.red import (
    SyntaxElement,
    SyntaxNode,
    SyntaxToken,
    from_green,
)

__all__ = [
    "GreenElement",
    "GreenNode",
    "GreenToken",
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "TreeBuilder",
    "from_green",
]
