"""Operator desugaring into member calls."""

from kotlinpy.desugar.errors import UnmappedOperatorError
from kotlinpy.desugar.runner import run_desugar
from kotlinpy.desugar.visitor import (
    ASSIGNMENT_MEMBER_NAMES,
    BINARY_MEMBER_NAMES,
    INDEXING_MEMBER_NAME,
    UNARY_MEMBER_NAMES,
    DesugarVisitor,
    desugar_tree,
)

__all__ = [
    "ASSIGNMENT_MEMBER_NAMES",
    "BINARY_MEMBER_NAMES",
    "INDEXING_MEMBER_NAME",
    "UNARY_MEMBER_NAMES",
    "DesugarVisitor",
    "UnmappedOperatorError",
    "desugar_tree",
    "run_desugar",
]
