"""Tree traversal with an explicit stop cursor."""

from kotlinpy.visit.visitor import TraversalState, TreeVisitor, run_visitor

__all__ = ["TraversalState", "TreeVisitor", "run_visitor"]
