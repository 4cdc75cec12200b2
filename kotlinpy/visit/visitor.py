"""Rewriting traversal over the lossless tree.

A pass threads one `TraversalState` through every call. When the node named
by `stop_after` has been visited, the state flips to stopped and every node
reached afterwards is returned unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from uuid import UUID

from kotlinpy.diagnostics import Diagnostic
from kotlinpy.tree import Container, LeftPadded, RightPadded, Tree, is_tree

_SKIPPED_FIELDS = frozenset({"id", "prefix", "markers"})


@dataclass(slots=True)
class TraversalState:
    """Per-pass traversal state.

    `passed_through` holds the ids of subtrees returned verbatim after the stop,
    so rules that edit a child's trivia from the parent can leave them alone.
    """

    stop_after: UUID | None = None
    stopped: bool = False
    passed_through: set[UUID] = field(default_factory=set)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def is_live(self, tree: Tree) -> bool:
        return tree.id not in self.passed_through


class TreeVisitor:
    """Post-order rewriting visitor.

    Children are visited first, then `visit_node` sees the node with its
    rewritten children. Subclasses override `visit_node`.
    """

    def visit[T: Tree](self, tree: T, state: TraversalState) -> T:
        if state.stopped:
            state.passed_through.add(tree.id)
            return tree

        result = self.visit_node(self.visit_children(tree, state), state)
        if state.stop_after is not None and tree.id == state.stop_after:
            state.stopped = True
        return result

    def visit_node[T: Tree](self, tree: T, state: TraversalState) -> T:
        return tree

    def visit_children[T: Tree](self, tree: T, state: TraversalState) -> T:
        changes: dict[str, object] = {}
        for node_field in fields(tree):  # type: ignore[arg-type]
            if node_field.name in _SKIPPED_FIELDS:
                continue
            value = getattr(tree, node_field.name)
            visited = self._visit_value(value, state)
            if visited is not value:
                changes[node_field.name] = visited
        if not changes:
            return tree
        return replace(tree, **changes)  # type: ignore[type-var]

    def _visit_value(self, value: object, state: TraversalState) -> object:
        match value:
            case RightPadded(element=element) | LeftPadded(element=element):
                return value.with_element(self._visit_value(element, state))
            case Container(padded=padded):
                visited = self._visit_tuple(padded, state)
                return value if visited is padded else value.with_padded(visited)
            case tuple():
                return self._visit_tuple(value, state)
        if is_tree(value):
            return self.visit(value, state)  # type: ignore[arg-type]
        return value

    def _visit_tuple(self, items: tuple[object, ...], state: TraversalState) -> tuple[object, ...]:
        visited = tuple(self._visit_value(item, state) for item in items)
        if all(new is old for new, old in zip(visited, items, strict=True)):
            return items
        return visited


def run_visitor[T: Tree](
    visitor: TreeVisitor,
    tree: T,
    *,
    stop_after: UUID | None = None,
    state: TraversalState | None = None,
) -> T:
    """Visit `tree` with a fresh state unless one is given."""
    if state is None:
        state = TraversalState(stop_after=stop_after)
    elif stop_after is not None:
        raise ValueError("Pass either state or stop_after, not both")
    return visitor.visit(tree, state)


__all__ = ["TraversalState", "TreeVisitor", "run_visitor"]
