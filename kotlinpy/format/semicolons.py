"""Drop `;` that only terminate a line."""

from __future__ import annotations

from kotlinpy.tree import Block, CompilationUnit, EnumValueSet, RightPadded, Semicolon, Space, Tree
from kotlinpy.visit import TraversalState, TreeVisitor


class RemoveTrailingSemicolonVisitor(TreeVisitor):
    """Remove a statement's `;` when the statement is last or a line break follows.

    A semicolon with a comment before it is kept, so no comment moves. So is the
    `;` that ends enum entries followed by members.
    """

    def visit_node[T: Tree](self, tree: T, state: TraversalState) -> T:
        match tree:
            case Block():
                return tree.with_fields(statements=self._strip(tree.statements, state))
            case CompilationUnit():
                imports = tree.imports
                package = tree.package_declaration
                if package is not None:
                    following = imports[0] if imports else (tree.statements[0] if tree.statements else None)
                    package = self._strip_one(package, following, state)
                return tree.with_fields(
                    package_declaration=package,
                    imports=self._strip(imports, state, trailing=tree.statements[0] if tree.statements else None),
                    statements=self._strip(tree.statements, state),
                )
        return tree

    def _strip[T: Tree](
        self,
        items: tuple[RightPadded[T], ...],
        state: TraversalState,
        *,
        trailing: RightPadded[Tree] | None = None,
    ) -> tuple[RightPadded[T], ...]:
        result = tuple(
            self._strip_one(item, items[index + 1] if index + 1 < len(items) else trailing, state)
            for index, item in enumerate(items)
        )
        if all(new is old for new, old in zip(result, items, strict=True)):
            return items
        return result

    def _strip_one[T: Tree](
        self,
        padded: RightPadded[T],
        following: RightPadded[Tree] | None,
        state: TraversalState,
    ) -> RightPadded[T]:
        if not padded.markers.has(Semicolon) or padded.after.has_comments:
            return padded
        if not state.is_live(padded.element):
            return padded
        if following is not None and not following.element.prefix.contains_newline():
            return padded
        if following is not None and isinstance(padded.element, EnumValueSet):
            return padded
        return padded.with_markers(padded.markers.remove(Semicolon)).with_after(Space.EMPTY)


__all__ = ["RemoveTrailingSemicolonVisitor"]
