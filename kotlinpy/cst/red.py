"""Red CST wrappers over immutable green nodes/tokens."""

from __future__ import annotations

from collections.abc import Iterator

from kotlinpy.cst.green import GreenNode
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.text import TextRange


class SyntaxToken:
    __slots__ = (
        "kind",
        "text",
        "parent",
        "index_in_parent",
        "_start",
    )

    def __init__(
        self,
        *,
        kind: KotlinSyntaxKind,
        text: str,
        parent: SyntaxNode,
        index_in_parent: int,
        start: int,
    ) -> None:
        self.kind = kind
        self.text = text
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._start = start

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._start + len(self.text)

    @property
    def range(self) -> TextRange:
        return TextRange(self.start, self.end)

    @property
    def is_trivia(self) -> bool:
        return self.kind.is_trivia

    def next_sibling(self) -> SyntaxElement | None:
        return _sibling(self.parent, self.index_in_parent + 1)

    def prev_sibling(self) -> SyntaxElement | None:
        return _sibling(self.parent, self.index_in_parent - 1)

    def __repr__(self) -> str:
        return f"SyntaxToken({self.kind.name}, {self.text!r}, {self.range!r})"


class SyntaxNode:
    __slots__ = (
        "kind",
        "parent",
        "index_in_parent",
        "_children",
        "_source",
        "_start",
        "_end",
    )

    def __init__(
        self,
        *,
        kind: KotlinSyntaxKind,
        parent: SyntaxNode | None,
        index_in_parent: int,
        source: str,
        start: int,
    ) -> None:
        self.kind = kind
        self.parent = parent
        self.index_in_parent = index_in_parent
        self._source = source
        self._start = start
        self._end = start
        self._children: tuple[SyntaxElement, ...] = ()

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def range(self) -> TextRange:
        return TextRange(self._start, self._end)

    @property
    def text(self) -> str:
        return self._source[self._start : self._end]

    @property
    def source(self) -> str:
        return self._source

    @property
    def is_trivia(self) -> bool:
        return False

    @property
    def children(self) -> tuple[SyntaxElement, ...]:
        return self._children

    def child_nodes(self) -> tuple[SyntaxNode, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxNode))

    def child_tokens(self) -> tuple[SyntaxToken, ...]:
        return tuple(child for child in self._children if isinstance(child, SyntaxToken))

    def significant_children(self) -> tuple[SyntaxElement, ...]:
        """Children without whitespace/comment leaves and the zero-width EOF token."""
        return tuple(
            child
            for child in self._children
            if not child.is_trivia and child.kind != KotlinSyntaxKind.EOF
        )

    def first_child(self, kind: KotlinSyntaxKind) -> SyntaxElement | None:
        for child in self._children:
            if child.kind == kind:
                return child
        return None

    def first_token(self) -> SyntaxToken | None:
        for child in self._children:
            if isinstance(child, SyntaxToken):
                return child
            token = child.first_token()
            if token is not None:
                return token
        return None

    def descendants(self) -> Iterator[SyntaxNode]:
        """Pre-order walk over this node and every nested node."""
        yield self
        for child in self._children:
            if isinstance(child, SyntaxNode):
                yield from child.descendants()

    def descendants_tokens(self) -> tuple[SyntaxToken, ...]:
        tokens: list[SyntaxToken] = []

        def walk(node: SyntaxNode) -> None:
            for child in node.children:
                if isinstance(child, SyntaxToken):
                    tokens.append(child)
                else:
                    walk(child)

        walk(self)
        return tuple(tokens)

    def next_sibling(self) -> SyntaxElement | None:
        if self.parent is None:
            return None
        return _sibling(self.parent, self.index_in_parent + 1)

    def prev_sibling(self) -> SyntaxElement | None:
        if self.parent is None:
            return None
        return _sibling(self.parent, self.index_in_parent - 1)

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind.name}, {self.range!r})"


type SyntaxElement = SyntaxNode | SyntaxToken


def _sibling(parent: SyntaxNode, index: int) -> SyntaxElement | None:
    if index < 0 or index >= len(parent.children):
        return None
    return parent.children[index]


def from_green(root: GreenNode, source: str = "") -> SyntaxNode:
    red_root, _ = _build_node(
        green=root,
        parent=None,
        index_in_parent=0,
        source=source,
        start=0,
    )
    return red_root


def _build_node(
    *,
    green: GreenNode,
    parent: SyntaxNode | None,
    index_in_parent: int,
    source: str,
    start: int,
) -> tuple[SyntaxNode, int]:
    node = SyntaxNode(
        kind=green.kind,
        parent=parent,
        index_in_parent=index_in_parent,
        source=source,
        start=start,
    )

    current = start
    children: list[SyntaxElement] = []
    for child_index, child in enumerate(green.children):
        if isinstance(child, GreenNode):
            red_child, next_offset = _build_node(
                green=child,
                parent=node,
                index_in_parent=child_index,
                source=source,
                start=current,
            )
            children.append(red_child)
            current = next_offset
            continue

        token = SyntaxToken(
            kind=child.kind,
            text=child.text,
            parent=node,
            index_in_parent=child_index,
            start=current,
        )
        children.append(token)
        current = token.end

    node._children = tuple(children)
    node._end = current
    return node, current


__all__ = [
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "from_green",
]
