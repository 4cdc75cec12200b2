"""Minimal immutable green CST representation."""

from dataclasses import dataclass

from kotlinpy.syntax import KotlinSyntaxKind


@dataclass(frozen=True, slots=True)
class GreenToken:
    """A leaf. Whitespace and comments are leaves too, never hidden inside a token."""

    kind: KotlinSyntaxKind
    text: str

    @property
    def text_len(self) -> int:
        return len(self.text)


@dataclass(frozen=True, slots=True)
class GreenNode:
    kind: KotlinSyntaxKind
    children: tuple["GreenElement", ...]

    @property
    def text_len(self) -> int:
        return sum(child.text_len for child in self.children)


type GreenElement = GreenNode | GreenToken


class TreeBuilder:
    """Biome-style tree builder with pythonic immutable outputs."""

    def __init__(self) -> None:
        self._stack: list[tuple[KotlinSyntaxKind, list[GreenElement]]] = []
        self._roots: list[GreenElement] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    def start_node(self, kind: KotlinSyntaxKind) -> None:
        self._stack.append((kind, []))

    def token(self, kind: KotlinSyntaxKind, text: str) -> None:
        self._push_element(GreenToken(kind=kind, text=text))

    def finish_node(self) -> None:
        if not self._stack:
            raise RuntimeError("finish_node called with empty builder stack")

        kind, children = self._stack.pop()
        self._push_element(GreenNode(kind=kind, children=tuple(children)))

    def finish(self) -> GreenNode:
        if self._stack:
            raise RuntimeError("Cannot finish tree: unclosed nodes remain on stack")

        if len(self._roots) == 1 and isinstance(self._roots[0], GreenNode):
            root = self._roots[0]
            if root.kind == KotlinSyntaxKind.FILE:
                return root

        return GreenNode(kind=KotlinSyntaxKind.FILE, children=tuple(self._roots))

    def _push_element(self, element: GreenElement) -> None:
        if self._stack:
            self._stack[-1][1].append(element)
            return
        self._roots.append(element)
