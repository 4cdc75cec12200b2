"""Trivia capture over red-tree siblings."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from kotlinpy.cst import SyntaxElement, SyntaxToken
from kotlinpy.mapping.errors import InconsistentTriviaError
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.tree import Comment, Space


class Direction(StrEnum):
    BACKWARD = "backward"
    FORWARD = "forward"


def first_token(element: SyntaxElement) -> SyntaxToken | None:
    if isinstance(element, SyntaxToken):
        return element
    return element.first_token()


def last_token(element: SyntaxElement) -> SyntaxToken | None:
    if isinstance(element, SyntaxToken):
        return element
    for child in reversed(element.children):
        token = last_token(child)
        if token is not None:
            return token
    return None


def trivia_tokens(anchor: SyntaxElement, direction: Direction) -> list[SyntaxToken]:
    """Trivia leaves next to `anchor`, in source order.

    Nodes never start or end with trivia, so the run is a contiguous stretch of
    siblings of the first ancestor (or self) that has a sibling on that side.
    """
    current: SyntaxElement = anchor
    while True:
        sibling = current.prev_sibling() if direction == Direction.BACKWARD else current.next_sibling()
        if sibling is not None:
            break
        parent = current.parent
        if parent is None:
            return []
        current = parent

    collected: list[SyntaxToken] = []
    while isinstance(sibling, SyntaxToken) and sibling.is_trivia:
        collected.append(sibling)
        sibling = sibling.prev_sibling() if direction == Direction.BACKWARD else sibling.next_sibling()

    if direction == Direction.BACKWARD:
        collected.reverse()
    return collected


def capture_trivia(anchor: SyntaxElement, direction: Direction = Direction.BACKWARD) -> Space:
    return build_space(trivia_tokens(anchor, direction))


def build_space(tokens: Iterable[SyntaxToken]) -> Space:
    """Fold trivia leaves into a `Space`; a leading byte-order mark is skipped."""
    whitespace: list[str] = []
    comments: list[Comment] = []
    suffix: list[str] = []

    for token in tokens:
        match token.kind:
            case KotlinSyntaxKind.BYTE_ORDER_MARK:
                continue
            case KotlinSyntaxKind.WHITESPACE | KotlinSyntaxKind.NEWLINE:
                (suffix if comments else whitespace).append(token.text)
            case KotlinSyntaxKind.LINE_COMMENT:
                _close_comment(comments, suffix)
                comments.append(Comment(multiline=False, text=token.text[2:]))
            case KotlinSyntaxKind.BLOCK_COMMENT:
                if len(token.text) < 4 or not token.text.endswith("*/"):
                    raise InconsistentTriviaError(token.range, "Unterminated block comment in trivia")
                _close_comment(comments, suffix)
                comments.append(Comment(multiline=True, text=token.text[2:-2]))
            case _:
                raise InconsistentTriviaError(token.range)

    _close_comment(comments, suffix)
    if not whitespace and not comments:
        return Space.EMPTY
    return Space("".join(whitespace), tuple(comments))


def _close_comment(comments: list[Comment], suffix: list[str]) -> None:
    if comments and suffix:
        comments[-1] = comments[-1].with_suffix(comments[-1].suffix + "".join(suffix))
    suffix.clear()


__all__ = [
    "Direction",
    "build_space",
    "capture_trivia",
    "first_token",
    "last_token",
    "trivia_tokens",
]
