"""Whitespace and comments attached to lossless tree nodes."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar

_WHITESPACE = " \t\f\r\n"


@dataclass(frozen=True, slots=True)
class Comment:
    """A comment body without its delimiters, plus the whitespace that follows it."""

    multiline: bool
    text: str
    suffix: str = ""

    def printed(self) -> str:
        if self.multiline:
            return f"/*{self.text}*/{self.suffix}"
        return f"//{self.text}{self.suffix}"

    def with_suffix(self, suffix: str) -> Comment:
        return replace(self, suffix=suffix)


@dataclass(frozen=True, slots=True, eq=False)
class Space:
    """Trivia run: leading whitespace followed by comments (each with its own suffix).

    Two spaces are equal when they print to the same text.
    """

    whitespace: str = ""
    comments: tuple[Comment, ...] = ()

    EMPTY: ClassVar[Space]
    SINGLE_SPACE: ClassVar[Space]

    @staticmethod
    def build(text: str) -> Space:
        """Split raw trivia text into whitespace and comments."""
        if not text:
            return Space.EMPTY

        position = 0
        length = len(text)
        while position < length and text[position] in _WHITESPACE:
            position += 1
        whitespace = text[:position]

        comments: list[Comment] = []
        while position < length:
            if text.startswith("//", position):
                end = text.find("\n", position)
                if end == -1:
                    end = length
                if end > position and text[end - 1] == "\r":
                    end -= 1
                body = text[position + 2 : end]
                multiline = False
            elif text.startswith("/*", position):
                end = _block_comment_end(text, position)
                body = text[position + 2 : end - 2]
                multiline = True
            else:
                raise ValueError(f"Not trivia text: {text!r}")

            suffix_end = end
            while suffix_end < length and text[suffix_end] in _WHITESPACE:
                suffix_end += 1
            comments.append(Comment(multiline=multiline, text=body, suffix=text[end:suffix_end]))
            position = suffix_end

        return Space(whitespace=whitespace, comments=tuple(comments))

    @staticmethod
    def merge(first: Space, second: Space) -> Space:
        """Concatenate two trivia runs, keeping the printed text."""
        if not first.comments:
            return Space(first.whitespace + second.whitespace, second.comments)
        last = first.comments[-1]
        merged = (*first.comments[:-1], last.with_suffix(last.suffix + second.whitespace))
        return Space(first.whitespace, (*merged, *second.comments))

    @property
    def is_empty(self) -> bool:
        return not self.whitespace and not self.comments

    @property
    def has_comments(self) -> bool:
        return bool(self.comments)

    @property
    def last_whitespace(self) -> str:
        """Whitespace right before the next token: the last comment's suffix, if any."""
        if self.comments:
            return self.comments[-1].suffix
        return self.whitespace

    def contains_newline(self) -> bool:
        return "\n" in self.printed() or "\r" in self.printed()

    def with_whitespace(self, whitespace: str) -> Space:
        if whitespace == self.whitespace:
            return self
        if not whitespace and not self.comments:
            return Space.EMPTY
        return Space(whitespace, self.comments)

    def with_comments(self, comments: tuple[Comment, ...]) -> Space:
        if comments == self.comments:
            return self
        return Space(self.whitespace, comments)

    def with_last_whitespace(self, whitespace: str) -> Space:
        if not self.comments:
            return self.with_whitespace(whitespace)
        last = self.comments[-1]
        if last.suffix == whitespace:
            return self
        return Space(self.whitespace, (*self.comments[:-1], last.with_suffix(whitespace)))

    def printed(self) -> str:
        return self.whitespace + "".join(comment.printed() for comment in self.comments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Space):
            return NotImplemented
        return self.printed() == other.printed()

    def __hash__(self) -> int:
        return hash(self.printed())

    def __str__(self) -> str:
        return self.printed()

    def __repr__(self) -> str:
        return f"Space({self.printed()!r})"


def _block_comment_end(text: str, start: int) -> int:
    depth = 0
    position = start
    while position < len(text):
        if text.startswith("/*", position):
            depth += 1
            position += 2
        elif text.startswith("*/", position):
            depth -= 1
            position += 2
            if depth == 0:
                return position
        else:
            position += 1
    raise ValueError(f"Unterminated block comment in trivia: {text[start:]!r}")


Space.EMPTY = Space()
Space.SINGLE_SPACE = Space(" ")


__all__ = ["Comment", "Space"]
