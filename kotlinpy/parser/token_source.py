"""Token source that hides trivia from the parser."""

from dataclasses import dataclass

from kotlinpy.lexer import EOF_TOKEN, Token, TokenKind
from kotlinpy.text import TextRange, slice_text_range


@dataclass(frozen=True, slots=True)
class TokenSourceCheckpoint:
    position: int


class TokenSource:
    """Bridge between lexer output and parser that skips trivia tokens.

    The full token list (trivia included) stays available to the tree sink.
    """

    def __init__(self, text: str, tokens: list[Token]) -> None:
        self._text = text
        self._tokens = tokens
        self._significant: list[int] = [
            index for index, token in enumerate(tokens) if not token.kind.is_trivia
        ]
        self._position = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def tokens(self) -> list[Token]:
        return self._tokens

    @property
    def current(self) -> TokenKind:
        return self._token(0).kind

    @property
    def current_range(self) -> TextRange:
        return self._token(0).range

    @property
    def current_text(self) -> str:
        return slice_text_range(self._text, self._token(0).range)

    @property
    def position(self) -> int:
        return self._token(0).range.start

    @property
    def has_preceding_line_break(self) -> bool:
        return self._token(0).has_preceding_line_break()

    @property
    def has_preceding_trivia(self) -> bool:
        return self.has_nth_preceding_trivia(0)

    @property
    def checkpoint(self) -> TokenSourceCheckpoint:
        return TokenSourceCheckpoint(self._position)

    def rewind(self, checkpoint: TokenSourceCheckpoint) -> None:
        self._position = checkpoint.position

    def bump(self) -> None:
        if self.current != TokenKind.EOF:
            self._position += 1

    def nth(self, n: int) -> TokenKind:
        return self._token(n).kind

    def nth_range(self, n: int) -> TextRange:
        return self._token(n).range

    def nth_text(self, n: int) -> str:
        return slice_text_range(self._text, self._token(n).range)

    def has_nth_preceding_line_break(self, n: int) -> bool:
        return self._token(n).has_preceding_line_break()

    def has_nth_preceding_trivia(self, n: int) -> bool:
        index = self._position + n
        if index >= len(self._significant):
            return False
        raw_index = self._significant[index]
        return raw_index > 0 and self._tokens[raw_index - 1].kind.is_trivia

    def _token(self, n: int) -> Token:
        index = self._position + n
        if index >= len(self._significant):
            return self._tokens[-1] if self._tokens else EOF_TOKEN
        return self._tokens[self._significant[index]]
