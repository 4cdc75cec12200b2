"""Event-based parser core."""

from contextlib import contextmanager
from dataclasses import dataclass

from kotlinpy.diagnostics import PARSER_EXPECTED_TOKEN, Diagnostic, diagnostic_from_spec
from kotlinpy.lexer import TokenKind
from kotlinpy.parser.marker import Marker
from kotlinpy.parser.options import ParserOptions
from kotlinpy.parser.parsed_syntax import ParsedSyntax
from kotlinpy.parser.token_source import TokenSource, TokenSourceCheckpoint
from kotlinpy.parser.tree_sink import Event, StartEvent, TokenEvent
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.text import TextRange

TOKEN_SPELLING: dict[TokenKind, str] = {
    TokenKind.LPAR: "(",
    TokenKind.RPAR: ")",
    TokenKind.LBRACE: "{",
    TokenKind.RBRACE: "}",
    TokenKind.LBRACKET: "[",
    TokenKind.RBRACKET: "]",
    TokenKind.GT: ">",
    TokenKind.COLON: ":",
    TokenKind.ARROW: "->",
    TokenKind.EQ: "=",
    TokenKind.IN_KEYWORD: "in",
    TokenKind.WHILE_KEYWORD: "while",
    TokenKind.IDENTIFIER: "identifier",
}


@dataclass(frozen=True, slots=True)
class ParserCheckpoint:
    source_checkpoint: TokenSourceCheckpoint
    events_len: int
    diagnostics_len: int
    speculative_depth: int


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Event-based parser."""

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()
        self._events: list[Event] = []
        self._diagnostics: list[Diagnostic] = []
        self._speculative_depth = 0

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def events(self) -> list[Event]:
        return self._events

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def current(self) -> TokenKind:
        return self._source.current

    @property
    def current_range(self) -> TextRange:
        return self._source.current_range

    @property
    def current_text(self) -> str:
        return self._source.current_text

    @property
    def position(self) -> int:
        return self._source.position

    @property
    def has_preceding_line_break(self) -> bool:
        return self._source.has_preceding_line_break

    @property
    def has_preceding_trivia(self) -> bool:
        return self._source.has_preceding_trivia

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def at_soft_keyword(self, text: str) -> bool:
        """Soft keywords (`by`, `constructor`, `init`, modifiers) are lexed as identifiers."""
        return self.current == TokenKind.IDENTIFIER and self.current_text == text

    def nth(self, n: int) -> TokenKind:
        return self._source.nth(n)

    def nth_at(self, n: int, kind: TokenKind) -> bool:
        return self._source.nth(n) == kind

    def nth_text(self, n: int) -> str:
        return self._source.nth_text(n)

    def nth_range(self, n: int) -> TextRange:
        return self._source.nth_range(n)

    def has_nth_preceding_line_break(self, n: int) -> bool:
        return self._source.has_nth_preceding_line_break(n)

    def has_nth_preceding_trivia(self, n: int) -> bool:
        return self._source.has_nth_preceding_trivia(n)

    def start(self) -> Marker:
        pos = len(self._events)
        self._events.append(StartEvent.tombstone())
        return Marker(pos=pos, start=self.current_range.start, old_start=pos)

    def checkpoint(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            source_checkpoint=self._source.checkpoint,
            events_len=len(self._events),
            diagnostics_len=len(self._diagnostics),
            speculative_depth=self._speculative_depth,
        )

    def rewind(self, checkpoint: ParserCheckpoint) -> None:
        self._source.rewind(checkpoint.source_checkpoint)
        del self._events[checkpoint.events_len :]
        del self._diagnostics[checkpoint.diagnostics_len :]
        self._speculative_depth = checkpoint.speculative_depth

    @contextmanager
    def speculative_parsing(self):
        self._speculative_depth += 1
        try:
            yield
        finally:
            self._speculative_depth -= 1

    def bump(self) -> None:
        if self.current == TokenKind.EOF:
            return
        self._events.append(
            TokenEvent(
                kind=KotlinSyntaxKind.from_token_kind(self.current),
                end=self.current_range.end,
            )
        )
        self._source.bump()

    def bump_any(self) -> None:
        self.bump()

    def eat(self, kind: TokenKind) -> bool:
        if self.current == kind:
            self.bump()
            return True
        return False

    def expect(self, kind: TokenKind, diagnostic: Diagnostic | None = None) -> ParsedSyntax:
        if self.eat(kind):
            return ParsedSyntax.present()
        self.error(diagnostic if diagnostic is not None else self._expected_token(kind))
        return ParsedSyntax.absent()

    def error(self, diagnostic: Diagnostic) -> None:
        if self._diagnostics:
            previous = self._diagnostics[-1]
            if previous.range.start == diagnostic.range.start:
                return
        self._diagnostics.append(diagnostic)

    def is_speculative_parsing(self) -> bool:
        return self._speculative_depth > 0

    def finish(self) -> tuple[list[Event], list[Diagnostic]]:
        return self._events, self._diagnostics

    def _expected_token(self, kind: TokenKind) -> Diagnostic:
        spelling = TOKEN_SPELLING.get(kind, kind.name.lower())
        return diagnostic_from_spec(
            PARSER_EXPECTED_TOKEN,
            self.current_range,
            message=f"Expected `{spelling}`",
        )
