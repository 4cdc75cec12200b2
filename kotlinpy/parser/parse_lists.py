"""Biome-style reusable node-list parse loop helpers."""

from collections.abc import Callable
from dataclasses import dataclass

from kotlinpy.diagnostics import PARSER_UNEXPECTED_TOKEN, diagnostic_from_spec
from kotlinpy.lexer import TokenKind
from kotlinpy.parser.parse_recovery import ParseRecoveryTokenSet
from kotlinpy.parser.parsed_syntax import ParsedSyntax
from kotlinpy.parser.parser import Parser, ParserProgress
from kotlinpy.syntax import KotlinSyntaxKind


@dataclass(slots=True)
class ParseNodeList:
    """Reusable non-separated list parser with progress and recovery hooks."""

    list_kind: KotlinSyntaxKind
    is_at_list_end: Callable[[Parser], bool]
    parse_element: Callable[[Parser], ParsedSyntax]
    recover: Callable[[Parser, ParsedSyntax], bool]

    def parse_list(self, parser: Parser, *, allow_empty: bool = True) -> "CompletedMarker | None":
        marker = parser.start()
        start = parser.position
        self.parse_elements(parser)

        if not allow_empty and parser.position == start:
            marker.abandon(parser)
            return None
        return marker.complete(parser, self.list_kind)

    def parse_elements(self, parser: Parser) -> None:
        """Run the element loop without wrapping the elements in a node."""
        progress = ParserProgress()

        while not parser.at(TokenKind.EOF) and not self.is_at_list_end(parser):
            progress.assert_progressing(parser)
            parsed_element = self.parse_element(parser)
            if not self.recover(parser, parsed_element):
                break


@dataclass(slots=True)
class ParseSeparatedList:
    """Comma separated list, optionally between two delimiters (`(a, b)`, `<T, U>`).

    Trailing separators are accepted.
    """

    list_kind: KotlinSyntaxKind
    parse_element: Callable[[Parser], ParsedSyntax]
    open_token: TokenKind | None = None
    close_token: TokenKind | None = None

    def parse_list(self, parser: Parser) -> "CompletedMarker":
        marker = parser.start()
        if self.open_token is not None:
            parser.expect(self.open_token)

        recovery = None
        if self.close_token is not None:
            recovery = ParseRecoveryTokenSet(
                node_kind=KotlinSyntaxKind.ERROR,
                recovery_set=frozenset(
                    {TokenKind.COMMA, self.close_token, TokenKind.RBRACE, TokenKind.SEMICOLON}
                ),
            )

        progress = ParserProgress()
        while not parser.at(TokenKind.EOF) and not self._at_close(parser):
            progress.assert_progressing(parser)
            parsed = self.parse_element(parser)
            if parsed.is_absent():
                if recovery is None:
                    break
                parser.error(
                    diagnostic_from_spec(
                        PARSER_UNEXPECTED_TOKEN,
                        parser.current_range,
                        message=f"Unexpected token {parser.current.name}",
                    )
                )
                _, recovery_error = recovery.recover(parser)
                if recovery_error is not None and not parser.at(TokenKind.COMMA):
                    break
            if not parser.eat(TokenKind.COMMA):
                break

        if self.close_token is not None:
            parser.expect(self.close_token)
        return marker.complete(parser, self.list_kind)

    def _at_close(self, parser: Parser) -> bool:
        return self.close_token is not None and parser.at(self.close_token)


from kotlinpy.parser.marker import CompletedMarker
