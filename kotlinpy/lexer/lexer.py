"""Lexer."""

from typing import Final

from kotlinpy.diagnostics import (
    LEXER_BAD_CHARACTER,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_STRING,
    Diagnostic,
    DiagnosticSpec,
    diagnostic_from_spec,
)
from kotlinpy.lexer.tokens import HARD_KEYWORDS, Token, TokenFlags, TokenKind
from kotlinpy.text import TextRange, slice_text_range

# Longest spellings first so that `..<` wins over `..` and `.`.
PUNCTUATION: Final[tuple[tuple[str, TokenKind], ...]] = (
    ("===", TokenKind.EQEQEQ),
    ("!==", TokenKind.EXCLEQEQEQ),
    ("..<", TokenKind.RANGE_UNTIL),
    ("++", TokenKind.PLUSPLUS),
    ("--", TokenKind.MINUSMINUS),
    ("+=", TokenKind.PLUSEQ),
    ("-=", TokenKind.MINUSEQ),
    ("*=", TokenKind.MULTEQ),
    ("/=", TokenKind.DIVEQ),
    ("%=", TokenKind.PERCEQ),
    ("==", TokenKind.EQEQ),
    ("!=", TokenKind.EXCLEQ),
    ("<=", TokenKind.LTEQ),
    (">=", TokenKind.GTEQ),
    ("&&", TokenKind.ANDAND),
    ("||", TokenKind.OROR),
    ("!!", TokenKind.EXCLEXCL),
    ("?:", TokenKind.ELVIS),
    ("?.", TokenKind.SAFE_ACCESS),
    ("..", TokenKind.RANGE),
    ("::", TokenKind.COLONCOLON),
    ("->", TokenKind.ARROW),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.MUL),
    ("/", TokenKind.DIV),
    ("%", TokenKind.PERC),
    ("=", TokenKind.EQ),
    ("<", TokenKind.LT),
    (">", TokenKind.GT),
    ("!", TokenKind.EXCL),
    ("?", TokenKind.QUEST),
    (".", TokenKind.DOT),
    (":", TokenKind.COLON),
    ("@", TokenKind.AT),
    (";", TokenKind.SEMICOLON),
    (",", TokenKind.COMMA),
    ("(", TokenKind.LPAR),
    (")", TokenKind.RPAR),
    ("{", TokenKind.LBRACE),
    ("}", TokenKind.RBRACE),
    ("[", TokenKind.LBRACKET),
    ("]", TokenKind.RBRACKET),
)


class Lexer:
    """Lossless lexer that emits trivia and non-trivia tokens for Kotlin source."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._current_start = 0
        self._current_flags = TokenFlags.NONE
        self._after_newline = False
        self._diagnostics: list[Diagnostic] = []

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """List of diagnostics emitted during lexing."""
        return self._diagnostics

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def next_token(self) -> Token:
        self._current_start = self._position
        self._current_flags = TokenFlags.NONE

        if self.is_eof:
            return Token(TokenKind.EOF, TextRange.empty(self._position), self._line_break_flag())

        kind = self._lex_token()
        if not kind.is_trivia:
            self._current_flags |= self._line_break_flag()
            self._after_newline = False

        return Token(kind, TextRange(self._current_start, self._position), self._current_flags)

    def lex(self) -> list[Token]:
        """Lex the whole input. The last token is always EOF."""
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    def _line_break_flag(self) -> TokenFlags:
        return TokenFlags.PRECEDING_LINE_BREAK if self._after_newline else TokenFlags.NONE

    def _lex_token(self) -> TokenKind:
        ch = self._current_char()

        if ch == "\ufeff" and self._position == 0:
            self._advance(1)
            return TokenKind.BYTE_ORDER_MARK

        if ch == "\r" or ch == "\n":
            self._consume_newline()
            self._after_newline = True
            return TokenKind.NEWLINE

        if ch == " " or ch == "\t" or ch == "\f":
            self._consume_whitespaces()
            return TokenKind.WHITESPACE

        if ch == "/" and self._peek_char() == "/":
            return self._lex_line_comment()

        if ch == "/" and self._peek_char() == "*":
            return self._lex_block_comment()

        if ch == '"':
            return self._lex_string()

        if ch == "'":
            return self._lex_character()

        if ch.isdigit() or (ch == "." and self._peek_char().isdigit() and self._prev_char() != "."):
            return self._lex_number()

        if ch.isalpha() or ch == "_":
            return self._lex_identifier()

        if ch == "`":
            return self._lex_quoted_identifier()

        if ch == "!" and self._at_word("in", offset=1):
            self._advance(3)
            return TokenKind.NOT_IN
        if ch == "!" and self._at_word("is", offset=1):
            self._advance(3)
            return TokenKind.NOT_IS

        for text, kind in PUNCTUATION:
            if self._source.startswith(text, self._position):
                self._advance(len(text))
                return kind

        self._advance(1)
        self._report(LEXER_BAD_CHARACTER)
        return TokenKind.BAD_CHARACTER

    def _lex_line_comment(self) -> TokenKind:
        # Consume until end of line, do not consume the newline itself.
        self._advance(2)
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)
        return TokenKind.LINE_COMMENT

    def _lex_block_comment(self) -> TokenKind:
        self._advance(2)
        depth = 1
        while not self.is_eof:
            if self._source.startswith("/*", self._position):
                depth += 1
                self._advance(2)
                continue
            if self._source.startswith("*/", self._position):
                depth -= 1
                self._advance(2)
                if depth == 0:
                    return TokenKind.BLOCK_COMMENT
                continue
            self._advance(1)

        self._current_flags |= TokenFlags.UNTERMINATED
        self._report(LEXER_UNTERMINATED_COMMENT)
        return TokenKind.BLOCK_COMMENT

    def _lex_string(self) -> TokenKind:
        if self._source.startswith('"""', self._position):
            self._current_flags |= TokenFlags.RAW_STRING
            self._advance(3)
            closed = self._consume_string_body(raw=True)
        else:
            self._advance(1)
            closed = self._consume_string_body(raw=False)

        if not closed:
            self._current_flags |= TokenFlags.UNTERMINATED
            self._report(LEXER_UNTERMINATED_STRING)

        return TokenKind.STRING_LITERAL

    def _consume_string_body(self, *, raw: bool) -> bool:
        while not self.is_eof:
            ch = self._current_char()
            if raw and self._source.startswith('"""', self._position):
                self._advance(3)
                # `""""` closes with the extra quotes belonging to the content.
                while self._current_char() == '"':
                    self._advance(1)
                return True
            if not raw and ch == '"':
                self._advance(1)
                return True
            if not raw and ch == "\\":
                self._advance(2)
                continue
            if not raw and (ch == "\n" or ch == "\r"):
                return False
            if ch == "$" and self._peek_char() == "{":
                self._advance(2)
                self._consume_template_expression()
                continue
            self._advance(1)
        return False

    def _consume_template_expression(self) -> None:
        depth = 1
        while not self.is_eof:
            ch = self._current_char()
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    self._advance(1)
                    return
            elif ch == '"':
                raw = self._source.startswith('"""', self._position)
                self._advance(3 if raw else 1)
                self._consume_string_body(raw=raw)
                continue
            elif ch == "'":
                self._lex_character()
                continue
            self._advance(1)

    def _lex_character(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\\":
                self._advance(2)
                continue
            if ch == "'":
                self._advance(1)
                return TokenKind.CHARACTER_LITERAL
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)
        self._current_flags |= TokenFlags.UNTERMINATED
        self._report(LEXER_UNTERMINATED_STRING)
        return TokenKind.CHARACTER_LITERAL

    def _lex_number(self) -> TokenKind:
        if self._current_char() == "0" and self._peek_char() in ("x", "X", "b", "B"):
            self._advance(2)
            while self._current_char().isalnum() or self._current_char() == "_":
                self._advance(1)
            return TokenKind.INTEGER_LITERAL

        is_float = False
        self._consume_digits()
        if self._current_char() == "." and self._peek_char().isdigit():
            is_float = True
            self._advance(1)
            self._consume_digits()
        if self._current_char() in ("e", "E"):
            sign = 1 if self._peek_char() in ("+", "-") else 0
            if self._peek_char(1 + sign).isdigit():
                is_float = True
                self._advance(1 + sign)
                self._consume_digits()
        if self._current_char() in ("f", "F"):
            self._advance(1)
            return TokenKind.FLOAT_LITERAL
        if not is_float:
            if self._current_char() in ("u", "U"):
                self._advance(1)
            if self._current_char() == "L":
                self._advance(1)
        return TokenKind.FLOAT_LITERAL if is_float else TokenKind.INTEGER_LITERAL

    def _consume_digits(self) -> None:
        while self._current_char().isdigit() or self._current_char() == "_":
            self._advance(1)

    def _lex_identifier(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_":
                self._advance(1)
                continue
            break

        word = self._source[self._current_start : self._position]
        if word == "as" and self._current_char() == "?":
            self._advance(1)
            return TokenKind.AS_SAFE
        return HARD_KEYWORDS.get(word, TokenKind.IDENTIFIER)

    def _lex_quoted_identifier(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == "`":
                self._advance(1)
                return TokenKind.IDENTIFIER
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)
        self._report(LEXER_BAD_CHARACTER)
        return TokenKind.BAD_CHARACTER

    def _consume_whitespaces(self) -> None:
        while not self.is_eof:
            ch = self._current_char()
            if ch == " " or ch == "\t" or ch == "\f":
                self._advance(1)
                continue
            break

    def _consume_newline(self) -> None:
        if self._current_char() == "\r" and self._peek_char() == "\n":
            self._advance(2)
        else:
            self._advance(1)

    def _at_word(self, word: str, *, offset: int) -> bool:
        start = self._position + offset
        if not self._source.startswith(word, start):
            return False
        follow = self._peek_char(offset + len(word))
        return not (follow.isalnum() or follow == "_")

    def _report(self, spec: DiagnosticSpec) -> None:
        self._diagnostics.append(diagnostic_from_spec(spec, TextRange(self._current_start, self._position)))

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _prev_char(self) -> str:
        if self._position == 0:
            return "\0"
        return self._source[self._position - 1]

    def _advance(self, steps: int) -> None:
        self._position = min(self._position + steps, len(self._source))


def token_text(source: str, token: Token) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str) -> str:
    """Render a token list with kind, range, flags and text for debugging."""
    lines: list[str] = []
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        lines.append(f"{i:03d} {tok.kind.name:<18} range={tok.range.as_tuple()} flags={tok.flags} text={text!r}")
    return "\n".join(lines)
