"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Final

from kotlinpy.text import TextRange


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1
    BAD_CHARACTER = 2

    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    NEWLINE = 11
    LINE_COMMENT = 12
    BLOCK_COMMENT = 13
    BYTE_ORDER_MARK = 14

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENTIFIER = 20
    INTEGER_LITERAL = 21
    FLOAT_LITERAL = 22
    CHARACTER_LITERAL = 23
    STRING_LITERAL = 24

    # -------------------------
    # Hard keywords
    # -------------------------
    PACKAGE_KEYWORD = 100
    IMPORT_KEYWORD = 101
    CLASS_KEYWORD = 102
    INTERFACE_KEYWORD = 103
    FUN_KEYWORD = 104
    VAL_KEYWORD = 105
    VAR_KEYWORD = 106
    IF_KEYWORD = 107
    ELSE_KEYWORD = 108
    WHILE_KEYWORD = 109
    DO_KEYWORD = 110
    FOR_KEYWORD = 111
    WHEN_KEYWORD = 112
    RETURN_KEYWORD = 113
    BREAK_KEYWORD = 114
    CONTINUE_KEYWORD = 115
    THROW_KEYWORD = 116
    TRY_KEYWORD = 117
    CATCH_KEYWORD = 118
    FINALLY_KEYWORD = 119
    IS_KEYWORD = 120
    IN_KEYWORD = 121
    AS_KEYWORD = 122
    NULL_KEYWORD = 123
    TRUE_KEYWORD = 124
    FALSE_KEYWORD = 125
    THIS_KEYWORD = 126
    SUPER_KEYWORD = 127
    OBJECT_KEYWORD = 128
    TYPEALIAS_KEYWORD = 129

    # -------------------------
    # Operators (multi-char included)
    # -------------------------
    PLUS = 30  # +
    MINUS = 31  # -
    MUL = 32  # *
    DIV = 33  # /
    PERC = 34  # %
    PLUSPLUS = 35  # ++
    MINUSMINUS = 36  # --
    EQ = 37  # =
    PLUSEQ = 38  # +=
    MINUSEQ = 39  # -=
    MULTEQ = 40  # *=
    DIVEQ = 41  # /=
    PERCEQ = 42  # %=
    EQEQ = 43  # ==
    EXCLEQ = 44  # !=
    EQEQEQ = 45  # ===
    EXCLEQEQEQ = 46  # !==
    LT = 47  # <
    GT = 48  # >
    LTEQ = 49  # <=
    GTEQ = 50  # >=
    ANDAND = 51  # &&
    OROR = 52  # ||
    EXCL = 53  # !
    EXCLEXCL = 54  # !!
    NOT_IN = 55  # !in
    NOT_IS = 56  # !is
    AS_SAFE = 57  # as?
    QUEST = 58  # ?
    ELVIS = 59  # ?:
    SAFE_ACCESS = 60  # ?.
    DOT = 61  # .
    RANGE = 62  # ..
    RANGE_UNTIL = 63  # ..<
    COLON = 64  # :
    COLONCOLON = 65  # ::
    ARROW = 66  # ->
    AT = 67  # @

    # -------------------------
    # Punctuation / separators
    # -------------------------
    SEMICOLON = 70  # ;
    COMMA = 71  # ,
    LPAR = 72  # (
    RPAR = 73  # )
    LBRACE = 74  # {
    RBRACE = 75  # }
    LBRACKET = 76  # [
    RBRACKET = 77  # ]

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.WHITESPACE,
            TokenKind.NEWLINE,
            TokenKind.LINE_COMMENT,
            TokenKind.BLOCK_COMMENT,
            TokenKind.BYTE_ORDER_MARK,
        )

    @property
    def is_keyword(self) -> bool:
        return 100 <= self.value < 200


HARD_KEYWORDS: Final[dict[str, TokenKind]] = {
    "package": TokenKind.PACKAGE_KEYWORD,
    "import": TokenKind.IMPORT_KEYWORD,
    "class": TokenKind.CLASS_KEYWORD,
    "interface": TokenKind.INTERFACE_KEYWORD,
    "fun": TokenKind.FUN_KEYWORD,
    "val": TokenKind.VAL_KEYWORD,
    "var": TokenKind.VAR_KEYWORD,
    "if": TokenKind.IF_KEYWORD,
    "else": TokenKind.ELSE_KEYWORD,
    "while": TokenKind.WHILE_KEYWORD,
    "do": TokenKind.DO_KEYWORD,
    "for": TokenKind.FOR_KEYWORD,
    "when": TokenKind.WHEN_KEYWORD,
    "return": TokenKind.RETURN_KEYWORD,
    "break": TokenKind.BREAK_KEYWORD,
    "continue": TokenKind.CONTINUE_KEYWORD,
    "throw": TokenKind.THROW_KEYWORD,
    "try": TokenKind.TRY_KEYWORD,
    "catch": TokenKind.CATCH_KEYWORD,
    "finally": TokenKind.FINALLY_KEYWORD,
    "is": TokenKind.IS_KEYWORD,
    "in": TokenKind.IN_KEYWORD,
    "as": TokenKind.AS_KEYWORD,
    "null": TokenKind.NULL_KEYWORD,
    "true": TokenKind.TRUE_KEYWORD,
    "false": TokenKind.FALSE_KEYWORD,
    "this": TokenKind.THIS_KEYWORD,
    "super": TokenKind.SUPER_KEYWORD,
    "object": TokenKind.OBJECT_KEYWORD,
    "typealias": TokenKind.TYPEALIAS_KEYWORD,
}
"""Words that can never be identifiers; soft keywords stay IDENTIFIER tokens."""


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0  # NEWLINE before
    UNTERMINATED = 1 << 1
    RAW_STRING = 1 << 2


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)


EOF_TOKEN: Final[Token] = Token(TokenKind.EOF, TextRange.empty(0))
