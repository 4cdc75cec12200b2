"""Lexer."""

from kotlinpy.lexer.lexer import Lexer, dump_tokens, token_text
from kotlinpy.lexer.tokens import (
    EOF_TOKEN,
    HARD_KEYWORDS,
    Token,
    TokenFlags,
    TokenKind,
)

__all__ = [
    "EOF_TOKEN",
    "HARD_KEYWORDS",
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "dump_tokens",
    "token_text",
]
