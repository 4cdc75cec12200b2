"""Diagnostics."""

from kotlinpy.diagnostics.codes import (
    DESUGAR_UNMAPPED_OPERATOR,
    FORMAT_FILE_SKIPPED,
    LEXER_BAD_CHARACTER,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_STRING,
    MAPPER_INCONSISTENT_TRIVIA,
    MAPPER_ROUND_TRIP_MISMATCH,
    MAPPER_UNSUPPORTED_CONSTRUCT,
    PARSER_EXPECTED_DECLARATION_NAME,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_STATEMENT_SEPARATOR,
    PARSER_EXPECTED_TOKEN,
    PARSER_TOP_LEVEL_STATEMENT,
    PARSER_UNEXPECTED_TOKEN,
    DiagnosticSpec,
)
from kotlinpy.diagnostics.diagnostic import Diagnostic, Severity
from kotlinpy.diagnostics.report import collect_diagnostics, diagnostic_from_spec, has_errors

__all__ = [
    "DESUGAR_UNMAPPED_OPERATOR",
    "FORMAT_FILE_SKIPPED",
    "LEXER_BAD_CHARACTER",
    "LEXER_UNTERMINATED_COMMENT",
    "LEXER_UNTERMINATED_STRING",
    "MAPPER_INCONSISTENT_TRIVIA",
    "MAPPER_ROUND_TRIP_MISMATCH",
    "MAPPER_UNSUPPORTED_CONSTRUCT",
    "PARSER_EXPECTED_DECLARATION_NAME",
    "PARSER_EXPECTED_EXPRESSION",
    "PARSER_EXPECTED_STATEMENT_SEPARATOR",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_TOP_LEVEL_STATEMENT",
    "PARSER_UNEXPECTED_TOKEN",
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "collect_diagnostics",
    "diagnostic_from_spec",
    "has_errors",
]
