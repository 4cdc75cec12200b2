"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint='Close the string with `"` (or `"""` for raw strings).',
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_COMMENT",
    message="Unterminated block comment.",
    hint="Close the comment with `*/`; block comments nest.",
    severity="error",
    category="lexer",
)

LEXER_BAD_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_BAD_CHARACTER",
    message="Unexpected character.",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_EXPRESSION",
    message="Expected an expression",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_DECLARATION_NAME: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_DECLARATION_NAME",
    message="Expected a declaration name",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_STATEMENT_SEPARATOR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_STATEMENT_SEPARATOR",
    message="Expected a newline or `;` between statements",
    severity="error",
    category="parser",
)

PARSER_TOP_LEVEL_STATEMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_TOP_LEVEL_STATEMENT",
    message="Statements are only allowed at top level in scripts",
    hint="Parse with `ParseMode.SCRIPT` or move the statement into a function.",
    severity="error",
    category="parser",
)

MAPPER_UNSUPPORTED_CONSTRUCT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="MAPPER_UNSUPPORTED_CONSTRUCT",
    message="Unsupported syntax construct",
    severity="error",
    category="mapper",
)

MAPPER_INCONSISTENT_TRIVIA: Final[DiagnosticSpec] = DiagnosticSpec(
    code="MAPPER_INCONSISTENT_TRIVIA",
    message="Trivia bookkeeping crossed a significant token",
    severity="error",
    category="mapper",
)

MAPPER_ROUND_TRIP_MISMATCH: Final[DiagnosticSpec] = DiagnosticSpec(
    code="MAPPER_ROUND_TRIP_MISMATCH",
    message="Printed tree does not reproduce the source text",
    severity="error",
    category="mapper",
)

DESUGAR_UNMAPPED_OPERATOR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="DESUGAR_UNMAPPED_OPERATOR",
    message="Operator resolved to an overload but has no canonical member name",
    severity="warning",
    category="desugar",
)

FORMAT_FILE_SKIPPED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="FORMAT_FILE_SKIPPED",
    message="File was left unformatted",
    severity="warning",
    category="format",
)
