"""Desugaring failures."""

from __future__ import annotations

from kotlinpy.diagnostics import DESUGAR_UNMAPPED_OPERATOR, Diagnostic, diagnostic_from_spec
from kotlinpy.text import TextRange


class UnmappedOperatorError(Exception):
    """An overloaded operator has no canonical member name."""

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"No member name for overloaded operator {operator!r}")

    def to_diagnostic(self) -> Diagnostic:
        # Rewritten trees carry no source offsets.
        return diagnostic_from_spec(DESUGAR_UNMAPPED_OPERATOR, TextRange.empty(0), message=str(self))


__all__ = ["UnmappedOperatorError"]
