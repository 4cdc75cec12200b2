"""Diagnostics reported against Kotlin source text."""

from dataclasses import dataclass, replace
from typing import Literal

from kotlinpy.text import TextRange, line_col

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A problem found by the lexer, parser, mapper or a visitor.

    `range` indexes the text the diagnostic was raised against; `path` is
    filled in once the diagnostic is reported for a named file.
    """

    code: str
    message: str
    range: TextRange
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None
    path: str | None = None

    def with_path(self, path: str) -> "Diagnostic":
        return replace(self, path=path)

    def location(self, source: str) -> tuple[int, int]:
        """One-based line and column where the range starts."""
        return line_col(source, self.range.start)

    def render(self, source: str) -> str:
        """`path:line:column: severity[CODE]: message`, hint on its own line."""
        line, column = self.location(source)
        where = f"{line}:{column}" if self.path is None else f"{self.path}:{line}:{column}"
        text = f"{where}: {self.severity}[{self.code}]: {self.message}"
        if self.hint:
            text += f"\n  hint: {self.hint}"
        return text
