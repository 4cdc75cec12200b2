"""Mapping failures."""

from __future__ import annotations

from kotlinpy.diagnostics import (
    MAPPER_INCONSISTENT_TRIVIA,
    MAPPER_UNSUPPORTED_CONSTRUCT,
    Diagnostic,
    diagnostic_from_spec,
)
from kotlinpy.text import TextRange


class MappingError(Exception):
    """Base class for errors that abort the current mapping call."""

    range: TextRange

    def to_diagnostic(self) -> Diagnostic:
        raise NotImplementedError


class UnsupportedConstructError(MappingError):
    """A concrete node (or a shape of a known node) has no mapping rule."""

    def __init__(self, kind: str, range: TextRange, detail: str | None = None) -> None:
        self.kind = kind
        self.range = range
        self.detail = detail
        message = f"Unsupported construct {kind} at {range.start}..{range.end}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def to_diagnostic(self) -> Diagnostic:
        return diagnostic_from_spec(
            MAPPER_UNSUPPORTED_CONSTRUCT,
            self.range,
            message=str(self),
        )


class InconsistentTriviaError(MappingError):
    """Trivia bookkeeping met a significant token, or a reprint did not match."""

    def __init__(self, range: TextRange, message: str = "Trivia scan crossed a significant token") -> None:
        self.range = range
        super().__init__(f"{message} at {range.start}..{range.end}")

    def to_diagnostic(self) -> Diagnostic:
        return diagnostic_from_spec(MAPPER_INCONSISTENT_TRIVIA, self.range, message=str(self))


__all__ = ["InconsistentTriviaError", "MappingError", "UnsupportedConstructError"]
