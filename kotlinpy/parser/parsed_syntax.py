"""Parsed syntax marker utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kotlinpy.parser.marker import CompletedMarker


@dataclass(frozen=True, slots=True)
class ParsedSyntax:
    """Success/failure wrapper for parse routines, carrying the completed node when there is one."""

    ok: bool
    marker: CompletedMarker | None = None

    @staticmethod
    def present(marker: CompletedMarker | None = None) -> ParsedSyntax:
        return ParsedSyntax(ok=True, marker=marker)

    @staticmethod
    def absent() -> ParsedSyntax:
        return ParsedSyntax(ok=False)

    def is_present(self) -> bool:
        return self.ok

    def is_absent(self) -> bool:
        return not self.ok
