"""Pipeline run result carriers for tool entrypoints."""

from __future__ import annotations

from dataclasses import dataclass

from kotlinpy.diagnostics import Diagnostic
from kotlinpy.pipeline.result import KotlinParseResult
from kotlinpy.tree import CompilationUnit


@dataclass(frozen=True, slots=True)
class FormatRunResult:
    """Result of formatting from a shared parse result.

    `tree` is None when the file was left unformatted.
    """

    parse: KotlinParseResult
    formatted_text: str
    diagnostics: list[Diagnostic]
    changed: bool
    tree: CompilationUnit | None = None


@dataclass(frozen=True, slots=True)
class DesugarRunResult:
    """Result of rewriting overloaded operators into member calls."""

    parse: KotlinParseResult
    tree: CompilationUnit | None
    printed_text: str
    diagnostics: list[Diagnostic]
    changed: bool


@dataclass(frozen=True, slots=True)
class FileRunResult:
    """One file of a batch; `skipped` files keep their source text."""

    path: str
    result: FormatRunResult
    diagnostics: list[Diagnostic]
    skipped: bool


@dataclass(frozen=True, slots=True)
class BatchRunResult:
    files: dict[str, FileRunResult]
    diagnostics: list[Diagnostic]
    has_errors: bool
