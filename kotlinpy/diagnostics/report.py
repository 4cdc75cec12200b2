"""Diagnostics helpers."""

from __future__ import annotations

from collections.abc import Iterable

from kotlinpy.diagnostics.codes import DiagnosticSpec
from kotlinpy.diagnostics.diagnostic import Diagnostic
from kotlinpy.text import TextRange


def diagnostic_from_spec(
    spec: DiagnosticSpec,
    range: TextRange,
    *,
    message: str | None = None,
) -> Diagnostic:
    """Instantiate a diagnostic, optionally overriding its default message."""
    return Diagnostic(
        code=spec.code,
        message=message if message is not None else spec.message,
        range=range,
        severity=spec.severity,
        hint=spec.hint,
        category=spec.category,
    )


def collect_diagnostics(*groups: Iterable[Diagnostic]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for group in groups:
        diagnostics.extend(group)
    return diagnostics


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)
