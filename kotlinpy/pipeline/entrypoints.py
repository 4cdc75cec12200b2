"""Unified entrypoints that orchestrate parse/map/format with one parse lifecycle."""

from __future__ import annotations

from collections.abc import Mapping

from kotlinpy.desugar import run_desugar as _run_desugar
from kotlinpy.diagnostics import FORMAT_FILE_SKIPPED, Diagnostic, has_errors
from kotlinpy.format import FormatOptions
from kotlinpy.format import run_format as _run_format
from kotlinpy.mapping import MapperOptions, UnsupportedPolicy
from kotlinpy.parser import ParseMode, ParserOptions, parse_result
from kotlinpy.pipeline.result import KotlinParseResult
from kotlinpy.pipeline.results import BatchRunResult, DesugarRunResult, FileRunResult, FormatRunResult
from kotlinpy.tree import SymbolTable


def run_format(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: KotlinParseResult | None = None,
    format_options: FormatOptions | None = None,
    symbols: SymbolTable | None = None,
    source_path: str | None = None,
) -> FormatRunResult:
    """Run formatting over one Kotlin parse lifecycle."""
    resolved_parse = _resolve_parse(text, options=options, mode=mode, parse=parse)
    return _run_format(
        resolved_parse.source_text,
        parse=resolved_parse,
        format_options=format_options,
        symbols=symbols,
        source_path=source_path,
    )


def run_desugar(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: KotlinParseResult | None = None,
    symbols: SymbolTable | None = None,
    mapper_options: MapperOptions | None = None,
) -> DesugarRunResult:
    """Run operator desugaring over one Kotlin parse lifecycle."""
    resolved_parse = _resolve_parse(text, options=options, mode=mode, parse=parse)
    return _run_desugar(
        resolved_parse.source_text,
        parse=resolved_parse,
        symbols=symbols,
        mapper_options=mapper_options,
    )


def run_batch(
    sources: Mapping[str, str],
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    format_options: FormatOptions | None = None,
    symbols: Mapping[str, SymbolTable] | None = None,
) -> BatchRunResult:
    """Format several files independently.

    A file that cannot be parsed or mapped is reported and left unchanged;
    the remaining files are still formatted. Without explicit options a
    failing file is skipped as a whole. With `UnsupportedPolicy.ABORT` the
    first mapping error propagates.
    """
    resolved_options = (
        format_options
        if format_options is not None
        else FormatOptions(mapper=MapperOptions(unsupported=UnsupportedPolicy.SKIP_FILE))
    )
    files: dict[str, FileRunResult] = {}
    diagnostics: list[Diagnostic] = []
    for path, text in sources.items():
        result = _run_format(
            text,
            options,
            mode=mode,
            format_options=resolved_options,
            symbols=symbols.get(path) if symbols is not None else None,
            source_path=path,
        )
        reported = [d.with_path(path) for d in result.diagnostics]
        skipped = any(d.code == FORMAT_FILE_SKIPPED.code for d in reported)
        files[path] = FileRunResult(
            path=path,
            result=result,
            diagnostics=reported,
            skipped=skipped,
        )
        diagnostics.extend(reported)

    return BatchRunResult(files=files, diagnostics=diagnostics, has_errors=has_errors(diagnostics))


def _resolve_parse(
    text: str,
    *,
    options: ParserOptions | None,
    mode: ParseMode | None,
    parse: KotlinParseResult | None,
) -> KotlinParseResult:
    if parse is not None:
        if options is not None or mode is not None:
            raise ValueError("Pass either parse or options/mode, not both")
        return parse
    return parse_result(text, options=options, mode=mode)
