"""Shared parse carriers and lazy pipeline entrypoint exports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from kotlinpy.parser.options import ParseMode, ParserOptions
from kotlinpy.pipeline.result import KotlinParseResult, ParseResultBase
from kotlinpy.pipeline.results import (
    BatchRunResult,
    DesugarRunResult,
    FileRunResult,
    FormatRunResult,
)

if TYPE_CHECKING:
    from kotlinpy.format import FormatOptions
    from kotlinpy.mapping import MapperOptions
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
    from kotlinpy.pipeline.entrypoints import run_format as _run_format

    return _run_format(
        text,
        options=options,
        mode=mode,
        parse=parse,
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
    from kotlinpy.pipeline.entrypoints import run_desugar as _run_desugar

    return _run_desugar(
        text,
        options=options,
        mode=mode,
        parse=parse,
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
    from kotlinpy.pipeline.entrypoints import run_batch as _run_batch

    return _run_batch(
        sources,
        options=options,
        mode=mode,
        format_options=format_options,
        symbols=symbols,
    )


__all__ = [
    "BatchRunResult",
    "DesugarRunResult",
    "FileRunResult",
    "FormatRunResult",
    "KotlinParseResult",
    "ParseResultBase",
    "run_batch",
    "run_desugar",
    "run_format",
]
