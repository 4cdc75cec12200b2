"""Format runner over a shared Kotlin parse result."""

from __future__ import annotations

from kotlinpy.diagnostics import (
    FORMAT_FILE_SKIPPED,
    MAPPER_ROUND_TRIP_MISMATCH,
    Diagnostic,
    diagnostic_from_spec,
)
from kotlinpy.format.minimum_viable_spacing import MinimumViableSpacingVisitor
from kotlinpy.format.options import FormatOptions
from kotlinpy.format.semicolons import RemoveTrailingSemicolonVisitor
from kotlinpy.format.spaces import SpacesVisitor
from kotlinpy.mapping import MappingError, UnsupportedPolicy
from kotlinpy.parser import ParseMode, ParserOptions, parse_result
from kotlinpy.pipeline.result import KotlinParseResult
from kotlinpy.pipeline.results import FormatRunResult
from kotlinpy.printer import print_tree
from kotlinpy.text import TextRange
from kotlinpy.tree import CompilationUnit, SymbolTable
from kotlinpy.visit import TraversalState, TreeVisitor


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
    """Run formatting from a single parse lifecycle.

    Files with parse errors, mapping failures (unless the mapper policy is
    `ABORT`) or a tree that does not reprint the source are returned
    unchanged with a `FORMAT_FILE_SKIPPED` warning.
    """
    resolved_parse = _resolve_parse(text, options=options, mode=mode, parse=parse)
    resolved_options = format_options if format_options is not None else FormatOptions()
    source = resolved_parse.source_text
    diagnostics = list(resolved_parse.diagnostics)

    if resolved_parse.has_errors:
        return _skipped(resolved_parse, diagnostics, "source has syntax errors")

    try:
        mapped = resolved_parse.mapped_tree(symbols, resolved_options.mapper, source_path=source_path)
    except MappingError as error:
        if resolved_options.mapper.unsupported == UnsupportedPolicy.ABORT:
            raise
        diagnostics.append(error.to_diagnostic())
        return _skipped(resolved_parse, diagnostics, "source could not be mapped")
    diagnostics.extend(mapped.diagnostics)

    if print_tree(mapped.tree) != source:
        diagnostics.append(diagnostic_from_spec(MAPPER_ROUND_TRIP_MISMATCH, TextRange(0, len(source))))
        return _skipped(resolved_parse, diagnostics, "printed tree does not match the source")

    tree = format_tree(mapped.tree, resolved_options, diagnostics)
    formatted_text = print_tree(tree)
    return FormatRunResult(
        parse=resolved_parse,
        formatted_text=formatted_text,
        diagnostics=diagnostics,
        changed=formatted_text != source,
        tree=tree,
    )


def format_tree(
    tree: CompilationUnit,
    options: FormatOptions | None = None,
    diagnostics: list[Diagnostic] | None = None,
) -> CompilationUnit:
    """Apply the enabled formatting passes in order."""
    resolved_options = options if options is not None else FormatOptions()
    passes: list[TreeVisitor] = []
    if resolved_options.minimum_viable_spacing:
        passes.append(MinimumViableSpacingVisitor(resolved_options.tabs_and_indents))
    passes.append(SpacesVisitor(resolved_options.spaces))
    if resolved_options.remove_trailing_semicolons:
        passes.append(RemoveTrailingSemicolonVisitor())

    for visitor in passes:
        state = TraversalState(stop_after=resolved_options.stop_after)
        tree = visitor.visit(tree, state)
        if diagnostics is not None:
            diagnostics.extend(state.diagnostics)
    return tree


def _skipped(
    parse: KotlinParseResult,
    diagnostics: list[Diagnostic],
    reason: str,
) -> FormatRunResult:
    source = parse.source_text
    diagnostics.append(
        diagnostic_from_spec(
            FORMAT_FILE_SKIPPED,
            TextRange(0, len(source)),
            message=f"File was left unformatted: {reason}",
        )
    )
    return FormatRunResult(
        parse=parse,
        formatted_text=source,
        diagnostics=diagnostics,
        changed=False,
    )


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
