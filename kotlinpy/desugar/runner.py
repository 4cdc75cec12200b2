"""Desugar runner over a shared Kotlin parse result."""

from __future__ import annotations

from uuid import UUID

from kotlinpy.desugar.visitor import DesugarVisitor
from kotlinpy.mapping import MapperOptions
from kotlinpy.parser import ParseMode, ParserOptions, parse_result
from kotlinpy.pipeline.result import KotlinParseResult
from kotlinpy.pipeline.results import DesugarRunResult
from kotlinpy.printer import print_tree
from kotlinpy.tree import SymbolTable
from kotlinpy.visit import TraversalState


def run_desugar(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: KotlinParseResult | None = None,
    symbols: SymbolTable | None = None,
    mapper_options: MapperOptions | None = None,
    stop_after: UUID | None = None,
) -> DesugarRunResult:
    """Map one parse lifecycle and rewrite its overloaded operators.

    Sources with syntax errors are not mapped; mapping errors propagate.
    """
    resolved_parse = _resolve_parse(text, options=options, mode=mode, parse=parse)
    diagnostics = list(resolved_parse.diagnostics)
    source = resolved_parse.source_text

    if resolved_parse.has_errors:
        return DesugarRunResult(
            parse=resolved_parse,
            tree=None,
            printed_text=source,
            diagnostics=diagnostics,
            changed=False,
        )

    mapped = resolved_parse.mapped_tree(symbols, mapper_options)
    diagnostics.extend(mapped.diagnostics)

    state = TraversalState(stop_after=stop_after)
    tree = DesugarVisitor().visit(mapped.tree, state)
    diagnostics.extend(state.diagnostics)
    printed_text = print_tree(tree)
    return DesugarRunResult(
        parse=resolved_parse,
        tree=tree,
        printed_text=printed_text,
        diagnostics=diagnostics,
        changed=printed_text != source,
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
