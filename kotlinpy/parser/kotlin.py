"""High-level parse entrypoint for Kotlin source text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kotlinpy.diagnostics import collect_diagnostics
from kotlinpy.lexer import Lexer
from kotlinpy.parser.grammar import parse_kotlin_file
from kotlinpy.parser.options import ParseMode, ParserOptions
from kotlinpy.parser.parser import Parser
from kotlinpy.parser.token_source import TokenSource
from kotlinpy.parser.tree_sink import ParsedGreenTree, build_lossless_tree

if TYPE_CHECKING:
    from kotlinpy.pipeline import KotlinParseResult


def _resolve_options(
    options: ParserOptions | None,
    mode: ParseMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


def parse(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> ParsedGreenTree:
    resolved_options = _resolve_options(options=options, mode=mode)

    lexer = Lexer(text)
    tokens = lexer.lex()
    source = TokenSource(text, tokens)
    parser = Parser(source, options=resolved_options)

    parse_kotlin_file(parser)
    events, parser_diagnostics = parser.finish()
    diagnostics = collect_diagnostics(lexer.diagnostics, parser_diagnostics)

    return build_lossless_tree(
        text=text,
        events=events,
        tokens=tokens,
        diagnostics=diagnostics,
    )


def parse_result(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> KotlinParseResult:
    from kotlinpy.pipeline import KotlinParseResult

    resolved_options = _resolve_options(options=options, mode=mode)
    parsed = parse(text, options=resolved_options)
    return KotlinParseResult(
        source_text=text,
        parsed=parsed,
        options=resolved_options,
    )
