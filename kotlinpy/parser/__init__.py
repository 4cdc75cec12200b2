"""Parser infrastructure (token source + event-based parser + tree sink)."""

from kotlinpy.parser.grammar import (
    StatementContext,
    parse_expression,
    parse_kotlin_file,
    parse_statement,
    parse_statement_list,
    parse_type,
)
from kotlinpy.parser.kotlin import parse, parse_result
from kotlinpy.parser.marker import CompletedMarker, Marker
from kotlinpy.parser.options import ParseMode, ParserOptions
from kotlinpy.parser.parse_lists import ParseNodeList, ParseSeparatedList
from kotlinpy.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from kotlinpy.parser.parsed_syntax import ParsedSyntax
from kotlinpy.parser.parser import Parser, ParserCheckpoint, ParserProgress
from kotlinpy.parser.token_source import TokenSource, TokenSourceCheckpoint
from kotlinpy.parser.tree_sink import (
    Event,
    FinishEvent,
    LosslessTreeSink,
    ParsedGreenTree,
    StartEvent,
    TokenEvent,
    build_lossless_tree,
)

__all__ = [
    "CompletedMarker",
    "Event",
    "FinishEvent",
    "LosslessTreeSink",
    "Marker",
    "ParseMode",
    "ParseNodeList",
    "ParseRecoveryTokenSet",
    "ParseSeparatedList",
    "ParsedGreenTree",
    "ParsedSyntax",
    "Parser",
    "ParserCheckpoint",
    "ParserOptions",
    "ParserProgress",
    "RecoveryError",
    "StartEvent",
    "StatementContext",
    "TokenEvent",
    "TokenSource",
    "TokenSourceCheckpoint",
    "build_lossless_tree",
    "parse",
    "parse_expression",
    "parse_kotlin_file",
    "parse_result",
    "parse_statement",
    "parse_statement_list",
    "parse_type",
]
