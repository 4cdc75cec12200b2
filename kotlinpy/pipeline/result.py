"""Parse carriers shared by every tool run over one source text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kotlinpy.cst import from_green
from kotlinpy.diagnostics import has_errors
from kotlinpy.parser.options import ParserOptions
from kotlinpy.parser.tree_sink import ParsedGreenTree

if TYPE_CHECKING:
    from kotlinpy.cst import GreenNode, SyntaxNode
    from kotlinpy.diagnostics import Diagnostic
    from kotlinpy.mapping import MappedTree, MapperOptions
    from kotlinpy.tree import CompilationUnit, SymbolTable


@dataclass(slots=True)
class ParseResultBase:
    """Shared parse carrier for parse-once/consume-many workflows."""

    source_text: str
    parsed: ParsedGreenTree

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.parsed.diagnostics

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)

    def green_root(self) -> GreenNode:
        return self.parsed.root


@dataclass(slots=True)
class KotlinParseResult(ParseResultBase):
    """Kotlin parse result with cached red tree and lossless tree accessors."""

    options: ParserOptions
    _syntax_root: SyntaxNode | None = field(default=None, init=False, repr=False)
    _mapped: MappedTree | None = field(default=None, init=False, repr=False)

    def syntax_root(self) -> SyntaxNode:
        if self._syntax_root is None:
            self._syntax_root = from_green(self.parsed.root, self.source_text)
        return self._syntax_root

    def mapped_tree(
        self,
        symbols: SymbolTable | None = None,
        options: MapperOptions | None = None,
        *,
        source_path: str | None = None,
    ) -> MappedTree:
        """Map the syntax tree; only the call with default arguments is cached."""
        from kotlinpy.mapping import MapperOptions, map_source_file

        default_options = options is None or options == MapperOptions()
        if symbols is None and default_options and source_path is None:
            if self._mapped is None:
                self._mapped = map_source_file(self.syntax_root())
            return self._mapped
        return map_source_file(self.syntax_root(), symbols, options=options, source_path=source_path)

    def lossless_tree(self) -> CompilationUnit:
        return self.mapped_tree().tree
