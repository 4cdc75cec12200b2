"""Resolved symbol facts supplied by an external resolver."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from kotlinpy.text import TextRange


@dataclass(frozen=True, slots=True)
class TypeSymbol:
    fully_qualified_name: str

    @property
    def simple_name(self) -> str:
        return self.fully_qualified_name.rsplit(".", 1)[-1]


@dataclass(frozen=True, slots=True)
class MethodSymbol:
    """A resolved function.

    `builtin` marks intrinsic operations (primitive arithmetic, comparisons)
    that must stay in operator form.
    """

    name: str
    declaring_type: TypeSymbol | None = None
    parameter_types: tuple[TypeSymbol, ...] = ()
    return_type: TypeSymbol | None = None
    builtin: bool = False

    @property
    def is_user_defined(self) -> bool:
        return not self.builtin


@dataclass(frozen=True, slots=True)
class SymbolTable:
    """Symbols keyed by the range of the concrete node they were resolved for."""

    methods: Mapping[TextRange, MethodSymbol] = field(default_factory=dict)
    types: Mapping[TextRange, TypeSymbol] = field(default_factory=dict)

    def method_at(self, range: TextRange) -> MethodSymbol | None:
        return self.methods.get(range)

    def type_at(self, range: TextRange) -> TypeSymbol | None:
        return self.types.get(range)

    def with_method(self, range: TextRange, method: MethodSymbol) -> SymbolTable:
        return SymbolTable(methods={**self.methods, range: method}, types=self.types)

    def with_type(self, range: TextRange, type_symbol: TypeSymbol) -> SymbolTable:
        return SymbolTable(methods=self.methods, types={**self.types, range: type_symbol})


EMPTY_SYMBOLS = SymbolTable()


__all__ = ["EMPTY_SYMBOLS", "MethodSymbol", "SymbolTable", "TypeSymbol"]
