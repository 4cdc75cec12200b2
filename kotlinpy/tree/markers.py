"""Typed side-channel facts for surface syntax the node shapes do not record."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

from kotlinpy.tree.space import Space
from kotlinpy.tree.symbols import MethodSymbol


@dataclass(frozen=True, slots=True)
class Semicolon:
    """An optional `;` followed the padded element."""


@dataclass(frozen=True, slots=True)
class OmitBraces:
    """The block has no `{`/`}` in source."""


@dataclass(frozen=True, slots=True)
class OmitParentheses:
    """The argument list has no `(`/`)` in source (`run { ... }`)."""


@dataclass(frozen=True, slots=True)
class SingleExpressionBlock:
    """The block stands for an `= expression` body."""


@dataclass(frozen=True, slots=True)
class ImplicitReturn:
    """The return has no `return` keyword in source."""


@dataclass(frozen=True, slots=True)
class TrailingLambdaArgument:
    """The last argument is a lambda written after the parentheses."""


@dataclass(frozen=True, slots=True)
class TrailingComma:
    """A `,` follows the last element.

    `suffix` is the trivia between the comma and the closing delimiter; it is
    empty when no delimiter closes the list.
    """

    suffix: Space = Space.EMPTY


@dataclass(frozen=True, slots=True)
class IsNullable:
    """The type carries a `?` suffix; `prefix` is the trivia before it."""

    prefix: Space = Space.EMPTY


@dataclass(frozen=True, slots=True)
class CheckNotNull:
    """The expression is followed by `!!`; `prefix` is the trivia before it."""

    prefix: Space = Space.EMPTY


@dataclass(frozen=True, slots=True)
class SafeCall:
    """Member access through `?.`."""


@dataclass(frozen=True, slots=True)
class NotIs:
    """Type check written as `!is`."""


@dataclass(frozen=True, slots=True)
class By:
    """Initializer introduced by `by` instead of `=`."""


@dataclass(frozen=True, slots=True)
class Infix:
    """Call written in infix form: `a shl b`."""


@dataclass(frozen=True, slots=True)
class Destructuring:
    """Variables declared as `(a, b) = ...`."""


@dataclass(frozen=True, slots=True)
class Reified:
    """Type parameter declared with `reified`."""


@dataclass(frozen=True, slots=True)
class OperatorOverload:
    """The operator resolved to `method`."""

    method: MethodSymbol


type Marker = (
    Semicolon
    | OmitBraces
    | OmitParentheses
    | SingleExpressionBlock
    | ImplicitReturn
    | TrailingLambdaArgument
    | TrailingComma
    | IsNullable
    | CheckNotNull
    | SafeCall
    | NotIs
    | By
    | Infix
    | Destructuring
    | Reified
    | OperatorOverload
)


@dataclass(frozen=True, slots=True)
class Markers:
    """Ordered, immutable bag of markers."""

    entries: tuple[Marker, ...] = ()

    EMPTY: ClassVar[Markers]

    @staticmethod
    def of(*entries: Marker) -> Markers:
        if not entries:
            return Markers.EMPTY
        return Markers(tuple(entries))

    def find_first[M](self, marker_type: type[M]) -> M | None:
        for entry in self.entries:
            if isinstance(entry, marker_type):
                return entry
        return None

    def find_all[M](self, marker_type: type[M]) -> tuple[M, ...]:
        return tuple(entry for entry in self.entries if isinstance(entry, marker_type))

    def has(self, marker_type: type) -> bool:
        return any(isinstance(entry, marker_type) for entry in self.entries)

    def add(self, marker: Marker) -> Markers:
        return Markers((*self.entries, marker))

    def remove(self, marker_type: type) -> Markers:
        kept = tuple(entry for entry in self.entries if not isinstance(entry, marker_type))
        if len(kept) == len(self.entries):
            return self
        return Markers(kept) if kept else Markers.EMPTY

    def __iter__(self) -> Iterator[Marker]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


Markers.EMPTY = Markers()


__all__ = [
    "By",
    "CheckNotNull",
    "Destructuring",
    "ImplicitReturn",
    "Infix",
    "IsNullable",
    "Marker",
    "Markers",
    "NotIs",
    "OmitBraces",
    "OmitParentheses",
    "OperatorOverload",
    "Reified",
    "SafeCall",
    "Semicolon",
    "SingleExpressionBlock",
    "TrailingComma",
    "TrailingLambdaArgument",
]
