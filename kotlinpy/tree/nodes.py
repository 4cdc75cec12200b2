"""Immutable lossless tree nodes.

Every node owns the trivia before its first token (`prefix`), its markers and
an `id` that survives `with_*` copies. Trivia after a child lives in the
padding wrapper around that child.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Self
from uuid import UUID, uuid4

from kotlinpy.tree.markers import Markers
from kotlinpy.tree.operators import AssignmentOperator, BinaryOperator, UnaryOperator
from kotlinpy.tree.padding import Container, LeftPadded, RightPadded
from kotlinpy.tree.space import Space
from kotlinpy.tree.symbols import MethodSymbol, TypeSymbol


class _Node:
    __slots__ = ()

    id: UUID
    prefix: Space
    markers: Markers

    def with_prefix(self, prefix: Space) -> Self:
        if prefix is self.prefix:
            return self
        return replace(self, prefix=prefix)  # type: ignore[type-var]

    def with_markers(self, markers: Markers) -> Self:
        if markers is self.markers:
            return self
        return replace(self, markers=markers)  # type: ignore[type-var]

    def with_fields(self, **changes: object) -> Self:
        """Copy with the given fields replaced; the id is kept."""
        if all(getattr(self, name) is value for name, value in changes.items()):
            return self
        return replace(self, **changes)  # type: ignore[type-var]


_node = dataclass(frozen=True, slots=True, kw_only=True)


def _new_id() -> UUID:
    return uuid4()


class ClassKindType(StrEnum):
    CLASS = "class"
    INTERFACE = "interface"
    OBJECT = "object"


class ModifierType(StrEnum):
    VISIBILITY = "visibility"
    INHERITANCE = "inheritance"
    CLASS = "class"
    MEMBER = "member"
    PARAMETER = "parameter"
    VARIANCE = "variance"
    KEYWORD = "keyword"

    @staticmethod
    def of(keyword: str) -> ModifierType:
        return _MODIFIER_TYPES.get(keyword, ModifierType.MEMBER)


_MODIFIER_TYPES = {
    "public": ModifierType.VISIBILITY,
    "private": ModifierType.VISIBILITY,
    "protected": ModifierType.VISIBILITY,
    "internal": ModifierType.VISIBILITY,
    "open": ModifierType.INHERITANCE,
    "final": ModifierType.INHERITANCE,
    "abstract": ModifierType.INHERITANCE,
    "sealed": ModifierType.INHERITANCE,
    "data": ModifierType.CLASS,
    "enum": ModifierType.CLASS,
    "inner": ModifierType.CLASS,
    "value": ModifierType.CLASS,
    "annotation": ModifierType.CLASS,
    "companion": ModifierType.CLASS,
    "vararg": ModifierType.PARAMETER,
    "noinline": ModifierType.PARAMETER,
    "crossinline": ModifierType.PARAMETER,
    "in": ModifierType.VARIANCE,
    "out": ModifierType.VARIANCE,
    "fun": ModifierType.KEYWORD,
    "val": ModifierType.KEYWORD,
    "var": ModifierType.KEYWORD,
}


class LiteralKind(StrEnum):
    INTEGER = "integer"
    FLOAT = "float"
    CHARACTER = "character"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"


class Variance(StrEnum):
    IN = "in"
    OUT = "out"


# ---------------------------------------------------------------------------
# Names, literals, leaves
# ---------------------------------------------------------------------------


@_node
class Identifier(_Node):
    simple_name: str
    type: TypeSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Literal(_Node):
    """Literal with its exact source spelling (string templates stay raw)."""

    value_source: str
    kind: LiteralKind
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Empty(_Node):
    """Placeholder for an absent element, e.g. inside `()`."""

    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Unknown(_Node):
    """Raw source text kept verbatim for a construct that could not be mapped."""

    source: str
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


# ---------------------------------------------------------------------------
# Annotations, modifiers, types
# ---------------------------------------------------------------------------


@_node
class Annotation(_Node):
    annotation_type: NameTree
    arguments: Container[Expression] | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Modifier(_Node):
    """A modifier keyword; `annotations` are the ones written right before it."""

    keyword: str
    type: ModifierType
    annotations: tuple[Annotation, ...] = ()
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ClassKind(_Node):
    type: ClassKindType
    annotations: tuple[Annotation, ...] = ()
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ParameterizedType(_Node):
    clazz: NameTree
    type_parameters: Container[TypeTree]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Wildcard(_Node):
    """Type projection: `*`, or a variance keyword with its bound."""

    variance: Variance | None = None
    bounded_type: TypeTree | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class FunctionType(_Node):
    """`(A, name: B) -> R`; `return_type.before` precedes `->`."""

    parameters: Container[TypeTree | NamedVariable]
    return_type: LeftPadded[TypeTree]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class TypeParameter(_Node):
    name: Identifier
    annotations: tuple[Annotation, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    bounds: LeftPadded[TypeTree] | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@_node
class FieldAccess(_Node):
    target: Expression
    name: LeftPadded[Identifier]
    type: TypeSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class MethodInvocation(_Node):
    """Call; `select` is the receiver and the trivia before the `.`."""

    name: Identifier
    arguments: Container[Expression]
    select: RightPadded[Expression] | None = None
    type_parameters: Container[TypeTree] | None = None
    method_type: MethodSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Binary(_Node):
    left: Expression
    operator: LeftPadded[BinaryOperator]
    right: Expression
    type: TypeSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Unary(_Node):
    """Prefix or postfix operator; for postfix, `operator.before` follows the operand."""

    operator: LeftPadded[UnaryOperator]
    expression: Expression
    type: TypeSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Assignment(_Node):
    variable: Expression
    assignment: LeftPadded[Expression]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class AssignmentOperation(_Node):
    variable: Expression
    operator: LeftPadded[AssignmentOperator]
    assignment: Expression
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ArrayAccess(_Node):
    indexed: Expression
    index: Container[Expression]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Parentheses(_Node):
    tree: RightPadded[Expression]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ControlParentheses(_Node):
    tree: RightPadded[Expression | VariableDeclarations]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Lambda(_Node):
    """`{ params -> body }`; `arrow` is the trivia before `->`, None when absent."""

    parameters: tuple[RightPadded[VariableDeclarations], ...]
    body: Block
    arrow: Space | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class TypeCast(_Node):
    expression: Expression
    clazz: LeftPadded[TypeTree]
    safe: bool = False
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class InstanceOf(_Node):
    expression: RightPadded[Expression]
    clazz: TypeTree
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class MemberReference(_Node):
    """`receiver::name`; without a receiver `containing` holds an `Empty`."""

    containing: RightPadded[Expression]
    reference: Identifier
    type: TypeSymbol | None = None
    method_type: MethodSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ObjectExpression(_Node):
    """Anonymous `object : Base { ... }` used as a value."""

    declaration: ClassDeclaration
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@_node
class Block(_Node):
    statements: tuple[RightPadded[Statement], ...] = ()
    end: Space = Space.EMPTY
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Else(_Node):
    body: Statement
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class If(_Node):
    if_condition: ControlParentheses
    then_part: RightPadded[Statement] | None = None
    else_part: Else | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class WhileLoop(_Node):
    condition: ControlParentheses
    body: Statement
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class DoWhileLoop(_Node):
    body: Statement
    while_condition: LeftPadded[ControlParentheses]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ForEachControl(_Node):
    """`(variable in iterable)`; the paddings hold the trivia before `in` and `)`."""

    variable: RightPadded[VariableDeclarations]
    iterable: RightPadded[Expression]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ForEachLoop(_Node):
    control: ForEachControl
    body: Statement
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class WhenBranch(_Node):
    """Conditions of one branch; the last padding holds the trivia before `->`."""

    expressions: tuple[RightPadded[Expression], ...]
    body: Statement
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class When(_Node):
    branches: Block
    selector: ControlParentheses | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Catch(_Node):
    parameter: ControlParentheses
    body: Block
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Try(_Node):
    body: Block
    catches: tuple[Catch, ...] = ()
    finally_: LeftPadded[Block] | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Return(_Node):
    expression: Expression | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Break(_Node):
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Continue(_Node):
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Throw(_Node):
    exception: Expression
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@_node
class NamedVariable(_Node):
    """One declared name; `initializer.before` precedes `=` (or `by`)."""

    name: Identifier
    type_expression: LeftPadded[TypeTree] | None = None
    initializer: LeftPadded[Expression] | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class VariableDeclarations(_Node):
    """`val`/`var` declarations, parameters and loop variables.

    With `Destructuring`, `variables` are printed inside `(...)` and the last
    variable's initializer follows the closing parenthesis. A property's
    `get`/`set` accessors follow its variable.
    """

    variables: tuple[RightPadded[NamedVariable], ...]
    leading_annotations: tuple[Annotation, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    accessors: tuple[MethodDeclaration, ...] = ()
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class MethodDeclaration(_Node):
    name: Identifier
    parameters: Container[Statement]
    leading_annotations: tuple[Annotation, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    type_parameters: Container[TypeParameter] | None = None
    receiver: RightPadded[TypeTree] | None = None
    return_type: LeftPadded[TypeTree] | None = None
    body: Block | None = None
    method_type: MethodSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class ClassDeclaration(_Node):
    kind: ClassKind
    name: Identifier | None = None
    leading_annotations: tuple[Annotation, ...] = ()
    modifiers: tuple[Modifier, ...] = ()
    type_parameters: Container[TypeParameter] | None = None
    primary_constructor: Container[Statement] | None = None
    implements: Container[TypeTree | MethodInvocation] | None = None
    body: Block | None = None
    type: TypeSymbol | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class EnumValue(_Node):
    name: Identifier
    arguments: Container[Expression] | None = None
    body: Block | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class EnumValueSet(_Node):
    """The entries opening an enum class body, as one statement.

    Each padding holds the trivia before the following comma; a `,` after the
    last entry is a `TrailingComma` marker on its padding.
    """

    enums: tuple[RightPadded[EnumValue], ...]
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Package(_Node):
    expression: NameTree
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


@_node
class Import(_Node):
    qualid: NameTree
    alias: LeftPadded[Identifier] | None = None
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY

    @property
    def is_star(self) -> bool:
        return isinstance(self.qualid, FieldAccess) and self.qualid.name.element.simple_name == "*"


@_node
class CompilationUnit(_Node):
    """A whole file; `eof` is the trivia after the last statement."""

    package_declaration: RightPadded[Package] | None = None
    imports: tuple[RightPadded[Import], ...] = ()
    statements: tuple[RightPadded[Statement], ...] = ()
    eof: Space = Space.EMPTY
    source_path: str | None = None
    charset_bom_marked: bool = False
    line_ending: str = "\n"
    id: UUID = field(default_factory=_new_id)
    prefix: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY


type NameTree = Identifier | FieldAccess | ParameterizedType

type TypeTree = Identifier | FieldAccess | ParameterizedType | Wildcard | FunctionType

type Expression = (
    Identifier
    | Literal
    | FieldAccess
    | MethodInvocation
    | Binary
    | Unary
    | Assignment
    | AssignmentOperation
    | ArrayAccess
    | Parentheses
    | Lambda
    | TypeCast
    | InstanceOf
    | MemberReference
    | ObjectExpression
    | If
    | When
    | Try
    | Return
    | Break
    | Continue
    | Throw
    | Empty
    | Unknown
)

type Statement = (
    Expression
    | Block
    | ClassDeclaration
    | MethodDeclaration
    | VariableDeclarations
    | WhileLoop
    | DoWhileLoop
    | ForEachLoop
    | EnumValueSet
)

type Tree = (
    Statement
    | CompilationUnit
    | Package
    | Import
    | Annotation
    | Modifier
    | ClassKind
    | TypeParameter
    | ParameterizedType
    | Wildcard
    | FunctionType
    | EnumValue
    | NamedVariable
    | ControlParentheses
    | Else
    | ForEachControl
    | WhenBranch
    | Catch
)

TREE_TYPES: tuple[type, ...] = (
    Identifier,
    Literal,
    Empty,
    Unknown,
    Annotation,
    Modifier,
    ClassKind,
    ParameterizedType,
    Wildcard,
    FunctionType,
    TypeParameter,
    FieldAccess,
    MethodInvocation,
    Binary,
    Unary,
    Assignment,
    AssignmentOperation,
    ArrayAccess,
    Parentheses,
    ControlParentheses,
    Lambda,
    TypeCast,
    InstanceOf,
    MemberReference,
    ObjectExpression,
    Block,
    Else,
    If,
    WhileLoop,
    DoWhileLoop,
    ForEachControl,
    ForEachLoop,
    WhenBranch,
    When,
    Catch,
    Try,
    Return,
    Break,
    Continue,
    Throw,
    NamedVariable,
    VariableDeclarations,
    MethodDeclaration,
    ClassDeclaration,
    EnumValue,
    EnumValueSet,
    Package,
    Import,
    CompilationUnit,
)


def is_tree(value: object) -> bool:
    return isinstance(value, TREE_TYPES)


__all__ = [
    "Annotation",
    "ArrayAccess",
    "Assignment",
    "AssignmentOperation",
    "Binary",
    "Block",
    "Break",
    "Catch",
    "ClassDeclaration",
    "ClassKind",
    "ClassKindType",
    "CompilationUnit",
    "Continue",
    "ControlParentheses",
    "DoWhileLoop",
    "Else",
    "Empty",
    "EnumValue",
    "EnumValueSet",
    "Expression",
    "FieldAccess",
    "ForEachControl",
    "ForEachLoop",
    "FunctionType",
    "Identifier",
    "If",
    "Import",
    "InstanceOf",
    "Lambda",
    "Literal",
    "LiteralKind",
    "MemberReference",
    "MethodDeclaration",
    "MethodInvocation",
    "Modifier",
    "ModifierType",
    "NameTree",
    "NamedVariable",
    "ObjectExpression",
    "Package",
    "ParameterizedType",
    "Parentheses",
    "Return",
    "Statement",
    "TREE_TYPES",
    "Throw",
    "Tree",
    "Try",
    "TypeCast",
    "TypeParameter",
    "TypeTree",
    "Unary",
    "Unknown",
    "Variance",
    "VariableDeclarations",
    "When",
    "WhenBranch",
    "WhileLoop",
    "Wildcard",
    "is_tree",
]
