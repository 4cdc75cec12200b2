"""Rewrite overloaded operators into the member calls they resolve to.

`a + b` becomes `a.plus(b)` when the `+` resolved to a user-defined `plus`.
Built-in operations, and operators without a resolved symbol, stay in
operator form.
"""

from __future__ import annotations

from collections.abc import Mapping
from uuid import UUID

from kotlinpy.desugar.errors import UnmappedOperatorError
from kotlinpy.tree import (
    ArrayAccess,
    Assignment,
    AssignmentOperation,
    AssignmentOperator,
    Binary,
    BinaryOperator,
    Container,
    Empty,
    Expression,
    Identifier,
    InstanceOf,
    Lambda,
    Literal,
    LiteralKind,
    MethodInvocation,
    MethodSymbol,
    OperatorOverload,
    Parentheses,
    RightPadded,
    Space,
    Tree,
    TypeCast,
    Unary,
    UnaryOperator,
)
from kotlinpy.visit import TraversalState, TreeVisitor, run_visitor

BINARY_MEMBER_NAMES: Mapping[BinaryOperator, str] = {
    BinaryOperator.ADDITION: "plus",
    BinaryOperator.SUBTRACTION: "minus",
    BinaryOperator.MULTIPLICATION: "times",
    BinaryOperator.DIVISION: "div",
    BinaryOperator.MODULO: "rem",
    BinaryOperator.RANGE_TO: "rangeTo",
    BinaryOperator.RANGE_UNTIL: "rangeUntil",
    BinaryOperator.CONTAINS: "contains",
    BinaryOperator.NOT_CONTAINS: "contains",
    BinaryOperator.EQUAL: "equals",
    BinaryOperator.NOT_EQUAL: "equals",
    BinaryOperator.LESS_THAN: "compareTo",
    BinaryOperator.GREATER_THAN: "compareTo",
    BinaryOperator.LESS_THAN_OR_EQUAL: "compareTo",
    BinaryOperator.GREATER_THAN_OR_EQUAL: "compareTo",
}

UNARY_MEMBER_NAMES: Mapping[UnaryOperator, str] = {
    UnaryOperator.NEGATIVE: "unaryMinus",
    UnaryOperator.POSITIVE: "unaryPlus",
    UnaryOperator.NOT: "not",
}

ASSIGNMENT_MEMBER_NAMES: Mapping[AssignmentOperator, str] = {
    AssignmentOperator.ADDITION: "plusAssign",
    AssignmentOperator.SUBTRACTION: "minusAssign",
    AssignmentOperator.MULTIPLICATION: "timesAssign",
    AssignmentOperator.DIVISION: "divAssign",
    AssignmentOperator.MODULO: "remAssign",
}

INDEXING_MEMBER_NAME = "get"

_COMPARISONS = frozenset(
    {
        BinaryOperator.LESS_THAN,
        BinaryOperator.GREATER_THAN,
        BinaryOperator.LESS_THAN_OR_EQUAL,
        BinaryOperator.GREATER_THAN_OR_EQUAL,
    }
)
_NEGATED = frozenset({BinaryOperator.NOT_CONTAINS, BinaryOperator.NOT_EQUAL})


def _member_name[K](table: Mapping[K, str], operator: K, symbol: str) -> str:
    name = table.get(operator)
    if name is None:
        raise UnmappedOperatorError(symbol)
    return name


class DesugarVisitor(TreeVisitor):
    def visit_node[T: Tree](self, tree: T, state: TraversalState) -> T:
        marker = tree.markers.find_first(OperatorOverload)
        if marker is None or not marker.method.is_user_defined:
            return tree
        try:
            match tree:
                case Binary():
                    return self._binary(tree, marker.method)  # type: ignore[return-value]
                case Unary():
                    return self._unary(tree, marker.method)  # type: ignore[return-value]
                case AssignmentOperation():
                    return self._assignment_operation(tree, marker.method)  # type: ignore[return-value]
                case ArrayAccess():
                    return self._array_access(tree, marker.method)  # type: ignore[return-value]
        except UnmappedOperatorError as error:
            state.diagnostics.append(error.to_diagnostic())
        return tree

    def _binary(self, binary: Binary, method: MethodSymbol) -> Expression:
        operator = binary.operator.element
        name = _member_name(BINARY_MEMBER_NAMES, operator, operator.symbol)
        if isinstance(binary.left, Empty):
            # `in range` as a `when` condition has no left operand to move.
            return binary

        left, right = binary.left, binary.right
        if operator in (BinaryOperator.CONTAINS, BinaryOperator.NOT_CONTAINS):
            left, right = right.with_prefix(_comments_only(right.prefix)), left
        else:
            right = right.with_prefix(_comments_only(right.prefix))

        markers = binary.markers.remove(OperatorOverload)
        if operator in _COMPARISONS:
            # The operator stays in place, and so do the comments before it.
            call = _call(left, name, (right,), method)
            zero = Literal(value_source="0", kind=LiteralKind.INTEGER, prefix=binary.right.prefix.with_comments(()))
            return Binary(
                id=binary.id,
                prefix=binary.prefix,
                markers=markers,
                left=call,
                operator=binary.operator,
                right=zero,
                type=binary.type,
            )

        call = _call(left, name, (right,), method, after=_comments_only(binary.operator.before))
        if operator in _NEGATED:
            call = _call(call, "not", (), None)
        return call.with_fields(id=binary.id, prefix=binary.prefix, markers=markers)

    def _unary(self, unary: Unary, method: MethodSymbol) -> Expression:
        operator = unary.operator.element
        name = _member_name(UNARY_MEMBER_NAMES, operator, operator.symbol)
        operand = unary.expression.with_prefix(_comments_only(unary.expression.prefix))
        call = _call(operand, name, (), method)
        return call.with_fields(
            id=unary.id,
            prefix=unary.prefix,
            markers=unary.markers.remove(OperatorOverload),
        )

    def _assignment_operation(self, operation: AssignmentOperation, method: MethodSymbol) -> Expression:
        operator = operation.operator.element
        name = _member_name(ASSIGNMENT_MEMBER_NAMES, operator, operator.symbol)
        argument = operation.assignment.with_prefix(_comments_only(operation.assignment.prefix))
        call = _call(
            operation.variable,
            name,
            (argument,),
            method,
            after=_comments_only(operation.operator.before),
        )
        return call.with_fields(
            id=operation.id,
            prefix=operation.prefix,
            markers=operation.markers.remove(OperatorOverload),
        )

    def _array_access(self, access: ArrayAccess, method: MethodSymbol) -> Expression:
        return MethodInvocation(
            id=access.id,
            prefix=access.prefix,
            markers=access.markers.remove(OperatorOverload),
            select=RightPadded(_receiver(access.indexed)),
            name=Identifier(simple_name=INDEXING_MEMBER_NAME),
            arguments=Container(Space.EMPTY, access.index.padded),
            method_type=method,
        )


def _call(
    receiver: Expression,
    name: str,
    arguments: tuple[Expression, ...],
    method: MethodSymbol | None,
    *,
    after: Space = Space.EMPTY,
) -> MethodInvocation:
    padded: tuple[RightPadded[Expression], ...]
    if arguments:
        padded = tuple(RightPadded(argument) for argument in arguments)
    else:
        padded = (RightPadded(Empty()),)
    return MethodInvocation(
        select=RightPadded(_receiver(receiver), after=after),
        name=Identifier(simple_name=name),
        arguments=Container(Space.EMPTY, padded),
        method_type=method,
    )


def _receiver(expression: Expression) -> Expression:
    """Parenthesize operator forms that would bind looser than a member call."""
    match expression:
        case Binary() | TypeCast() | InstanceOf() | Assignment() | AssignmentOperation() | Lambda():
            return Parentheses(tree=RightPadded(expression))
        case Unary(operator=operator) if not operator.element.postfix:
            return Parentheses(tree=RightPadded(expression))
    return expression


def _comments_only(space: Space) -> Space:
    """Keep comments so no comment is lost; operator spacing goes away."""
    if not space.has_comments:
        return Space.EMPTY
    return space


def desugar_tree[T: Tree](
    tree: T,
    *,
    stop_after: UUID | None = None,
    state: TraversalState | None = None,
) -> T:
    return run_visitor(DesugarVisitor(), tree, stop_after=stop_after, state=state)


__all__ = [
    "ASSIGNMENT_MEMBER_NAMES",
    "BINARY_MEMBER_NAMES",
    "DesugarVisitor",
    "INDEXING_MEMBER_NAME",
    "UNARY_MEMBER_NAMES",
    "desugar_tree",
]
