"""Operator vocabularies of the lossless tree."""

from __future__ import annotations

from enum import Enum, StrEnum


class OperatorCategory(StrEnum):
    """Spacing category an operator belongs to."""

    ASSIGNMENT = "assignment"
    LOGICAL = "logical"
    EQUALITY = "equality"
    RELATIONAL = "relational"
    BITWISE = "bitwise"
    ADDITIVE = "additive"
    MULTIPLICATIVE = "multiplicative"
    UNARY = "unary"
    RANGE = "range"
    ELVIS = "elvis"
    ARROW = "arrow"
    KEYWORD = "keyword"


class BinaryOperator(Enum):
    ADDITION = ("+", OperatorCategory.ADDITIVE)
    SUBTRACTION = ("-", OperatorCategory.ADDITIVE)
    MULTIPLICATION = ("*", OperatorCategory.MULTIPLICATIVE)
    DIVISION = ("/", OperatorCategory.MULTIPLICATIVE)
    MODULO = ("%", OperatorCategory.MULTIPLICATIVE)
    LESS_THAN = ("<", OperatorCategory.RELATIONAL)
    GREATER_THAN = (">", OperatorCategory.RELATIONAL)
    LESS_THAN_OR_EQUAL = ("<=", OperatorCategory.RELATIONAL)
    GREATER_THAN_OR_EQUAL = (">=", OperatorCategory.RELATIONAL)
    EQUAL = ("==", OperatorCategory.EQUALITY)
    NOT_EQUAL = ("!=", OperatorCategory.EQUALITY)
    IDENTITY_EQUAL = ("===", OperatorCategory.EQUALITY)
    IDENTITY_NOT_EQUAL = ("!==", OperatorCategory.EQUALITY)
    AND = ("&&", OperatorCategory.LOGICAL)
    OR = ("||", OperatorCategory.LOGICAL)
    CONTAINS = ("in", OperatorCategory.KEYWORD)
    NOT_CONTAINS = ("!in", OperatorCategory.KEYWORD)
    RANGE_TO = ("..", OperatorCategory.RANGE)
    RANGE_UNTIL = ("..<", OperatorCategory.RANGE)
    ELVIS = ("?:", OperatorCategory.ELVIS)

    def __init__(self, symbol: str, category: OperatorCategory) -> None:
        self.symbol = symbol
        self.category = category

    @staticmethod
    def from_symbol(symbol: str) -> BinaryOperator | None:
        return _BINARY_BY_SYMBOL.get(symbol)


class UnaryOperator(Enum):
    NEGATIVE = ("-", False)
    POSITIVE = ("+", False)
    NOT = ("!", False)
    PRE_INCREMENT = ("++", False)
    PRE_DECREMENT = ("--", False)
    POST_INCREMENT = ("++", True)
    POST_DECREMENT = ("--", True)

    def __init__(self, symbol: str, postfix: bool) -> None:
        self.symbol = symbol
        self.postfix = postfix

    @property
    def category(self) -> OperatorCategory:
        return OperatorCategory.UNARY

    @staticmethod
    def from_symbol(symbol: str, *, postfix: bool) -> UnaryOperator | None:
        for operator in UnaryOperator:
            if operator.symbol == symbol and operator.postfix == postfix:
                return operator
        return None


class AssignmentOperator(Enum):
    ADDITION = "+="
    SUBTRACTION = "-="
    MULTIPLICATION = "*="
    DIVISION = "/="
    MODULO = "%="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def category(self) -> OperatorCategory:
        return OperatorCategory.ASSIGNMENT

    @staticmethod
    def from_symbol(symbol: str) -> AssignmentOperator | None:
        try:
            return AssignmentOperator(symbol)
        except ValueError:
            return None


_BINARY_BY_SYMBOL = {operator.symbol: operator for operator in BinaryOperator}


__all__ = [
    "AssignmentOperator",
    "BinaryOperator",
    "OperatorCategory",
    "UnaryOperator",
]
