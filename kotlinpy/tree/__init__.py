"""Lossless tree model: nodes, trivia, padding, markers and symbols."""

from kotlinpy.tree.markers import (
    By,
    CheckNotNull,
    Destructuring,
    ImplicitReturn,
    Infix,
    IsNullable,
    Marker,
    Markers,
    NotIs,
    OmitBraces,
    OmitParentheses,
    OperatorOverload,
    Reified,
    SafeCall,
    Semicolon,
    SingleExpressionBlock,
    TrailingComma,
    TrailingLambdaArgument,
)
from kotlinpy.tree.nodes import (
    TREE_TYPES,
    Annotation,
    ArrayAccess,
    Assignment,
    AssignmentOperation,
    Binary,
    Block,
    Break,
    Catch,
    ClassDeclaration,
    ClassKind,
    ClassKindType,
    CompilationUnit,
    Continue,
    ControlParentheses,
    DoWhileLoop,
    Else,
    Empty,
    EnumValue,
    EnumValueSet,
    Expression,
    FieldAccess,
    ForEachControl,
    ForEachLoop,
    FunctionType,
    Identifier,
    If,
    Import,
    InstanceOf,
    Lambda,
    Literal,
    LiteralKind,
    MemberReference,
    MethodDeclaration,
    MethodInvocation,
    Modifier,
    ModifierType,
    NamedVariable,
    NameTree,
    ObjectExpression,
    Package,
    ParameterizedType,
    Parentheses,
    Return,
    Statement,
    Throw,
    Tree,
    Try,
    TypeCast,
    TypeParameter,
    TypeTree,
    Unary,
    Unknown,
    VariableDeclarations,
    Variance,
    When,
    WhenBranch,
    WhileLoop,
    Wildcard,
    is_tree,
)
from kotlinpy.tree.operators import (
    AssignmentOperator,
    BinaryOperator,
    OperatorCategory,
    UnaryOperator,
)
from kotlinpy.tree.padding import Container, LeftPadded, RightPadded
from kotlinpy.tree.space import Comment, Space
from kotlinpy.tree.symbols import EMPTY_SYMBOLS, MethodSymbol, SymbolTable, TypeSymbol

__all__ = [
    "EMPTY_SYMBOLS",
    "TREE_TYPES",
    "Annotation",
    "ArrayAccess",
    "Assignment",
    "AssignmentOperation",
    "AssignmentOperator",
    "Binary",
    "BinaryOperator",
    "Block",
    "Break",
    "By",
    "Catch",
    "CheckNotNull",
    "ClassDeclaration",
    "ClassKind",
    "ClassKindType",
    "Comment",
    "CompilationUnit",
    "Container",
    "Continue",
    "ControlParentheses",
    "Destructuring",
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
    "ImplicitReturn",
    "Import",
    "Infix",
    "InstanceOf",
    "IsNullable",
    "Lambda",
    "LeftPadded",
    "Literal",
    "LiteralKind",
    "Marker",
    "Markers",
    "MemberReference",
    "MethodDeclaration",
    "MethodInvocation",
    "MethodSymbol",
    "Modifier",
    "ModifierType",
    "NameTree",
    "NamedVariable",
    "NotIs",
    "ObjectExpression",
    "OmitBraces",
    "OmitParentheses",
    "OperatorCategory",
    "OperatorOverload",
    "Package",
    "ParameterizedType",
    "Parentheses",
    "Reified",
    "Return",
    "RightPadded",
    "SafeCall",
    "Semicolon",
    "SingleExpressionBlock",
    "Space",
    "Statement",
    "SymbolTable",
    "Throw",
    "TrailingComma",
    "TrailingLambdaArgument",
    "Tree",
    "Try",
    "TypeCast",
    "TypeParameter",
    "TypeSymbol",
    "TypeTree",
    "Unary",
    "UnaryOperator",
    "Unknown",
    "VariableDeclarations",
    "Variance",
    "When",
    "WhenBranch",
    "WhileLoop",
    "Wildcard",
    "is_tree",
]
