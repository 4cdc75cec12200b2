from kotlinpy.parser import parse_result
from kotlinpy.printer import print_right_padded, print_tree
from kotlinpy.tree import (
    Binary,
    BinaryOperator,
    Block,
    CheckNotNull,
    CompilationUnit,
    Container,
    Empty,
    Identifier,
    ImplicitReturn,
    InstanceOf,
    IsNullable,
    Lambda,
    LeftPadded,
    Literal,
    LiteralKind,
    Markers,
    MethodDeclaration,
    Modifier,
    ModifierType,
    NotIs,
    OmitBraces,
    Return,
    RightPadded,
    Semicolon,
    SingleExpressionBlock,
    Space,
    Unary,
    UnaryOperator,
    Unknown,
    VariableDeclarations,
)


def _literal(text: str, prefix: Space = Space.EMPTY) -> Literal:
    return Literal(value_source=text, kind=LiteralKind.INTEGER, prefix=prefix)


def test_single_expression_block_prints_equals_sign() -> None:
    method = MethodDeclaration(
        name=Identifier(simple_name="f", prefix=Space.SINGLE_SPACE),
        parameters=Container(Space.EMPTY, (RightPadded(Empty()),)),
        modifiers=(Modifier(keyword="fun", type=ModifierType.KEYWORD),),
        body=Block(
            prefix=Space.SINGLE_SPACE,
            statements=(
                RightPadded(Return(expression=_literal("1", Space.SINGLE_SPACE), markers=Markers.of(ImplicitReturn()))),
            ),
            markers=Markers.of(SingleExpressionBlock(), OmitBraces()),
        ),
    )

    assert print_tree(method) == "fun f() = 1"


def test_block_without_braces_prints_only_statements() -> None:
    block = Block(
        statements=(RightPadded(Identifier(simple_name="x", prefix=Space.SINGLE_SPACE)),),
        markers=Markers.of(OmitBraces()),
    )

    assert print_tree(block) == " x"
    assert print_tree(block.with_markers(Markers.EMPTY)) == "{ x}"


def test_type_suffix_markers() -> None:
    nullable = Identifier(simple_name="String", markers=Markers.of(IsNullable()))
    forced = Identifier(simple_name="name", markers=Markers.of(CheckNotNull(prefix=Space.SINGLE_SPACE)))

    assert print_tree(nullable) == "String?"
    assert print_tree(forced) == "name !!"


def test_semicolon_marker_follows_padding() -> None:
    padded = RightPadded(
        Identifier(simple_name="x"),
        after=Space.SINGLE_SPACE,
        markers=Markers.of(Semicolon()),
    )

    assert print_right_padded(padded) == "x ;"
    assert print_right_padded(padded.with_markers(Markers.EMPTY)) == "x "


def test_operators_print_their_symbols() -> None:
    binary = Binary(
        left=Identifier(simple_name="a"),
        operator=LeftPadded(Space.SINGLE_SPACE, BinaryOperator.RANGE_UNTIL),
        right=Identifier(simple_name="b", prefix=Space.SINGLE_SPACE),
    )
    postfix = Unary(
        operator=LeftPadded(Space.EMPTY, UnaryOperator.POST_INCREMENT),
        expression=Identifier(simple_name="i"),
    )
    prefix = Unary(
        operator=LeftPadded(Space.EMPTY, UnaryOperator.NOT),
        expression=Identifier(simple_name="done"),
    )
    negated_check = InstanceOf(
        expression=RightPadded(Identifier(simple_name="v"), after=Space.SINGLE_SPACE),
        clazz=Identifier(simple_name="Int", prefix=Space.SINGLE_SPACE),
        markers=Markers.of(NotIs()),
    )

    assert print_tree(binary) == "a ..< b"
    assert print_tree(postfix) == "i++"
    assert print_tree(prefix) == "!done"
    assert print_tree(negated_check) == "v !is Int"


def test_lambda_and_unknown() -> None:
    lam = Lambda(
        parameters=(),
        body=Block(statements=(RightPadded(Identifier(simple_name="it", prefix=Space.SINGLE_SPACE)),), end=Space.SINGLE_SPACE),
    )

    assert print_tree(lam) == "{ it }"
    assert print_tree(Unknown(source="typealias A = B", prefix=Space.build("\n"))) == "\ntypealias A = B"


def test_compilation_unit_prints_byte_order_mark_and_eof() -> None:
    unit = CompilationUnit(
        statements=(RightPadded(Identifier(simple_name="x")),),
        eof=Space.build("\n"),
        charset_bom_marked=True,
    )

    assert print_tree(unit) == "\ufeffx\n"


def test_edited_tree_reprints_with_new_trivia() -> None:
    tree = parse_result("val a=1\n").lossless_tree()
    declarations = tree.statements[0].element
    assert isinstance(declarations, VariableDeclarations)

    padded = declarations.variables[0]
    variable = padded.element
    initializer = variable.initializer
    assert initializer is not None
    spaced = variable.with_fields(
        initializer=LeftPadded(Space.SINGLE_SPACE, initializer.element.with_prefix(Space.SINGLE_SPACE))
    )
    edited = declarations.with_fields(variables=(padded.with_element(spaced),))

    assert print_tree(tree.with_fields(statements=(tree.statements[0].with_element(edited),))) == "val a = 1\n"
