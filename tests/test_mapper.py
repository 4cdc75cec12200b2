import pytest

from kotlinpy.mapping import (
    MapperOptions,
    UnsupportedConstructError,
    UnsupportedPolicy,
    detect_line_ending,
    map_node,
)
from kotlinpy.parser import parse_result
from kotlinpy.printer import print_tree
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.tree import (
    Binary,
    BinaryOperator,
    Block,
    ClassKindType,
    Empty,
    EnumValueSet,
    FunctionType,
    Identifier,
    ImplicitReturn,
    Infix,
    Literal,
    MemberReference,
    MethodDeclaration,
    MethodInvocation,
    MethodSymbol,
    NamedVariable,
    ObjectExpression,
    OmitBraces,
    OmitParentheses,
    OperatorOverload,
    Return,
    Semicolon,
    SingleExpressionBlock,
    Space,
    SymbolTable,
    TrailingComma,
    TypeSymbol,
    Unknown,
    VariableDeclarations,
)
from tests._debug import debug_dump_tree
from tests._shared_cases import ROUND_TRIP_CASES, UNSUPPORTED_CASES, KotlinCase, case_id


def _initializer(source: str):
    tree = parse_result(source).lossless_tree()
    declarations = tree.statements[0].element
    assert isinstance(declarations, VariableDeclarations)
    initializer = declarations.variables[0].element.initializer
    assert initializer is not None
    return initializer.element


@pytest.mark.parametrize("case", ROUND_TRIP_CASES, ids=case_id)
def test_mapped_tree_prints_source_unchanged(case: KotlinCase) -> None:
    tree = parse_result(case.source).lossless_tree()
    debug_dump_tree(case.name, tree, case.source)

    assert print_tree(tree) == case.source


@pytest.mark.parametrize("case", ROUND_TRIP_CASES, ids=case_id)
def test_verified_mapping_accepts_supported_sources(case: KotlinCase) -> None:
    mapped = parse_result(case.source).mapped_tree(options=MapperOptions(verify=True))

    assert mapped.diagnostics == []
    assert print_tree(mapped.tree) == case.source


@pytest.mark.parametrize("case", UNSUPPORTED_CASES, ids=case_id)
def test_unsupported_constructs_abort_by_default(case: KotlinCase) -> None:
    result = parse_result(case.source)
    assert result.diagnostics == []

    with pytest.raises(UnsupportedConstructError) as excinfo:
        result.lossless_tree()

    diagnostic = excinfo.value.to_diagnostic()
    assert diagnostic.code == "MAPPER_UNSUPPORTED_CONSTRUCT"
    assert 0 <= diagnostic.range.start <= diagnostic.range.end <= len(case.source)


def test_skip_declaration_keeps_unsupported_text_verbatim() -> None:
    source = "val a = 1\ntypealias Name = String\nval b = 2\n"
    mapped = parse_result(source).mapped_tree(
        options=MapperOptions(unsupported=UnsupportedPolicy.SKIP_DECLARATION)
    )

    assert [d.code for d in mapped.diagnostics] == ["MAPPER_UNSUPPORTED_CONSTRUCT"]
    skipped = mapped.tree.statements[1].element
    assert isinstance(skipped, Unknown)
    assert skipped.source == "typealias Name = String"
    assert skipped.prefix == Space.build("\n")
    assert isinstance(mapped.tree.statements[2].element, VariableDeclarations)
    assert print_tree(mapped.tree) == source


def test_expression_body_is_a_single_expression_block() -> None:
    tree = parse_result("fun answer()  =   42\n").lossless_tree()
    method = tree.statements[0].element

    assert isinstance(method, MethodDeclaration)
    assert method.name.simple_name == "answer"
    assert isinstance(method.parameters.padded[0].element, Empty)

    body = method.body
    assert isinstance(body, Block)
    assert body.markers.has(SingleExpressionBlock)
    assert body.markers.has(OmitBraces)
    assert body.prefix == Space.build("  ")

    returned = body.statements[0].element
    assert isinstance(returned, Return)
    assert returned.markers.has(ImplicitReturn)
    assert isinstance(returned.expression, Literal)
    assert returned.expression.prefix == Space.build("   ")
    assert tree.eof == Space.build("\n")


def test_empty_parameter_list_keeps_inner_space() -> None:
    tree = parse_result("fun f( ) { }").lossless_tree()
    method = tree.statements[0].element

    assert isinstance(method, MethodDeclaration)
    (parameter,) = method.parameters.padded
    assert isinstance(parameter.element, Empty)
    assert parameter.element.prefix == Space.SINGLE_SPACE


def test_semicolons_become_markers() -> None:
    tree = parse_result("val a = 1; val b = 2;\n").lossless_tree()
    first, second = tree.statements

    assert first.markers.has(Semicolon)
    assert first.after == Space.EMPTY
    assert second.markers.has(Semicolon)
    assert second.element.prefix == Space.SINGLE_SPACE
    assert tree.eof == Space.build("\n")


def test_empty_statements_keep_their_semicolons() -> None:
    tree = parse_result("val a = 1; ;\n").lossless_tree()
    first, second = tree.statements

    assert first.markers.has(Semicolon)
    assert isinstance(second.element, Empty)
    assert second.element.prefix == Space.SINGLE_SPACE
    assert second.markers.has(Semicolon)
    assert print_tree(tree) == "val a = 1; ;\n"


def test_property_accessors_are_method_declarations() -> None:
    source = "var count = 0\n    private set\n    get() = field\n"
    tree = parse_result(source).lossless_tree()
    declarations = tree.statements[0].element

    assert isinstance(declarations, VariableDeclarations)
    setter, getter = declarations.accessors
    assert setter.name.simple_name == "set"
    assert [m.keyword for m in setter.modifiers] == ["private"]
    assert setter.parameters.markers.has(OmitParentheses)
    assert setter.body is None
    assert setter.prefix == Space.build("\n    ")

    assert getter.name.simple_name == "get"
    assert isinstance(getter.parameters.padded[0].element, Empty)
    assert getter.body is not None
    assert getter.body.markers.has(SingleExpressionBlock)
    assert print_tree(tree) == source


def test_function_type_parameters_and_arrow() -> None:
    tree = parse_result("val f: (name: String, Int) -> Unit = g\n").lossless_tree()
    variable = tree.statements[0].element.variables[0].element
    assert variable.type_expression is not None
    function_type = variable.type_expression.element

    assert isinstance(function_type, FunctionType)
    named, unnamed = function_type.parameters.padded
    assert isinstance(named.element, NamedVariable)
    assert named.element.name.simple_name == "name"
    assert isinstance(unnamed.element, Identifier)
    assert unnamed.element.simple_name == "Int"
    assert function_type.return_type.before == Space.SINGLE_SPACE
    assert function_type.return_type.element.prefix == Space.SINGLE_SPACE


def test_member_reference_shapes() -> None:
    unbound = _initializer("val f = ::foo")
    assert isinstance(unbound, MemberReference)
    assert isinstance(unbound.containing.element, Empty)
    assert unbound.reference.simple_name == "foo"

    bound = _initializer("val k = Foo :: class")
    assert isinstance(bound, MemberReference)
    assert isinstance(bound.containing.element, Identifier)
    assert bound.containing.after == Space.SINGLE_SPACE
    assert bound.reference.simple_name == "class"
    assert bound.reference.prefix == Space.SINGLE_SPACE


def test_object_expression_wraps_an_anonymous_class() -> None:
    expression = _initializer("val task = object : Runnable {}")

    assert isinstance(expression, ObjectExpression)
    assert expression.prefix == Space.SINGLE_SPACE
    declaration = expression.declaration
    assert declaration.kind.type is ClassKindType.OBJECT
    assert declaration.kind.prefix == Space.EMPTY
    assert declaration.name is None
    assert declaration.implements is not None


def test_enum_entries_open_the_class_body() -> None:
    source = "enum class E { A(1), B { }, C, ; fun f() = 1 }"
    tree = parse_result(source).lossless_tree()
    body = tree.statements[0].element.body
    assert body is not None

    entries, member = body.statements
    assert isinstance(entries.element, EnumValueSet)
    assert entries.element.prefix == Space.SINGLE_SPACE
    assert entries.markers.has(Semicolon)
    assert entries.after == Space.SINGLE_SPACE
    first, second, third = entries.element.enums
    assert first.element.arguments is not None
    assert second.element.body is not None
    assert third.markers.has(TrailingComma)
    assert isinstance(member.element, MethodDeclaration)
    assert print_tree(tree) == source


def test_trailing_comma_keeps_the_space_before_the_delimiter() -> None:
    call = _initializer("val xs = listOf(1, 2 , )")

    assert isinstance(call, MethodInvocation)
    last = call.arguments.padded[-1]
    comma = last.markers.find_first(TrailingComma)
    assert comma is not None
    assert last.after == Space.SINGLE_SPACE
    assert comma.suffix == Space.SINGLE_SPACE


def test_binary_and_infix_shapes() -> None:
    binary = _initializer("val total = a + b")
    assert isinstance(binary, Binary)
    assert binary.operator.element is BinaryOperator.ADDITION
    assert binary.operator.before == Space.SINGLE_SPACE
    assert isinstance(binary.right, Identifier)
    assert binary.right.prefix == Space.SINGLE_SPACE

    infix = _initializer("val flags = 1 shl 2")
    assert isinstance(infix, MethodInvocation)
    assert infix.markers.has(Infix)
    assert infix.name.simple_name == "shl"
    assert infix.select is not None
    assert infix.select.after == Space.SINGLE_SPACE


def test_operator_symbols_attach_overload_markers() -> None:
    source = "val c = a + b"
    result = parse_result(source)
    binary_node = next(
        node for node in result.syntax_root().descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION
    )
    plus = MethodSymbol("plus", TypeSymbol("Money"))
    symbols = SymbolTable().with_method(binary_node.range, plus)

    binary = result.mapped_tree(symbols).tree.statements[0].element.variables[0].element.initializer.element

    assert isinstance(binary, Binary)
    overload = binary.markers.find_first(OperatorOverload)
    assert overload is not None
    assert overload.method is plus


def test_map_node_maps_a_single_expression() -> None:
    source = "val total = first /* sum */ + second"
    result = parse_result(source)
    binary_node = next(
        node for node in result.syntax_root().descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION
    )

    mapped = map_node(binary_node)

    assert isinstance(mapped, Binary)
    assert mapped.prefix == Space.EMPTY
    assert print_tree(mapped) == "first /* sum */ + second"


def test_compilation_unit_records_encoding_facts() -> None:
    source = "\ufeffval a = 1\r\nval b = 2\r\n"
    mapped = parse_result(source).mapped_tree(source_path="src/Main.kt")
    tree = mapped.tree

    assert tree.charset_bom_marked is True
    assert tree.line_ending == "\r\n"
    assert tree.source_path == "src/Main.kt"
    assert print_tree(tree) == source


def test_detect_line_ending() -> None:
    assert detect_line_ending("a\nb\r\n") == "\n"
    assert detect_line_ending("a\r\nb\n") == "\r\n"
    assert detect_line_ending("a\rb") == "\r"
    assert detect_line_ending("no break") == "\n"


def test_node_ids_are_unique() -> None:
    tree = parse_result("val a = 1\nval b = 2\n").lossless_tree()
    first, second = (padded.element for padded in tree.statements)

    assert first.id != second.id
    assert first.with_prefix(Space.SINGLE_SPACE).id == first.id
