import pytest

from kotlinpy.desugar import DesugarVisitor, desugar_tree
from kotlinpy.parser import parse_result
from kotlinpy.pipeline import run_desugar
from kotlinpy.printer import print_tree
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.text import TextRange
from kotlinpy.tree import MethodInvocation, MethodSymbol, OperatorOverload, SymbolTable, TypeSymbol
from kotlinpy.visit import TraversalState

MONEY = TypeSymbol("Money")


def _symbols(source: str, kind: KotlinSyntaxKind, name: str, *, builtin: bool = False) -> SymbolTable:
    """Resolve the first node of `kind` in `source` to `name`."""
    root = parse_result(source).syntax_root()
    node = next(node for node in root.descendants() if node.kind == kind)
    return SymbolTable().with_method(node.range, MethodSymbol(name, MONEY, builtin=builtin))


def _desugared(source: str, kind: KotlinSyntaxKind, name: str) -> str:
    result = run_desugar(source, symbols=_symbols(source, kind, name))
    assert result.diagnostics == []
    return result.printed_text


@pytest.mark.parametrize(
    ("source", "kind", "name", "expected"),
    [
        ("val c = a + b", KotlinSyntaxKind.BINARY_EXPRESSION, "plus", "val c = a.plus(b)"),
        ("val c = a * b", KotlinSyntaxKind.BINARY_EXPRESSION, "times", "val c = a.times(b)"),
        ("val r = a..b", KotlinSyntaxKind.BINARY_EXPRESSION, "rangeTo", "val r = a.rangeTo(b)"),
        ("val lt = a < b", KotlinSyntaxKind.BINARY_EXPRESSION, "compareTo", "val lt = a.compareTo(b) < 0"),
        ("val ne = a != b", KotlinSyntaxKind.BINARY_EXPRESSION, "equals", "val ne = a.equals(b).not()"),
        ("val hit = x in r", KotlinSyntaxKind.BINARY_EXPRESSION, "contains", "val hit = r.contains(x)"),
        ("val miss = x !in r", KotlinSyntaxKind.BINARY_EXPRESSION, "contains", "val miss = r.contains(x).not()"),
        ("val n = -x", KotlinSyntaxKind.PREFIX_EXPRESSION, "unaryMinus", "val n = x.unaryMinus()"),
        ("val v = a[0]", KotlinSyntaxKind.ARRAY_ACCESS_EXPRESSION, "get", "val v = a.get(0)"),
        ("fun f() { t += 1 }", KotlinSyntaxKind.BINARY_EXPRESSION, "plusAssign", "fun f() { t.plusAssign(1) }"),
    ],
)
def test_overloaded_operators_become_member_calls(
    source: str, kind: KotlinSyntaxKind, name: str, expected: str
) -> None:
    assert _desugared(source, kind, name) == expected


def test_operator_receiver_is_parenthesized() -> None:
    assert _desugared("val d = -a + b", KotlinSyntaxKind.BINARY_EXPRESSION, "plus") == "val d = (-a).plus(b)"


def test_comments_around_the_operator_are_kept() -> None:
    printed = _desugared("val c = a /* why */ + b", KotlinSyntaxKind.BINARY_EXPRESSION, "plus")

    assert "/* why */" in printed
    assert printed.endswith(".plus(b)")


def test_comparison_keeps_each_comment_once() -> None:
    printed = _desugared("val lt = a /* why */ < b", KotlinSyntaxKind.BINARY_EXPRESSION, "compareTo")

    assert printed.count("/* why */") == 1
    assert printed == "val lt = a.compareTo(b) /* why */ < 0"


def test_builtin_operators_are_left_alone() -> None:
    source = "val c = a + b"
    symbols = _symbols(source, KotlinSyntaxKind.BINARY_EXPRESSION, "plus", builtin=True)

    result = run_desugar(source, symbols=symbols)

    assert result.printed_text == source
    assert result.changed is False


def test_operators_without_symbols_are_left_alone() -> None:
    source = "val c = a + b\nval n = -x\n"

    result = run_desugar(source)

    assert result.printed_text == source
    assert result.diagnostics == []


def test_unmapped_operator_is_reported_and_kept() -> None:
    source = "val ok = a && b"
    symbols = _symbols(source, KotlinSyntaxKind.BINARY_EXPRESSION, "and")

    result = run_desugar(source, symbols=symbols)

    assert result.printed_text == source
    assert [d.code for d in result.diagnostics] == ["DESUGAR_UNMAPPED_OPERATOR"]
    diagnostic = result.diagnostics[0]
    assert diagnostic.severity == "warning"
    assert diagnostic.message == "No member name for overloaded operator '&&'"
    assert diagnostic.range == TextRange.empty(0)


def test_parse_errors_skip_desugaring() -> None:
    source = "val x = \n"

    result = run_desugar(source)

    assert result.tree is None
    assert result.printed_text == source
    assert result.changed is False
    assert result.parse.has_errors


def test_rewritten_call_keeps_the_operator_node_id() -> None:
    source = "val c = a + b"
    result = parse_result(source)
    symbols = _symbols(source, KotlinSyntaxKind.BINARY_EXPRESSION, "plus")
    tree = result.mapped_tree(symbols).tree
    binary = tree.statements[0].element.variables[0].element.initializer.element

    desugared = desugar_tree(tree)
    call = desugared.statements[0].element.variables[0].element.initializer.element

    assert isinstance(call, MethodInvocation)
    assert call.id == binary.id
    assert call.method_type is not None
    assert call.method_type.name == "plus"
    assert not call.markers.has(OperatorOverload)


def test_stop_after_limits_the_rewrite() -> None:
    source = "val c = a + b\nval d = a + b\n"
    result = parse_result(source)
    binaries = [
        node for node in result.syntax_root().descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION
    ]
    symbols = SymbolTable()
    for node in binaries:
        symbols = symbols.with_method(node.range, MethodSymbol("plus", MONEY))
    tree = result.mapped_tree(symbols).tree

    state = TraversalState(stop_after=tree.statements[0].element.id)
    desugared = DesugarVisitor().visit(tree, state)

    assert print_tree(desugared) == "val c = a.plus(b)\nval d = a + b\n"
