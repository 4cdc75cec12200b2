import pytest

from kotlinpy.format import SpacesVisitor, spaced
from kotlinpy.parser import parse_result
from kotlinpy.printer import print_tree
from kotlinpy.style import SpacesStyle
from kotlinpy.tree import Space
from kotlinpy.visit import run_visitor


def _spaced(source: str, style: SpacesStyle | None = None) -> str:
    tree = parse_result(source).lossless_tree()
    return print_tree(run_visitor(SpacesVisitor(style), tree))


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("fun f( ) { }", "fun f() { }"),
        ("foo(x ,y)", "foo(x, y)"),
        ("x ;  // c", "x;  // c"),
        ("x;  // c", "x;  // c"),
        ("val a=1+2", "val a = 1 + 2"),
        ("fun f() { if(x){ } }", "fun f() { if (x) { } }"),
        ("val r = 1 .. 2", "val r = 1..2"),
        ("val ok = a&&b", "val ok = a && b"),
        ("val n = a?:b", "val n = a ?: b"),
        ("fun f(x :Int) :Int{ return x }", "fun f(x: Int): Int { return x }"),
        ("fun f()=1", "fun f() = 1"),
        ("val m = 1 shl  2", "val m = 1 shl 2"),
        ("val n = - x", "val n = -x"),
    ],
)
def test_spaces_visitor_normalizes_slots(source: str, expected: str) -> None:
    assert _spaced(source) == expected


def test_comments_stay_where_they_are() -> None:
    assert _spaced("foo(x /* c */ ,y)") == "foo(x /* c */, y)"
    assert _spaced("val a = 1 /* one */+2") == "val a = 1 /* one */ + 2"


def test_line_breaks_are_left_alone() -> None:
    source = "foo(\n    x,\n    y\n)\n"

    assert _spaced(source) == source


def test_keyword_operators_keep_their_spacing() -> None:
    source = "val hit = x in  range"

    assert _spaced(source) == source


def test_spacing_is_idempotent() -> None:
    once = _spaced("val a=1+2\nfoo(x ,y)\nfun f( ){ }\n")

    assert once == "val a = 1 + 2\nfoo(x, y)\nfun f() { }\n"
    assert _spaced(once) == once


def test_style_overrides_from_mapping() -> None:
    no_comma_space = SpacesStyle.from_mapping({"other.after_comma": False})
    call_space = SpacesStyle.from_mapping({"before_parentheses.method_call": True})

    assert _spaced("foo(x, y)", no_comma_space) == "foo(x,y)"
    assert _spaced("foo(x)", call_space) == "foo (x)"


def test_tight_operators_never_fuse_with_a_prefix_operand() -> None:
    tight = SpacesStyle.from_mapping({"around_operators.additive": False})

    assert _spaced("val x = a - -b", tight) == "val x = a- -b"
    assert _spaced("val y = a + +b", tight) == "val y = a+ +b"
    assert _spaced("val z = a - --b", tight) == "val z = a- --b"
    assert _spaced("val w = a - !b", tight) == "val w = a-!b"
    assert _spaced("val v = a + -b", tight) == "val v = a+-b"


def test_style_rejects_unknown_options_and_values() -> None:
    with pytest.raises(ValueError, match="Unknown spacing option"):
        SpacesStyle.from_mapping({"other.after_semicolons": True})
    with pytest.raises(ValueError, match="Unknown spacing option"):
        SpacesStyle.from_mapping({"after_comma": True})
    with pytest.raises(ValueError, match="expects a bool"):
        SpacesStyle.from_mapping({"other.after_comma": 1})  # type: ignore[dict-item]


def test_spaced_edits_only_the_last_whitespace() -> None:
    assert spaced(Space.EMPTY, True) == Space.SINGLE_SPACE
    assert spaced(Space.build("   "), False) is Space.EMPTY
    assert spaced(Space.build("\n    "), False) == Space.build("\n    ")
    assert spaced(Space.build(" /* c */   "), True).printed() == " /* c */ "
    assert spaced(Space.build(" // c\n"), False).printed() == " // c\n"


def test_trailing_comma_and_function_type_arrow() -> None:
    assert _spaced("val xs = listOf(1 ,2 , )") == "val xs = listOf(1, 2,)"
    assert _spaced("val f: (Int)->Unit = g") == "val f: (Int) -> Unit = g"
    assert _spaced("enum class E { A ,B , }") == "enum class E { A, B, }"
