import pytest

from kotlinpy.format import RemoveTrailingSemicolonVisitor
from kotlinpy.parser import parse_result
from kotlinpy.printer import print_tree
from kotlinpy.visit import run_visitor


def _without_semicolons(source: str) -> str:
    tree = parse_result(source).lossless_tree()
    return print_tree(run_visitor(RemoveTrailingSemicolonVisitor(), tree))


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("val a = 1;\nval b = 2;\n", "val a = 1\nval b = 2\n"),
        ("val a = 1 ;\n", "val a = 1\n"),
        ("fun f() {\n    g();\n    h();\n}\n", "fun f() {\n    g()\n    h()\n}\n"),
        ("package app;\n\nimport app.util.*;\nval a = 1\n", "package app\n\nimport app.util.*\nval a = 1\n"),
    ],
)
def test_line_ending_semicolons_are_removed(source: str, expected: str) -> None:
    assert _without_semicolons(source) == expected


def test_semicolon_between_statements_on_one_line_is_kept() -> None:
    source = "val a = 1; val b = 2\n"

    assert _without_semicolons(source) == source


def test_semicolon_after_a_comment_is_kept() -> None:
    source = "x /* c */;\n"

    assert _without_semicolons(source) == source


def test_comment_after_removed_semicolon_is_kept() -> None:
    assert _without_semicolons("g(); // done\n") == "g() // done\n"


def test_semicolon_closing_enum_entries_is_kept() -> None:
    source = "enum class E {\n    A, B;\n\n    fun f() = 1\n}\n"

    assert _without_semicolons(source) == source
