import pytest

from kotlinpy.format import MinimumViableSpacingVisitor, ensure_space
from kotlinpy.parser import parse_result
from kotlinpy.printer import print_tree
from kotlinpy.style import TabsAndIndentsStyle
from kotlinpy.tree import (
    Block,
    CompilationUnit,
    Container,
    Empty,
    Identifier,
    Markers,
    MethodDeclaration,
    Modifier,
    ModifierType,
    Return,
    RightPadded,
    Semicolon,
    Space,
)
from kotlinpy.visit import run_visitor
from tests._shared_cases import ROUND_TRIP_CASES, KotlinCase, case_id


def _name(text: str, prefix: Space = Space.EMPTY) -> Identifier:
    return Identifier(simple_name=text, prefix=prefix)


def test_keyword_and_word_are_separated() -> None:
    tree = Return(expression=_name("x"))

    assert print_tree(tree) == "returnx"
    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), tree)) == "return x"


def test_modifier_and_name_are_separated() -> None:
    method = MethodDeclaration(
        name=_name("foo"),
        parameters=Container(Space.EMPTY, (RightPadded(Empty()),)),
        modifiers=(Modifier(keyword="fun", type=ModifierType.KEYWORD),),
    )

    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), method)) == "fun foo()"


def test_statements_on_one_line_are_split() -> None:
    unit = CompilationUnit(
        statements=(RightPadded(_name("a")), RightPadded(_name("b", Space.SINGLE_SPACE))),
    )

    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), unit)) == "a\nb"


def test_line_break_is_indented_inside_braces() -> None:
    block = Block(
        statements=(
            RightPadded(_name("a", Space.SINGLE_SPACE)),
            RightPadded(_name("b", Space.SINGLE_SPACE)),
        ),
        end=Space.SINGLE_SPACE,
    )

    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), block)) == "{ a\n    b }"

    tabs = TabsAndIndentsStyle(use_tab_character=True)
    assert print_tree(run_visitor(MinimumViableSpacingVisitor(tabs), block)) == "{ a\n\tb }"


def test_semicolon_keeps_statements_on_one_line() -> None:
    unit = CompilationUnit(
        statements=(
            RightPadded(_name("a"), markers=Markers.of(Semicolon())),
            RightPadded(_name("b", Space.SINGLE_SPACE)),
        ),
    )

    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), unit)) == "a; b"


def test_line_break_follows_the_file_line_ending() -> None:
    unit = CompilationUnit(
        statements=(RightPadded(_name("a")), RightPadded(_name("b"))),
        line_ending="\r\n",
    )

    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), unit)) == "a\r\nb"


@pytest.mark.parametrize("case", ROUND_TRIP_CASES, ids=case_id)
def test_parsed_sources_need_no_extra_space(case: KotlinCase) -> None:
    tree = parse_result(case.source).lossless_tree()

    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), tree)) == case.source


def test_star_import_keeps_its_single_space() -> None:
    source = "import java.util.*\n"
    tree = parse_result(source).lossless_tree()
    qualid = tree.imports[0].element.qualid

    assert qualid.prefix == Space.SINGLE_SPACE
    assert qualid.target.prefix is Space.EMPTY
    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), tree)) == source


def test_ensure_space_only_fills_empty_slots() -> None:
    assert ensure_space(Space.EMPTY) is Space.SINGLE_SPACE
    newline = Space.build("\n")
    assert ensure_space(newline) is newline


def test_property_accessor_is_separated_from_the_type() -> None:
    tree = parse_result("val top: Int\n    get() = 1\n").lossless_tree()
    declarations = tree.statements[0].element
    (getter,) = declarations.accessors
    joined = declarations.with_fields(accessors=(getter.with_prefix(Space.EMPTY),))
    tree = tree.with_fields(statements=(tree.statements[0].with_element(joined),))

    assert print_tree(tree) == "val top: Intget() = 1\n"
    assert print_tree(run_visitor(MinimumViableSpacingVisitor(), tree)) == "val top: Int get() = 1\n"
