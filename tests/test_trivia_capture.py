import pytest

from kotlinpy.mapping import Direction, InconsistentTriviaError, build_space, capture_trivia
from kotlinpy.parser import parse_result
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.tree import Comment, Space


def _properties(source: str):
    root = parse_result(source).syntax_root()
    return [node for node in root.child_nodes() if node.kind == KotlinSyntaxKind.PROPERTY]


def test_backward_and_forward_scans_see_the_same_run() -> None:
    first, second = _properties("val a = 1 // one\n/* two */ val b = 2\n")

    before_second = capture_trivia(second, Direction.BACKWARD)
    after_first = capture_trivia(first, Direction.FORWARD)

    assert before_second.printed() == " // one\n/* two */ "
    assert before_second.whitespace == " "
    assert before_second.comments == (
        Comment(multiline=False, text=" one", suffix="\n"),
        Comment(multiline=True, text=" two ", suffix=" "),
    )
    assert after_first == before_second


def test_scan_reads_trivia_next_to_an_operand() -> None:
    source = "val total = first  + second"
    root = parse_result(source).syntax_root()
    binary = next(node for node in root.descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION)
    left = binary.children[0]

    assert capture_trivia(left, Direction.FORWARD) == Space.build("  ")
    assert capture_trivia(root, Direction.BACKWARD) is Space.EMPTY


def test_build_space_rejects_significant_tokens() -> None:
    (declaration,) = _properties("val a = 1\n")
    name = declaration.first_child(KotlinSyntaxKind.IDENTIFIER)
    assert name is not None

    with pytest.raises(InconsistentTriviaError):
        build_space([name])
