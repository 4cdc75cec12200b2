import pytest

from kotlinpy.format import SpacesVisitor
from kotlinpy.parser import parse_result
from kotlinpy.printer import print_tree
from kotlinpy.tree import Identifier, Tree
from kotlinpy.visit import TraversalState, TreeVisitor, run_visitor


class _RenameVisitor(TreeVisitor):
    def __init__(self, old: str, new: str) -> None:
        self.old = old
        self.new = new
        self.seen: list[str] = []

    def visit_node[T: Tree](self, tree: T, state: TraversalState) -> T:
        if isinstance(tree, Identifier):
            self.seen.append(tree.simple_name)
            if tree.simple_name == self.old:
                return tree.with_fields(simple_name=self.new)  # type: ignore[return-value]
        return tree


def test_stop_after_leaves_later_nodes_untouched() -> None:
    source = "foo(a ,b)\nfoo(c ,d)\nfoo(e ,f)\n"
    tree = parse_result(source).lossless_tree()
    second = tree.statements[1].element
    third = tree.statements[2].element

    state = TraversalState(stop_after=second.id)
    spaced = SpacesVisitor().visit(tree, state)

    assert print_tree(spaced) == "foo(a, b)\nfoo(c, d)\nfoo(e ,f)\n"
    assert state.stopped
    assert third.id in state.passed_through
    assert spaced.statements[2].element is third


def test_visit_is_post_order() -> None:
    tree = parse_result("val x = a + b\n").lossless_tree()
    visitor = _RenameVisitor("a", "first")

    renamed = run_visitor(visitor, tree)

    assert visitor.seen == ["x", "a", "b"]
    assert print_tree(renamed) == "val x = first + b\n"


def test_unchanged_tree_is_returned_as_is() -> None:
    tree = parse_result("val x = a + b\n").lossless_tree()

    assert run_visitor(_RenameVisitor("missing", "other"), tree) is tree


def test_state_and_stop_after_are_exclusive() -> None:
    tree = parse_result("x\n").lossless_tree()

    with pytest.raises(ValueError, match="Pass either state or stop_after, not both"):
        run_visitor(TreeVisitor(), tree, state=TraversalState(), stop_after=tree.id)
