from kotlinpy.cst import SyntaxNode, SyntaxToken, from_green
from kotlinpy.parser import parse
from kotlinpy.syntax import KotlinSyntaxKind


def _first_child_node(node: SyntaxNode, kind: KotlinSyntaxKind) -> SyntaxNode | None:
    for child in node.children:
        if isinstance(child, SyntaxNode) and child.kind == kind:
            return child
    return None


def test_red_wrappers_navigation_and_siblings() -> None:
    source = "val a = 1\nval b = 2\n"
    root = from_green(parse(source).root, source)

    assert root.kind == KotlinSyntaxKind.FILE
    properties = [node for node in root.child_nodes() if node.kind == KotlinSyntaxKind.PROPERTY]
    assert len(properties) == 2
    assert properties[0].text == "val a = 1"
    assert properties[1].text == "val b = 2"

    newline = properties[0].next_sibling()
    assert isinstance(newline, SyntaxToken)
    assert newline.kind == KotlinSyntaxKind.NEWLINE
    assert newline.next_sibling() is properties[1]
    assert properties[1].prev_sibling() is newline
    assert properties[0].parent is root


def test_red_wrappers_token_text_rebuilds_source() -> None:
    source = "fun f(x: Int) = x + 1 // inline\n"
    root = from_green(parse(source).root, source)

    tokens = root.descendants_tokens()
    assert "".join(token.text for token in tokens) == source

    comment = next(token for token in tokens if token.kind == KotlinSyntaxKind.LINE_COMMENT)
    assert comment.is_trivia
    assert comment.text == "// inline"
    assert source[comment.start : comment.end] == comment.text


def test_nodes_never_start_or_end_with_trivia() -> None:
    source = "val total = first /* sum */ + second\n"
    root = from_green(parse(source).root, source)

    binary = next(node for node in root.descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION)
    assert binary.text == "first /* sum */ + second"
    assert binary.range.start == source.index("first")

    first_token = binary.first_token()
    assert first_token is not None
    assert first_token.kind == KotlinSyntaxKind.IDENTIFIER

    for node in root.descendants():
        if node is root or not node.children:
            continue
        assert not node.children[0].is_trivia
        assert not node.children[-1].is_trivia


def test_significant_children_skip_trivia_and_eof() -> None:
    source = "val a = 1 // c\n"
    root = from_green(parse(source).root, source)

    significant = root.significant_children()
    assert [child.kind for child in significant] == [KotlinSyntaxKind.PROPERTY]

    property_node = _first_child_node(root, KotlinSyntaxKind.PROPERTY)
    assert property_node is not None
    assert property_node.first_child(KotlinSyntaxKind.VAL_KEYWORD) is not None
    assert [child.kind for child in property_node.significant_children()] == [
        KotlinSyntaxKind.VAL_KEYWORD,
        KotlinSyntaxKind.IDENTIFIER,
        KotlinSyntaxKind.EQ,
        KotlinSyntaxKind.INTEGER_CONSTANT,
    ]
