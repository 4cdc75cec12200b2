import pytest

from kotlinpy.tree import Comment, Markers, Semicolon, Space


def test_build_splits_whitespace_and_comments() -> None:
    space = Space.build("  // first\n  /* second */ ")

    assert space.whitespace == "  "
    assert space.comments == (
        Comment(multiline=False, text=" first", suffix="\n  "),
        Comment(multiline=True, text=" second ", suffix=" "),
    )
    assert space.printed() == "  // first\n  /* second */ "
    assert space.last_whitespace == " "


def test_build_keeps_nested_block_comments_whole() -> None:
    text = "/* a /* b */ c */\n"
    space = Space.build(text)

    assert len(space.comments) == 1
    assert space.comments[0].text == " a /* b */ c "
    assert space.printed() == text


def test_build_keeps_carriage_return_out_of_line_comment() -> None:
    space = Space.build(" // c\r\n")

    assert space.comments[0].text == " c"
    assert space.comments[0].suffix == "\r\n"


def test_build_rejects_significant_text() -> None:
    with pytest.raises(ValueError, match="Not trivia text"):
        Space.build("/* a */ x")
    with pytest.raises(ValueError, match="Not trivia text"):
        Space.build("  x ")


def test_empty_and_single_space_constants() -> None:
    assert Space.build("") is Space.EMPTY
    assert Space.EMPTY.is_empty
    assert Space.SINGLE_SPACE.printed() == " "
    assert not Space.SINGLE_SPACE.contains_newline()
    assert Space.build("\n").contains_newline()


def test_merge_keeps_printed_text() -> None:
    first = Space.build(" /* a */")
    second = Space.build("  // b\n")

    merged = Space.merge(first, second)
    assert merged.printed() == " /* a */  // b\n"
    assert len(merged.comments) == 2
    assert Space.merge(Space.build(" "), Space.build("\n")).whitespace == " \n"


def test_equality_compares_printed_text() -> None:
    assert Space.build(" ") == Space.SINGLE_SPACE
    assert Space.build("/* x */") == Space(comments=(Comment(multiline=True, text=" x "),))
    assert Space.build(" ") != Space.build("  ")
    assert hash(Space.build(" ")) == hash(Space.SINGLE_SPACE)


def test_last_whitespace_edits_text_before_next_token() -> None:
    space = Space.build(" // c\n")

    updated = space.with_last_whitespace("\n    ")
    assert updated.printed() == " // c\n    "
    assert updated.whitespace == " "

    plain = Space.build("   ").with_last_whitespace("")
    assert plain is Space.EMPTY


def test_markers_add_find_and_remove() -> None:
    markers = Markers.EMPTY.add(Semicolon())

    assert markers.has(Semicolon)
    assert markers.find_first(Semicolon) == Semicolon()
    assert markers.find_all(Semicolon) == (Semicolon(),)
    assert markers.remove(Semicolon) is Markers.EMPTY
    assert Markers.EMPTY.remove(Semicolon) is Markers.EMPTY
    assert not Markers.of()
