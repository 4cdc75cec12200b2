import pytest

from kotlinpy.lexer import Lexer, Token, TokenFlags, TokenKind, token_text
from tests._debug import debug_dump_tokens
from tests._shared_cases import ROUND_TRIP_CASES, KotlinCase, case_id


def lex(text: str) -> list[Token]:
    return Lexer(text).lex()


def significant_kinds(text: str) -> list[TokenKind]:
    return [token.kind for token in lex(text) if not token.kind.is_trivia]


@pytest.mark.parametrize("case", ROUND_TRIP_CASES, ids=case_id)
def test_token_texts_rebuild_source(case: KotlinCase) -> None:
    tokens = lex(case.source)
    debug_dump_tokens(case.name, case.source, tokens)

    assert tokens[-1].kind == TokenKind.EOF
    assert "".join(token_text(case.source, token) for token in tokens) == case.source


def test_declaration_tokens() -> None:
    assert significant_kinds("val x: Int = 42") == [
        TokenKind.VAL_KEYWORD,
        TokenKind.IDENTIFIER,
        TokenKind.COLON,
        TokenKind.IDENTIFIER,
        TokenKind.EQ,
        TokenKind.INTEGER_LITERAL,
        TokenKind.EOF,
    ]


def test_soft_keywords_stay_identifiers() -> None:
    tokens = [t for t in lex("override data by get") if not t.kind.is_trivia]

    assert [t.kind for t in tokens[:-1]] == [TokenKind.IDENTIFIER] * 4


def test_negated_keywords_are_single_tokens() -> None:
    assert significant_kinds("a !in b") == [
        TokenKind.IDENTIFIER,
        TokenKind.NOT_IN,
        TokenKind.IDENTIFIER,
        TokenKind.EOF,
    ]
    assert significant_kinds("a !is B") == [
        TokenKind.IDENTIFIER,
        TokenKind.NOT_IS,
        TokenKind.IDENTIFIER,
        TokenKind.EOF,
    ]
    # `!inside` is a negated identifier, not `!in` + `side`.
    assert significant_kinds("!inside") == [TokenKind.EXCL, TokenKind.IDENTIFIER, TokenKind.EOF]


def test_safe_cast_and_range_until() -> None:
    assert significant_kinds("x as? T") == [
        TokenKind.IDENTIFIER,
        TokenKind.AS_SAFE,
        TokenKind.IDENTIFIER,
        TokenKind.EOF,
    ]
    assert significant_kinds("0..<n") == [
        TokenKind.INTEGER_LITERAL,
        TokenKind.RANGE_UNTIL,
        TokenKind.IDENTIFIER,
        TokenKind.EOF,
    ]
    assert significant_kinds("1..2") == [
        TokenKind.INTEGER_LITERAL,
        TokenKind.RANGE,
        TokenKind.INTEGER_LITERAL,
        TokenKind.EOF,
    ]


def test_numeric_literal_kinds() -> None:
    assert significant_kinds("1.5 2f 0xFF 10L 1e3")[:-1] == [
        TokenKind.FLOAT_LITERAL,
        TokenKind.FLOAT_LITERAL,
        TokenKind.INTEGER_LITERAL,
        TokenKind.INTEGER_LITERAL,
        TokenKind.FLOAT_LITERAL,
    ]


def test_string_template_is_one_token() -> None:
    source = '"Hello, ${name.trim()}!"'
    tokens = lex(source)

    assert tokens[0].kind == TokenKind.STRING_LITERAL
    assert token_text(source, tokens[0]) == source


def test_raw_string_sets_flag() -> None:
    source = '"""a\n"b"\n"""'
    tokens = lex(source)

    assert tokens[0].kind == TokenKind.STRING_LITERAL
    assert tokens[0].flags & TokenFlags.RAW_STRING
    assert tokens[0].range.end == len(source)


def test_comments_are_trivia() -> None:
    source = "a // line\n/* block /* nested */ */ b"
    kinds = [token.kind for token in lex(source)]

    assert TokenKind.LINE_COMMENT in kinds
    assert kinds.count(TokenKind.BLOCK_COMMENT) == 1


def test_preceding_line_break_flag() -> None:
    tokens = [t for t in lex("a\n  b c") if not t.kind.is_trivia]

    assert not tokens[0].has_preceding_line_break()
    assert tokens[1].has_preceding_line_break()
    assert not tokens[2].has_preceding_line_break()


def test_byte_order_mark_only_at_start() -> None:
    tokens = lex("\ufeffval a = 1")

    assert tokens[0].kind == TokenKind.BYTE_ORDER_MARK
    assert tokens[1].kind == TokenKind.VAL_KEYWORD


def test_unterminated_string_reports_diagnostic() -> None:
    lexer = Lexer('val s = "open\nval t = 1')
    tokens = lexer.lex()

    string = next(t for t in tokens if t.kind == TokenKind.STRING_LITERAL)
    assert string.flags & TokenFlags.UNTERMINATED
    assert [d.code for d in lexer.diagnostics] == ["LEXER_UNTERMINATED_STRING"]
    # The line break ends the literal, so the next line lexes normally.
    assert TokenKind.VAL_KEYWORD in [t.kind for t in tokens[tokens.index(string) + 1 :]]


def test_unterminated_comment_reports_diagnostic() -> None:
    lexer = Lexer("/* never closed")
    lexer.lex()

    assert [d.code for d in lexer.diagnostics] == ["LEXER_UNTERMINATED_COMMENT"]


def test_bad_character_reports_diagnostic() -> None:
    lexer = Lexer("val a = #")
    tokens = lexer.lex()

    assert TokenKind.BAD_CHARACTER in [t.kind for t in tokens]
    assert [d.code for d in lexer.diagnostics] == ["LEXER_BAD_CHARACTER"]
