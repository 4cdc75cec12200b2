import pytest

from kotlinpy.cst import GreenNode, from_green
from kotlinpy.lexer import Lexer
from kotlinpy.parser import (
    FinishEvent,
    LosslessTreeSink,
    ParseMode,
    ParserOptions,
    StartEvent,
    TokenEvent,
    parse,
    parse_result,
)
from kotlinpy.syntax import KotlinSyntaxKind
from tests._debug import debug_dump_cst, debug_dump_diagnostics
from tests._shared_cases import PARSE_ERROR_CASES, ROUND_TRIP_CASES, KotlinCase, case_id


def _green_text(node: GreenNode) -> str:
    parts: list[str] = []
    for child in node.children:
        if isinstance(child, GreenNode):
            parts.append(_green_text(child))
        else:
            parts.append(child.text)
    return "".join(parts)


def _kinds(source: str) -> list[KotlinSyntaxKind]:
    root = from_green(parse(source).root, source)
    return [node.kind for node in root.descendants()]


@pytest.mark.parametrize("case", ROUND_TRIP_CASES, ids=case_id)
def test_parse_is_lossless_and_clean(case: KotlinCase) -> None:
    parsed = parse(case.source)
    debug_dump_cst(case.name, case.source, parsed.root)
    debug_dump_diagnostics(case.name, parsed.diagnostics, case.source)

    assert parsed.diagnostics == []
    assert parsed.root.kind == KotlinSyntaxKind.FILE
    assert _green_text(parsed.root) == case.source


@pytest.mark.parametrize("case", PARSE_ERROR_CASES, ids=case_id)
def test_parse_errors_keep_every_character(case: KotlinCase) -> None:
    parsed = parse(case.source)
    debug_dump_diagnostics(case.name, parsed.diagnostics, case.source)

    assert parsed.diagnostics
    assert all(d.severity == "error" for d in parsed.diagnostics)
    assert _green_text(parsed.root) == case.source


def test_missing_expression_is_reported() -> None:
    parsed = parse("val x = \n")

    assert "PARSER_EXPECTED_EXPRESSION" in [d.code for d in parsed.diagnostics]


def test_block_statements_need_a_separator() -> None:
    parsed = parse("fun f() { val a = 1 val b = 2 }")

    assert [d.code for d in parsed.diagnostics] == ["PARSER_EXPECTED_STATEMENT_SEPARATOR"]


def test_top_level_statements_depend_on_mode() -> None:
    source = 'println("hi")\n'

    assert parse(source).diagnostics == []

    strict = parse(source, mode=ParseMode.SOURCE)
    assert [d.code for d in strict.diagnostics] == ["PARSER_TOP_LEVEL_STATEMENT"]


def test_options_and_mode_are_exclusive() -> None:
    with pytest.raises(ValueError, match="Pass either options or mode, not both"):
        parse("val a = 1", options=ParserOptions(), mode=ParseMode.SCRIPT)


def test_precedence_nests_multiplication_under_addition() -> None:
    source = "val x = a + b * c"
    root = from_green(parse(source).root, source)
    binaries = [node for node in root.descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION]

    assert [node.text for node in binaries] == ["a + b * c", "b * c"]


def test_binary_operator_after_line_break_starts_a_new_statement() -> None:
    source = "fun f() {\n    val a = 1\n    -2\n}\n"
    root = from_green(parse(source).root, source)

    assert [node.kind for node in root.descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION] == []
    assert KotlinSyntaxKind.PREFIX_EXPRESSION in _kinds(source)


def test_newline_tolerant_operators_continue_the_expression() -> None:
    source = "val ok = a\n    && b\n"
    parsed = parse(source)

    assert parsed.diagnostics == []
    assert KotlinSyntaxKind.BINARY_EXPRESSION in _kinds(source)


def test_generic_call_versus_comparison() -> None:
    assert KotlinSyntaxKind.TYPE_ARGUMENT_LIST in _kinds("val xs = listOf<Int>()")
    assert KotlinSyntaxKind.TYPE_ARGUMENT_LIST not in _kinds("val lt = a < b")


def test_trailing_lambda_becomes_call_argument() -> None:
    kinds = _kinds("fun f() { run { compute() } }")

    assert KotlinSyntaxKind.LAMBDA_ARGUMENT in kinds
    assert KotlinSyntaxKind.CALL_EXPRESSION in kinds


def test_assignment_only_at_statement_level() -> None:
    parsed = parse("fun f() { a = 1 }")

    assert parsed.diagnostics == []
    assert KotlinSyntaxKind.BINARY_EXPRESSION in _kinds("fun f() { a = 1 }")


def test_parse_result_caches_syntax_root_and_tree() -> None:
    result = parse_result("val a = 1\n")

    assert result.green_root() is result.parsed.root
    assert result.diagnostics == []
    assert result.has_errors is False
    assert result.syntax_root() is result.syntax_root()
    assert result.lossless_tree() is result.lossless_tree()


def test_parse_result_matches_parse_contract() -> None:
    source = 'println("hi")\n'

    assert parse_result(source).diagnostics == parse(source).diagnostics
    strict = parse_result(source, mode=ParseMode.SOURCE)
    assert strict.has_errors is True
    assert strict.options.allow_top_level_statements is False


def test_forward_parent_opens_around_the_completed_node() -> None:
    kind = KotlinSyntaxKind
    events = [
        StartEvent(kind.FILE),
        StartEvent(kind.REFERENCE_EXPRESSION, forward_parent=3),
        TokenEvent(kind.IDENTIFIER, 1),
        FinishEvent(),
        StartEvent(kind.POSTFIX_EXPRESSION),
        FinishEvent(),
        FinishEvent(),
    ]

    parsed = LosslessTreeSink("x", Lexer("x").lex()).replay(events, [])

    postfix, _ = parsed.root.children
    assert isinstance(postfix, GreenNode)
    assert postfix.kind is kind.POSTFIX_EXPRESSION
    (reference,) = postfix.children
    assert isinstance(reference, GreenNode)
    assert reference.kind is kind.REFERENCE_EXPRESSION
    assert events[4] == StartEvent.tombstone()
    assert _green_text(parsed.root) == "x"
