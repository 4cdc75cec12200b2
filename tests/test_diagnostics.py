from kotlinpy.diagnostics import PARSER_EXPECTED_EXPRESSION, Diagnostic, diagnostic_from_spec, has_errors
from kotlinpy.parser import parse_result
from kotlinpy.text import TextRange


def test_render_points_at_line_and_column() -> None:
    source = "val a = 1\nval b = \n"
    diagnostic = Diagnostic(
        code="PARSER_EXPECTED_EXPRESSION",
        message="Expected an expression",
        range=TextRange(18, 19),
        hint="Add a value after `=`",
    )

    assert diagnostic.location(source) == (2, 9)
    assert diagnostic.render(source) == (
        "2:9: error[PARSER_EXPECTED_EXPRESSION]: Expected an expression\n  hint: Add a value after `=`"
    )
    assert diagnostic.with_path("Main.kt").render(source).startswith("Main.kt:2:9: error[")


def test_with_path_keeps_everything_else() -> None:
    diagnostic = diagnostic_from_spec(PARSER_EXPECTED_EXPRESSION, TextRange.empty(0))
    tagged = diagnostic.with_path("src/A.kt")

    assert tagged.path == "src/A.kt"
    assert diagnostic.path is None
    assert (tagged.code, tagged.message, tagged.range) == (diagnostic.code, diagnostic.message, diagnostic.range)


def test_parser_diagnostics_render_against_their_source() -> None:
    source = "val x = \n"
    diagnostics = parse_result(source).diagnostics

    assert has_errors(diagnostics)
    line, column = diagnostics[0].location(source)
    assert line in (1, 2)
    assert column >= 1
