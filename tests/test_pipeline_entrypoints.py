import pytest

from kotlinpy.format import FormatOptions
from kotlinpy.mapping import MapperOptions, UnsupportedConstructError, UnsupportedPolicy
from kotlinpy.parser import ParseMode, parse_result
from kotlinpy.pipeline import run_batch, run_desugar, run_format
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.tree import MethodSymbol, SymbolTable


def test_run_format_reuses_provided_parse_result() -> None:
    source = "val a=1\n"
    parsed = parse_result(source)

    result = run_format("ignored", parse=parsed)

    assert result.parse is parsed
    assert result.formatted_text == "val a = 1\n"
    assert result.changed is True
    assert result.tree is not None


def test_run_format_rejects_parse_with_mode_or_options() -> None:
    parsed = parse_result("val a = 1\n")

    with pytest.raises(ValueError, match="Pass either parse or options/mode, not both"):
        run_format("val a = 1\n", parse=parsed, mode=ParseMode.SOURCE)


def test_run_format_leaves_formatted_source_unchanged() -> None:
    source = "fun add(a: Int, b: Int): Int {\n    return a + b\n}\n"

    result = run_format(source)

    assert result.formatted_text == source
    assert result.changed is False
    assert result.diagnostics == []


def test_run_format_skips_files_with_syntax_errors() -> None:
    source = "val x = * 2\nfoo(a ,b)\n"

    result = run_format(source)

    assert result.parse.has_errors
    assert result.formatted_text == source
    assert result.changed is False
    assert result.tree is None
    codes = [d.code for d in result.diagnostics]
    assert "PARSER_EXPECTED_EXPRESSION" in codes
    assert codes[-1] == "FORMAT_FILE_SKIPPED"
    assert result.diagnostics[-1].message == "File was left unformatted: source has syntax errors"


def test_run_format_raises_on_unsupported_constructs_by_default() -> None:
    with pytest.raises(UnsupportedConstructError):
        run_format("typealias Name = String\n")


def test_run_format_can_skip_unsupported_files() -> None:
    source = "typealias Name = String\nfoo(a ,b)\n"
    options = FormatOptions(mapper=MapperOptions(unsupported=UnsupportedPolicy.SKIP_FILE))

    result = run_format(source, format_options=options)

    assert result.formatted_text == source
    assert [d.code for d in result.diagnostics] == ["MAPPER_UNSUPPORTED_CONSTRUCT", "FORMAT_FILE_SKIPPED"]


def test_run_format_can_skip_unsupported_declarations() -> None:
    source = "typealias Name = String\nfoo(a ,b)\n"
    options = FormatOptions(mapper=MapperOptions(unsupported=UnsupportedPolicy.SKIP_DECLARATION))

    result = run_format(source, format_options=options)

    assert result.formatted_text == "typealias Name = String\nfoo(a, b)\n"
    assert [d.code for d in result.diagnostics] == ["MAPPER_UNSUPPORTED_CONSTRUCT"]


def test_run_format_optional_passes() -> None:
    source = "val a = 1;\nval b=2;\n"

    kept = run_format(source)
    removed = run_format(source, format_options=FormatOptions(remove_trailing_semicolons=True))

    assert kept.formatted_text == "val a = 1;\nval b = 2;\n"
    assert removed.formatted_text == "val a = 1\nval b = 2\n"


def test_run_format_stop_after_limits_every_pass() -> None:
    source = "foo(a ,b)\nfoo(c ,d)\n"
    parsed = parse_result(source)
    first = parsed.lossless_tree().statements[0].element

    result = run_format(source, parse=parsed, format_options=FormatOptions(stop_after=first.id))

    assert result.formatted_text == "foo(a, b)\nfoo(c ,d)\n"


def test_run_desugar_through_pipeline() -> None:
    source = "val c = a + b\n"
    parsed = parse_result(source)
    binary = next(
        node for node in parsed.syntax_root().descendants() if node.kind == KotlinSyntaxKind.BINARY_EXPRESSION
    )
    symbols = SymbolTable().with_method(binary.range, MethodSymbol("plus"))

    result = run_desugar("ignored", parse=parsed, symbols=symbols)

    assert result.parse is parsed
    assert result.printed_text == "val c = a.plus(b)\n"
    assert result.changed is True


def test_run_batch_isolates_failing_files() -> None:
    sources = {
        "Broken.kt": "val x = \n",
        "Alias.kt": "typealias Name = String\n",
        "Good.kt": "val a=1\n",
    }

    result = run_batch(sources)

    assert list(result.files) == ["Broken.kt", "Alias.kt", "Good.kt"]
    assert result.files["Broken.kt"].skipped
    assert result.files["Alias.kt"].skipped
    assert result.files["Alias.kt"].result.formatted_text == sources["Alias.kt"]

    good = result.files["Good.kt"]
    assert not good.skipped
    assert good.result.formatted_text == "val a = 1\n"
    assert good.result.tree is not None
    assert good.result.tree.source_path == "Good.kt"

    assert result.has_errors is True
    assert len(result.diagnostics) == sum(len(item.diagnostics) for item in result.files.values())


def test_run_batch_with_abort_policy_propagates() -> None:
    with pytest.raises(UnsupportedConstructError):
        run_batch({"Alias.kt": "typealias Name = String\n"}, format_options=FormatOptions())


def test_run_batch_tags_diagnostics_with_their_file() -> None:
    result = run_batch({"Broken.kt": "val x = \n", "Good.kt": "val a = 1\n"})

    assert result.diagnostics
    assert {d.path for d in result.diagnostics} == {"Broken.kt"}
    assert all(d.path == "Broken.kt" for d in result.files["Broken.kt"].diagnostics)
    assert result.files["Good.kt"].diagnostics == []
