"""Kotlin grammar routines that emit CST events."""

from enum import IntEnum, StrEnum

from kotlinpy.diagnostics import (
    PARSER_EXPECTED_DECLARATION_NAME,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_STATEMENT_SEPARATOR,
    PARSER_EXPECTED_TOKEN,
    PARSER_TOP_LEVEL_STATEMENT,
    PARSER_UNEXPECTED_TOKEN,
    Diagnostic,
    diagnostic_from_spec,
)
from kotlinpy.lexer import TokenKind
from kotlinpy.parser.marker import CompletedMarker
from kotlinpy.parser.parse_lists import ParseNodeList, ParseSeparatedList
from kotlinpy.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from kotlinpy.parser.parsed_syntax import ParsedSyntax
from kotlinpy.parser.parser import Parser
from kotlinpy.syntax import KotlinSyntaxKind

MODIFIER_KEYWORDS: frozenset[str] = frozenset(
    {
        "public",
        "private",
        "protected",
        "internal",
        "abstract",
        "final",
        "open",
        "override",
        "sealed",
        "data",
        "enum",
        "inner",
        "annotation",
        "companion",
        "const",
        "lateinit",
        "inline",
        "infix",
        "operator",
        "suspend",
        "tailrec",
        "external",
        "vararg",
        "noinline",
        "crossinline",
        "reified",
        "value",
        "expect",
        "actual",
    }
)

DECLARATION_KEYWORDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.CLASS_KEYWORD,
        TokenKind.INTERFACE_KEYWORD,
        TokenKind.FUN_KEYWORD,
        TokenKind.VAL_KEYWORD,
        TokenKind.VAR_KEYWORD,
        TokenKind.OBJECT_KEYWORD,
        TokenKind.TYPEALIAS_KEYWORD,
    }
)

ASSIGNMENT_OPERATORS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.EQ,
        TokenKind.PLUSEQ,
        TokenKind.MINUSEQ,
        TokenKind.MULTEQ,
        TokenKind.DIVEQ,
        TokenKind.PERCEQ,
    }
)

PREFIX_OPERATORS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.MINUS,
        TokenKind.PLUS,
        TokenKind.EXCL,
        TokenKind.PLUSPLUS,
        TokenKind.MINUSMINUS,
    }
)

POSTFIX_OPERATORS: frozenset[TokenKind] = frozenset(
    {TokenKind.PLUSPLUS, TokenKind.MINUSMINUS, TokenKind.EXCLEXCL}
)

LITERAL_KINDS: dict[TokenKind, KotlinSyntaxKind] = {
    TokenKind.INTEGER_LITERAL: KotlinSyntaxKind.INTEGER_CONSTANT,
    TokenKind.FLOAT_LITERAL: KotlinSyntaxKind.FLOAT_CONSTANT,
    TokenKind.CHARACTER_LITERAL: KotlinSyntaxKind.CHARACTER_CONSTANT,
    TokenKind.STRING_LITERAL: KotlinSyntaxKind.STRING_TEMPLATE,
    TokenKind.TRUE_KEYWORD: KotlinSyntaxKind.BOOLEAN_CONSTANT,
    TokenKind.FALSE_KEYWORD: KotlinSyntaxKind.BOOLEAN_CONSTANT,
    TokenKind.NULL_KEYWORD: KotlinSyntaxKind.NULL,
}

EXPRESSION_START: frozenset[TokenKind] = frozenset(
    {
        *LITERAL_KINDS,
        *PREFIX_OPERATORS,
        TokenKind.IDENTIFIER,
        TokenKind.THIS_KEYWORD,
        TokenKind.SUPER_KEYWORD,
        TokenKind.LPAR,
        TokenKind.LBRACE,
        TokenKind.IF_KEYWORD,
        TokenKind.WHEN_KEYWORD,
        TokenKind.TRY_KEYWORD,
        TokenKind.OBJECT_KEYWORD,
        TokenKind.RETURN_KEYWORD,
        TokenKind.THROW_KEYWORD,
        TokenKind.BREAK_KEYWORD,
        TokenKind.CONTINUE_KEYWORD,
        TokenKind.COLONCOLON,
    }
)

DECLARATION_NODE_KINDS: frozenset[KotlinSyntaxKind] = frozenset(
    {
        KotlinSyntaxKind.CLASS,
        KotlinSyntaxKind.OBJECT_DECLARATION,
        KotlinSyntaxKind.FUN,
        KotlinSyntaxKind.PROPERTY,
        KotlinSyntaxKind.DESTRUCTURING_DECLARATION,
        KotlinSyntaxKind.TYPEALIAS,
        KotlinSyntaxKind.CLASS_INITIALIZER,
        KotlinSyntaxKind.SECONDARY_CONSTRUCTOR,
    }
)


class StatementContext(StrEnum):
    TOP_LEVEL = "top_level"
    CLASS_BODY = "class_body"
    BLOCK = "block"


class Precedence(IntEnum):
    """Binary operator binding strength, lowest first."""

    DISJUNCTION = 1
    CONJUNCTION = 2
    EQUALITY = 3
    COMPARISON = 4
    NAMED_CHECKS = 5
    ELVIS = 6
    INFIX = 7
    RANGE = 8
    ADDITIVE = 9
    MULTIPLICATIVE = 10
    AS = 11


BINARY_PRECEDENCE: dict[TokenKind, Precedence] = {
    TokenKind.OROR: Precedence.DISJUNCTION,
    TokenKind.ANDAND: Precedence.CONJUNCTION,
    TokenKind.EQEQ: Precedence.EQUALITY,
    TokenKind.EXCLEQ: Precedence.EQUALITY,
    TokenKind.EQEQEQ: Precedence.EQUALITY,
    TokenKind.EXCLEQEQEQ: Precedence.EQUALITY,
    TokenKind.LT: Precedence.COMPARISON,
    TokenKind.GT: Precedence.COMPARISON,
    TokenKind.LTEQ: Precedence.COMPARISON,
    TokenKind.GTEQ: Precedence.COMPARISON,
    TokenKind.IN_KEYWORD: Precedence.NAMED_CHECKS,
    TokenKind.NOT_IN: Precedence.NAMED_CHECKS,
    TokenKind.IS_KEYWORD: Precedence.NAMED_CHECKS,
    TokenKind.NOT_IS: Precedence.NAMED_CHECKS,
    TokenKind.ELVIS: Precedence.ELVIS,
    TokenKind.IDENTIFIER: Precedence.INFIX,
    TokenKind.RANGE: Precedence.RANGE,
    TokenKind.RANGE_UNTIL: Precedence.RANGE,
    TokenKind.PLUS: Precedence.ADDITIVE,
    TokenKind.MINUS: Precedence.ADDITIVE,
    TokenKind.MUL: Precedence.MULTIPLICATIVE,
    TokenKind.DIV: Precedence.MULTIPLICATIVE,
    TokenKind.PERC: Precedence.MULTIPLICATIVE,
    TokenKind.AS_KEYWORD: Precedence.AS,
    TokenKind.AS_SAFE: Precedence.AS,
}

# Operators that may start a continuation line.
NEWLINE_TOLERANT_OPERATORS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.OROR,
        TokenKind.ANDAND,
        TokenKind.ELVIS,
        TokenKind.AS_KEYWORD,
        TokenKind.AS_SAFE,
    }
)


def parse_kotlin_file(parser: Parser) -> None:
    root = parser.start()
    if parser.at(TokenKind.PACKAGE_KEYWORD):
        _parse_package_directive(parser)
        parser.eat(TokenKind.SEMICOLON)
    if parser.at(TokenKind.IMPORT_KEYWORD):
        _parse_import_list(parser)
    parse_statement_list(
        parser,
        stop_at=frozenset({TokenKind.EOF}),
        context=StatementContext.TOP_LEVEL,
    )
    root.complete(parser, KotlinSyntaxKind.FILE)


def _parse_package_directive(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _parse_qualified_name(parser)
    return marker.complete(parser, KotlinSyntaxKind.PACKAGE_DIRECTIVE)


def _parse_import_list(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    while parser.at(TokenKind.IMPORT_KEYWORD):
        directive = parser.start()
        parser.bump()
        _parse_qualified_name(parser)
        if parser.at(TokenKind.DOT) and parser.nth_at(1, TokenKind.MUL):
            parser.bump()
            parser.bump()
        elif parser.at(TokenKind.AS_KEYWORD):
            alias = parser.start()
            parser.bump()
            _expect_name(parser)
            alias.complete(parser, KotlinSyntaxKind.IMPORT_ALIAS)
        directive.complete(parser, KotlinSyntaxKind.IMPORT_DIRECTIVE)
        parser.eat(TokenKind.SEMICOLON)
    return marker.complete(parser, KotlinSyntaxKind.IMPORT_LIST)


def _parse_qualified_name(parser: Parser) -> CompletedMarker | None:
    name = _parse_reference(parser)
    if name is None:
        parser.error(_expected_name(parser))
        return None

    while (
        parser.at(TokenKind.DOT)
        and parser.nth_at(1, TokenKind.IDENTIFIER)
        and not parser.has_nth_preceding_line_break(0)
    ):
        marker = name.precede(parser)
        parser.bump()
        _parse_reference(parser)
        name = marker.complete(parser, KotlinSyntaxKind.DOT_QUALIFIED_EXPRESSION)
    return name


# ---------------------------------------------------------------------------
# Statement lists
# ---------------------------------------------------------------------------


def parse_statement_list(
    parser: Parser,
    stop_at: frozenset[TokenKind],
    *,
    context: StatementContext,
    wrap_kind: KotlinSyntaxKind | None = None,
) -> CompletedMarker | None:
    """Parse statements up to (not including) a token in `stop_at`.

    With `wrap_kind` the statements are wrapped in a node of that kind, which
    is dropped again when the list is empty.
    """
    needs_separator = False

    recovery = ParseRecoveryTokenSet(
        node_kind=KotlinSyntaxKind.ERROR,
        recovery_set=frozenset({*stop_at, TokenKind.SEMICOLON}),
    ).enable_recovery_on_line_break()

    def parse_element(current: Parser) -> ParsedSyntax:
        nonlocal needs_separator

        if current.at(TokenKind.SEMICOLON):
            current.bump()
            needs_separator = False
            return ParsedSyntax.present()

        if (
            needs_separator
            and context == StatementContext.BLOCK
            and not current.has_preceding_line_break
        ):
            current.error(
                diagnostic_from_spec(PARSER_EXPECTED_STATEMENT_SEPARATOR, current.current_range)
            )

        if context == StatementContext.CLASS_BODY:
            parsed = _parse_member(current)
        else:
            parsed = parse_statement(current, context=context)

        if parsed.is_present():
            needs_separator = True
            marker = parsed.marker
            if (
                context == StatementContext.TOP_LEVEL
                and marker is not None
                and marker.kind not in DECLARATION_NODE_KINDS
                and not current.options.allow_top_level_statements
            ):
                current.error(
                    diagnostic_from_spec(PARSER_TOP_LEVEL_STATEMENT, marker.range(current))
                )
        return parsed

    def recover_element(current: Parser, parsed: ParsedSyntax) -> bool:
        if parsed.is_present():
            return True

        current.error(_unexpected_token(current))
        _, recovery_error = recovery.recover(current)
        if recovery_error == RecoveryError.ALREADY_RECOVERED:
            # Sitting on a recovery token that no statement can start with.
            error = current.start()
            current.bump_any()
            error.complete(current, KotlinSyntaxKind.ERROR)
            return True
        return recovery_error is None

    node_list = ParseNodeList(
        list_kind=wrap_kind if wrap_kind is not None else KotlinSyntaxKind.BLOCK,
        is_at_list_end=lambda current: current.at_set(stop_at),
        parse_element=parse_element,
        recover=recover_element,
    )
    if wrap_kind is None:
        node_list.parse_elements(parser)
        return None
    return node_list.parse_list(parser, allow_empty=False)


def parse_statement(
    parser: Parser,
    *,
    context: StatementContext = StatementContext.BLOCK,
) -> ParsedSyntax:
    if _at_declaration_start(parser, context):
        return _parse_declaration(parser, context)

    match parser.current:
        case TokenKind.FOR_KEYWORD:
            return ParsedSyntax.present(_parse_for(parser))
        case TokenKind.WHILE_KEYWORD:
            return ParsedSyntax.present(_parse_while(parser))
        case TokenKind.DO_KEYWORD:
            return ParsedSyntax.present(_parse_do_while(parser))

    return _parse_expression_statement(parser)


def _parse_expression_statement(parser: Parser) -> ParsedSyntax:
    expression = parse_expression(parser)
    if expression is None:
        return ParsedSyntax.absent()

    if parser.at_set(ASSIGNMENT_OPERATORS) and not parser.has_preceding_line_break:
        marker = expression.precede(parser)
        _parse_operation_reference(parser)
        _expect_expression(parser)
        return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.BINARY_EXPRESSION))

    return ParsedSyntax.present(expression)


def _parse_member(parser: Parser) -> ParsedSyntax:
    if _at_declaration_start(parser, StatementContext.CLASS_BODY):
        return _parse_declaration(parser, StatementContext.CLASS_BODY)
    return ParsedSyntax.absent()


def _parse_control_structure_body(parser: Parser) -> bool:
    if parser.at(TokenKind.LBRACE):
        _parse_block(parser)
        return True

    match parser.current:
        case TokenKind.FOR_KEYWORD:
            _parse_for(parser)
            return True
        case TokenKind.WHILE_KEYWORD:
            _parse_while(parser)
            return True
        case TokenKind.DO_KEYWORD:
            _parse_do_while(parser)
            return True

    if _parse_expression_statement(parser).is_present():
        return True

    parser.error(_expected_expression(parser))
    return False


def _parse_block(parser: Parser) -> CompletedMarker | None:
    if not parser.at(TokenKind.LBRACE):
        parser.expect(TokenKind.LBRACE)
        return None

    marker = parser.start()
    parser.bump()
    parse_statement_list(
        parser,
        stop_at=frozenset({TokenKind.RBRACE, TokenKind.EOF}),
        context=StatementContext.BLOCK,
    )
    parser.expect(TokenKind.RBRACE)
    return marker.complete(parser, KotlinSyntaxKind.BLOCK)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


def _at_declaration_start(parser: Parser, context: StatementContext) -> bool:
    match parser.current:
        case TokenKind.AT:
            return True
        case (
            TokenKind.CLASS_KEYWORD
            | TokenKind.INTERFACE_KEYWORD
            | TokenKind.TYPEALIAS_KEYWORD
            | TokenKind.VAL_KEYWORD
            | TokenKind.VAR_KEYWORD
        ):
            return True
        case TokenKind.FUN_KEYWORD:
            return not parser.nth_at(1, TokenKind.LPAR)
        case TokenKind.OBJECT_KEYWORD:
            return parser.nth_at(1, TokenKind.IDENTIFIER)
        case TokenKind.IDENTIFIER:
            if _at_modifier(parser):
                return True
            if context == StatementContext.CLASS_BODY:
                return (parser.at_soft_keyword("init") and parser.nth_at(1, TokenKind.LBRACE)) or (
                    parser.at_soft_keyword("constructor") and parser.nth_at(1, TokenKind.LPAR)
                )
    return False


def _at_modifier(parser: Parser, *, in_parameter: bool = False, variance: bool = False) -> bool:
    if parser.at(TokenKind.AT):
        return True
    if variance and parser.at(TokenKind.IN_KEYWORD):
        return parser.nth_at(1, TokenKind.IDENTIFIER) or parser.nth_at(1, TokenKind.AT)
    if not parser.at(TokenKind.IDENTIFIER):
        return False

    text = parser.current_text
    if variance and text == "out":
        return parser.nth_at(1, TokenKind.IDENTIFIER) or parser.nth_at(1, TokenKind.AT)
    if text not in MODIFIER_KEYWORDS:
        return False

    follower = parser.nth(1)
    if follower in DECLARATION_KEYWORDS or follower == TokenKind.AT:
        return True
    if follower == TokenKind.IDENTIFIER:
        return (
            in_parameter
            or parser.nth_text(1) in MODIFIER_KEYWORDS
            or parser.nth_text(1) in ("constructor", "get", "set")
        )
    return False


def parse_modifier_list(
    parser: Parser,
    *,
    in_parameter: bool = False,
    variance: bool = False,
    words: list[str] | None = None,
) -> CompletedMarker | None:
    if not _at_modifier(parser, in_parameter=in_parameter, variance=variance):
        return None

    marker = parser.start()
    while True:
        if parser.at(TokenKind.AT):
            _parse_annotation(parser)
        elif _at_modifier(parser, in_parameter=in_parameter, variance=variance):
            if words is not None:
                words.append(parser.current_text)
            parser.bump()
        else:
            break
    return marker.complete(parser, KotlinSyntaxKind.MODIFIER_LIST)


def _parse_annotation(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if parser.at(TokenKind.IDENTIFIER):
        _parse_user_type(parser)
    else:
        parser.error(_expected_name(parser))
    if parser.at(TokenKind.LPAR) and not parser.has_preceding_trivia:
        _parse_value_argument_list(parser)
    return marker.complete(parser, KotlinSyntaxKind.ANNOTATION_ENTRY)


def _parse_declaration(parser: Parser, context: StatementContext) -> ParsedSyntax:
    marker = parser.start()
    words: list[str] = []
    parse_modifier_list(parser, words=words)

    match parser.current:
        case TokenKind.CLASS_KEYWORD | TokenKind.INTERFACE_KEYWORD:
            _parse_class_rest(parser, is_enum="enum" in words)
            kind = KotlinSyntaxKind.CLASS
        case TokenKind.OBJECT_KEYWORD:
            _parse_object_rest(parser)
            kind = KotlinSyntaxKind.OBJECT_DECLARATION
        case TokenKind.FUN_KEYWORD:
            _parse_function_rest(parser)
            kind = KotlinSyntaxKind.FUN
        case TokenKind.VAL_KEYWORD | TokenKind.VAR_KEYWORD:
            if parser.nth_at(1, TokenKind.LPAR):
                _parse_destructuring_rest(parser)
                kind = KotlinSyntaxKind.DESTRUCTURING_DECLARATION
            else:
                _parse_property_rest(parser, allow_accessors=context != StatementContext.BLOCK)
                kind = KotlinSyntaxKind.PROPERTY
        case TokenKind.TYPEALIAS_KEYWORD:
            _parse_typealias_rest(parser)
            kind = KotlinSyntaxKind.TYPEALIAS
        case TokenKind.IDENTIFIER if parser.at_soft_keyword("init"):
            parser.bump()
            _parse_block(parser)
            kind = KotlinSyntaxKind.CLASS_INITIALIZER
        case TokenKind.IDENTIFIER if parser.at_soft_keyword("constructor"):
            _parse_secondary_constructor_rest(parser)
            kind = KotlinSyntaxKind.SECONDARY_CONSTRUCTOR
        case _:
            parser.error(
                diagnostic_from_spec(
                    PARSER_UNEXPECTED_TOKEN,
                    parser.current_range,
                    message="Expected a declaration after modifiers",
                )
            )
            kind = KotlinSyntaxKind.ERROR

    return ParsedSyntax.present(marker.complete(parser, kind))


def _parse_class_rest(parser: Parser, *, is_enum: bool) -> None:
    parser.bump()
    _expect_name(parser)
    if parser.at(TokenKind.LT):
        _parse_type_parameter_list(parser)
    if parser.at(TokenKind.LPAR) or parser.at_soft_keyword("constructor") or (
        _at_modifier(parser) and not parser.has_preceding_line_break
    ):
        _parse_primary_constructor(parser)
    if parser.at(TokenKind.COLON):
        parser.bump()
        _parse_super_type_list(parser)
    if parser.at(TokenKind.LBRACE):
        _parse_class_body(parser, is_enum=is_enum)


def _parse_object_rest(parser: Parser) -> None:
    parser.bump()
    if parser.at(TokenKind.IDENTIFIER):
        _expect_name(parser)
    if parser.at(TokenKind.COLON):
        parser.bump()
        _parse_super_type_list(parser)
    if parser.at(TokenKind.LBRACE):
        _parse_class_body(parser, is_enum=False)


def _parse_primary_constructor(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parse_modifier_list(parser)
    if parser.at_soft_keyword("constructor"):
        parser.bump()
    _parse_value_parameter_list(parser)
    return marker.complete(parser, KotlinSyntaxKind.PRIMARY_CONSTRUCTOR)


def _parse_super_type_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=KotlinSyntaxKind.SUPER_TYPE_LIST,
        parse_element=_parse_super_type_entry,
    ).parse_list(parser)


def _parse_super_type_entry(parser: Parser) -> ParsedSyntax:
    if not parser.at(TokenKind.IDENTIFIER) and not parser.at(TokenKind.LPAR):
        parser.error(_expected_type(parser))
        return ParsedSyntax.absent()

    marker = parser.start()
    parse_type(parser)
    if parser.at(TokenKind.LPAR) and not parser.has_preceding_line_break:
        _parse_value_argument_list(parser)
        return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.SUPER_TYPE_CALL_ENTRY))
    return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.SUPER_TYPE_ENTRY))


def _parse_class_body(parser: Parser, *, is_enum: bool) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if is_enum:
        _parse_enum_entries(parser)
    parse_statement_list(
        parser,
        stop_at=frozenset({TokenKind.RBRACE, TokenKind.EOF}),
        context=StatementContext.CLASS_BODY,
    )
    parser.expect(TokenKind.RBRACE)
    return marker.complete(parser, KotlinSyntaxKind.CLASS_BODY)


def _parse_enum_entries(parser: Parser) -> None:
    while parser.at(TokenKind.IDENTIFIER) and not _at_declaration_start(
        parser, StatementContext.CLASS_BODY
    ):
        entry = parser.start()
        parser.bump()
        if parser.at(TokenKind.LPAR):
            _parse_value_argument_list(parser)
        if parser.at(TokenKind.LBRACE):
            _parse_class_body(parser, is_enum=False)
        entry.complete(parser, KotlinSyntaxKind.ENUM_ENTRY)
        if not parser.eat(TokenKind.COMMA):
            break
    parser.eat(TokenKind.SEMICOLON)


def _parse_function_rest(parser: Parser) -> None:
    parser.bump()
    if parser.at(TokenKind.LT):
        _parse_type_parameter_list(parser)
    if _has_receiver(parser):
        parse_type(parser, receiver=True)
        parser.bump()
    _expect_name(parser)
    _parse_value_parameter_list(parser)
    if parser.at(TokenKind.COLON):
        parser.bump()
        parse_type(parser)
    _parse_function_body(parser)


def _parse_function_body(parser: Parser) -> None:
    if parser.at(TokenKind.LBRACE):
        _parse_block(parser)
    elif parser.at(TokenKind.EQ):
        parser.bump()
        _expect_expression(parser)


def _has_receiver(parser: Parser) -> bool:
    """True when a `.` (or `?.`) appears before the parameter list of a function."""
    depth = 0
    n = 0
    while True:
        kind = parser.nth(n)
        if kind in (TokenKind.EOF, TokenKind.LBRACE, TokenKind.EQ, TokenKind.SEMICOLON):
            return False
        if n > 0 and parser.has_nth_preceding_line_break(n):
            return False
        if kind == TokenKind.LPAR and depth == 0 and n > 0:
            return False
        if kind in (TokenKind.LT, TokenKind.LPAR):
            depth += 1
        elif kind in (TokenKind.GT, TokenKind.RPAR):
            depth -= 1
        elif kind in (TokenKind.DOT, TokenKind.SAFE_ACCESS) and depth == 0:
            return True
        n += 1


def _parse_property_rest(parser: Parser, *, allow_accessors: bool) -> None:
    parser.bump()
    if parser.at(TokenKind.LT):
        _parse_type_parameter_list(parser)
    _expect_name(parser)
    if parser.at(TokenKind.COLON):
        parser.bump()
        parse_type(parser)

    if parser.at(TokenKind.EQ):
        parser.bump()
        _expect_expression(parser)
    elif parser.at_soft_keyword("by"):
        delegate = parser.start()
        parser.bump()
        _expect_expression(parser)
        delegate.complete(parser, KotlinSyntaxKind.PROPERTY_DELEGATE)

    if allow_accessors:
        while _at_property_accessor(parser):
            _parse_property_accessor(parser)


def _at_property_accessor(parser: Parser) -> bool:
    if _at_modifier(parser) and parser.nth_text(1) in ("get", "set"):
        return True
    return (parser.at_soft_keyword("get") or parser.at_soft_keyword("set")) and parser.nth_at(
        1, TokenKind.LPAR
    )


def _parse_property_accessor(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parse_modifier_list(parser)
    parser.bump()
    if parser.at(TokenKind.LPAR):
        _parse_value_parameter_list(parser)
        if parser.at(TokenKind.COLON):
            parser.bump()
            parse_type(parser)
        _parse_function_body(parser)
    return marker.complete(parser, KotlinSyntaxKind.PROPERTY_ACCESSOR)


def _parse_destructuring_rest(parser: Parser) -> None:
    parser.bump()
    _parse_destructuring_entries(parser)
    if parser.expect(TokenKind.EQ).is_present():
        _expect_expression(parser)


def _parse_destructuring_entries(parser: Parser) -> None:
    parser.bump()
    while parser.at(TokenKind.IDENTIFIER):
        entry = parser.start()
        parser.bump()
        if parser.at(TokenKind.COLON):
            parser.bump()
            parse_type(parser)
        entry.complete(parser, KotlinSyntaxKind.DESTRUCTURING_DECLARATION_ENTRY)
        if not parser.eat(TokenKind.COMMA):
            break
    parser.expect(TokenKind.RPAR)


def _parse_typealias_rest(parser: Parser) -> None:
    parser.bump()
    _expect_name(parser)
    if parser.at(TokenKind.LT):
        _parse_type_parameter_list(parser)
    if parser.expect(TokenKind.EQ).is_present():
        parse_type(parser)


def _parse_secondary_constructor_rest(parser: Parser) -> None:
    parser.bump()
    _parse_value_parameter_list(parser)
    if parser.at(TokenKind.COLON):
        parser.bump()
        if parser.at(TokenKind.THIS_KEYWORD) or parser.at(TokenKind.SUPER_KEYWORD):
            parser.bump()
            _parse_value_argument_list(parser)
        else:
            parser.error(_expected_token(parser, "this` or `super"))
    if parser.at(TokenKind.LBRACE):
        _parse_block(parser)


def _parse_value_parameter_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=KotlinSyntaxKind.VALUE_PARAMETER_LIST,
        parse_element=_parse_value_parameter,
        open_token=TokenKind.LPAR,
        close_token=TokenKind.RPAR,
    ).parse_list(parser)


def _parse_value_parameter(parser: Parser) -> ParsedSyntax:
    if not (
        parser.at(TokenKind.IDENTIFIER)
        or parser.at(TokenKind.VAL_KEYWORD)
        or parser.at(TokenKind.VAR_KEYWORD)
        or parser.at(TokenKind.AT)
    ):
        return ParsedSyntax.absent()

    marker = parser.start()
    parse_modifier_list(parser, in_parameter=True)
    if parser.at(TokenKind.VAL_KEYWORD) or parser.at(TokenKind.VAR_KEYWORD):
        parser.bump()
    _expect_name(parser)
    if parser.at(TokenKind.COLON):
        parser.bump()
        parse_type(parser)
    if parser.at(TokenKind.EQ):
        parser.bump()
        _expect_expression(parser)
    return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.VALUE_PARAMETER))


def _parse_type_parameter_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=KotlinSyntaxKind.TYPE_PARAMETER_LIST,
        parse_element=_parse_type_parameter,
        open_token=TokenKind.LT,
        close_token=TokenKind.GT,
    ).parse_list(parser)


def _parse_type_parameter(parser: Parser) -> ParsedSyntax:
    if not (
        parser.at(TokenKind.IDENTIFIER) or parser.at(TokenKind.IN_KEYWORD) or parser.at(TokenKind.AT)
    ):
        return ParsedSyntax.absent()

    marker = parser.start()
    parse_modifier_list(parser, in_parameter=True, variance=True)
    _expect_name(parser)
    if parser.at(TokenKind.COLON):
        parser.bump()
        parse_type(parser)
    return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.TYPE_PARAMETER))


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def parse_type(parser: Parser, *, receiver: bool = False) -> CompletedMarker | None:
    if parser.at(TokenKind.LPAR):
        type_marker = _parse_function_type(parser)
    elif parser.at(TokenKind.IDENTIFIER):
        type_marker = _parse_user_type(parser, receiver=receiver)
    else:
        parser.error(_expected_type(parser))
        return None

    while parser.at(TokenKind.QUEST) and not parser.has_preceding_line_break:
        marker = type_marker.precede(parser)
        parser.bump()
        type_marker = marker.complete(parser, KotlinSyntaxKind.NULLABLE_TYPE)
    return type_marker


def _parse_user_type(parser: Parser, *, receiver: bool = False) -> CompletedMarker:
    marker = parser.start()
    _parse_reference(parser)
    if parser.at(TokenKind.LT):
        _parse_type_argument_list(parser)
    user_type = marker.complete(parser, KotlinSyntaxKind.USER_TYPE)

    while parser.at(TokenKind.DOT) and parser.nth_at(1, TokenKind.IDENTIFIER):
        # `fun Foo.bar()`: the last segment before `(` is the function name.
        if receiver and parser.nth_at(2, TokenKind.LPAR):
            break
        qualified = user_type.precede(parser)
        parser.bump()
        _parse_reference(parser)
        if parser.at(TokenKind.LT):
            _parse_type_argument_list(parser)
        user_type = qualified.complete(parser, KotlinSyntaxKind.USER_TYPE)
    return user_type


def _parse_function_type(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parameters = parser.start()
    parser.bump()
    while not parser.at(TokenKind.RPAR) and not parser.at(TokenKind.EOF):
        parameter = parser.start()
        if parser.at(TokenKind.IDENTIFIER) and parser.nth_at(1, TokenKind.COLON):
            parser.bump()
            parser.bump()
        if parse_type(parser) is None:
            parameter.abandon(parser)
            break
        parameter.complete(parser, KotlinSyntaxKind.VALUE_PARAMETER)
        if not parser.eat(TokenKind.COMMA):
            break
    parser.expect(TokenKind.RPAR)
    parameters.complete(parser, KotlinSyntaxKind.VALUE_PARAMETER_LIST)
    if parser.expect(TokenKind.ARROW).is_present():
        parse_type(parser)
    return marker.complete(parser, KotlinSyntaxKind.FUNCTION_TYPE)


def _parse_type_argument_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=KotlinSyntaxKind.TYPE_ARGUMENT_LIST,
        parse_element=_parse_type_projection,
        open_token=TokenKind.LT,
        close_token=TokenKind.GT,
    ).parse_list(parser)


def _parse_type_projection(parser: Parser) -> ParsedSyntax:
    marker = parser.start()
    if parser.at(TokenKind.MUL):
        parser.bump()
        return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.TYPE_PROJECTION))

    parse_modifier_list(parser, variance=True)
    if parse_type(parser) is None:
        marker.abandon(parser)
        return ParsedSyntax.absent()
    return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.TYPE_PROJECTION))


def _looks_like_type_arguments(parser: Parser) -> bool:
    """Speculatively parse `<...>` and accept it when a call suffix follows."""
    checkpoint = parser.checkpoint()
    with parser.speculative_parsing():
        _parse_type_argument_list(parser)
        accepted = len(parser.diagnostics) == checkpoint.diagnostics_len and (
            parser.at(TokenKind.LPAR)
            or (parser.at(TokenKind.LBRACE) and not parser.has_preceding_line_break)
        )
    parser.rewind(checkpoint)
    return accepted


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def parse_expression(parser: Parser) -> CompletedMarker | None:
    return _parse_binary_expression(parser, Precedence.DISJUNCTION)


def _expect_expression(parser: Parser) -> CompletedMarker | None:
    expression = parse_expression(parser)
    if expression is None:
        parser.error(_expected_expression(parser))
    return expression


def _binary_precedence(parser: Parser) -> Precedence | None:
    kind = parser.current
    precedence = BINARY_PRECEDENCE.get(kind)
    if precedence is None:
        return None
    if parser.has_preceding_line_break and kind not in NEWLINE_TOLERANT_OPERATORS:
        return None
    return precedence


def _parse_binary_expression(parser: Parser, min_precedence: Precedence) -> CompletedMarker | None:
    lhs = _parse_prefix_expression(parser)
    if lhs is None:
        return None

    while True:
        precedence = _binary_precedence(parser)
        if precedence is None or precedence < min_precedence:
            break

        marker = lhs.precede(parser)
        kind = parser.current
        _parse_operation_reference(parser)

        if kind in (TokenKind.IS_KEYWORD, TokenKind.NOT_IS):
            parse_type(parser)
            lhs = marker.complete(parser, KotlinSyntaxKind.IS_EXPRESSION)
        elif kind in (TokenKind.AS_KEYWORD, TokenKind.AS_SAFE):
            parse_type(parser)
            lhs = marker.complete(parser, KotlinSyntaxKind.BINARY_WITH_TYPE)
        else:
            if _parse_binary_expression(parser, Precedence(precedence + 1)) is None:
                parser.error(_expected_expression(parser))
            lhs = marker.complete(parser, KotlinSyntaxKind.BINARY_EXPRESSION)

    return lhs


def _parse_prefix_expression(parser: Parser) -> CompletedMarker | None:
    if parser.at_set(PREFIX_OPERATORS):
        marker = parser.start()
        _parse_operation_reference(parser)
        if _parse_prefix_expression(parser) is None:
            parser.error(_expected_expression(parser))
        return marker.complete(parser, KotlinSyntaxKind.PREFIX_EXPRESSION)
    return _parse_postfix_expression(parser)


def _parse_postfix_expression(parser: Parser) -> CompletedMarker | None:
    lhs = _parse_primary_expression(parser)
    if lhs is None:
        return None

    while True:
        kind = parser.current
        same_line = not parser.has_preceding_line_break

        if kind in POSTFIX_OPERATORS and same_line:
            marker = lhs.precede(parser)
            _parse_operation_reference(parser)
            lhs = marker.complete(parser, KotlinSyntaxKind.POSTFIX_EXPRESSION)
        elif kind in (TokenKind.DOT, TokenKind.SAFE_ACCESS):
            lhs = _parse_qualified_suffix(parser, lhs)
        elif kind == TokenKind.COLONCOLON:
            marker = lhs.precede(parser)
            _parse_callable_reference_suffix(parser)
            lhs = marker.complete(parser, KotlinSyntaxKind.CALLABLE_REFERENCE_EXPRESSION)
        elif kind == TokenKind.LBRACKET and same_line:
            marker = lhs.precede(parser)
            _parse_indices(parser)
            lhs = marker.complete(parser, KotlinSyntaxKind.ARRAY_ACCESS_EXPRESSION)
        elif same_line and _at_call_suffix(parser, lhs):
            marker = lhs.precede(parser)
            _parse_call_suffix(parser)
            lhs = marker.complete(parser, KotlinSyntaxKind.CALL_EXPRESSION)
        else:
            break

    return lhs


def _at_call_suffix(parser: Parser, callee: CompletedMarker) -> bool:
    if parser.at(TokenKind.LPAR):
        return True
    if parser.at(TokenKind.LT):
        return _looks_like_type_arguments(parser)
    return parser.at(TokenKind.LBRACE) and callee.kind == KotlinSyntaxKind.REFERENCE_EXPRESSION


def _parse_call_suffix(parser: Parser) -> None:
    if parser.at(TokenKind.LT):
        _parse_type_argument_list(parser)
    if parser.at(TokenKind.LPAR) and not parser.has_preceding_line_break:
        _parse_value_argument_list(parser)
    if parser.at(TokenKind.LBRACE) and not parser.has_preceding_line_break:
        argument = parser.start()
        _parse_lambda(parser)
        argument.complete(parser, KotlinSyntaxKind.LAMBDA_ARGUMENT)


def _parse_qualified_suffix(parser: Parser, receiver: CompletedMarker) -> CompletedMarker:
    kind = (
        KotlinSyntaxKind.SAFE_ACCESS_EXPRESSION
        if parser.at(TokenKind.SAFE_ACCESS)
        else KotlinSyntaxKind.DOT_QUALIFIED_EXPRESSION
    )
    marker = receiver.precede(parser)
    parser.bump()

    selector = _parse_reference(parser)
    if selector is None:
        parser.error(_expected_name(parser))
    elif not parser.has_preceding_line_break and (
        parser.at(TokenKind.LPAR)
        or parser.at(TokenKind.LBRACE)
        or (parser.at(TokenKind.LT) and _looks_like_type_arguments(parser))
    ):
        call = selector.precede(parser)
        _parse_call_suffix(parser)
        call.complete(parser, KotlinSyntaxKind.CALL_EXPRESSION)

    return marker.complete(parser, kind)


def _parse_callable_reference_suffix(parser: Parser) -> None:
    parser.bump()
    if parser.at(TokenKind.IDENTIFIER) or parser.at(TokenKind.CLASS_KEYWORD):
        parser.bump()
    else:
        parser.error(_expected_name(parser))


def _parse_indices(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=KotlinSyntaxKind.INDICES,
        parse_element=_parse_expression_element,
        open_token=TokenKind.LBRACKET,
        close_token=TokenKind.RBRACKET,
    ).parse_list(parser)


def _parse_expression_element(parser: Parser) -> ParsedSyntax:
    expression = parse_expression(parser)
    if expression is None:
        return ParsedSyntax.absent()
    return ParsedSyntax.present(expression)


def _parse_value_argument_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=KotlinSyntaxKind.VALUE_ARGUMENT_LIST,
        parse_element=_parse_value_argument,
        open_token=TokenKind.LPAR,
        close_token=TokenKind.RPAR,
    ).parse_list(parser)


def _parse_value_argument(parser: Parser) -> ParsedSyntax:
    if not parser.at_set(EXPRESSION_START) and not parser.at(TokenKind.MUL):
        return ParsedSyntax.absent()

    marker = parser.start()
    if parser.at(TokenKind.IDENTIFIER) and parser.nth_at(1, TokenKind.EQ):
        _parse_reference(parser)
        parser.bump()
    if parser.at(TokenKind.MUL):
        parser.bump()
    _expect_expression(parser)
    return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.VALUE_ARGUMENT))


def _parse_operation_reference(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, KotlinSyntaxKind.OPERATION_REFERENCE)


def _parse_reference(parser: Parser) -> CompletedMarker | None:
    if not parser.at(TokenKind.IDENTIFIER):
        return None
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, KotlinSyntaxKind.REFERENCE_EXPRESSION)


def _parse_primary_expression(parser: Parser) -> CompletedMarker | None:
    kind = parser.current

    literal_kind = LITERAL_KINDS.get(kind)
    if literal_kind is not None:
        marker = parser.start()
        parser.bump()
        return marker.complete(parser, literal_kind)

    match kind:
        case TokenKind.IDENTIFIER:
            return _parse_reference(parser)
        case TokenKind.THIS_KEYWORD:
            marker = parser.start()
            parser.bump()
            _parse_label_qualifier(parser)
            return marker.complete(parser, KotlinSyntaxKind.THIS_EXPRESSION)
        case TokenKind.SUPER_KEYWORD:
            marker = parser.start()
            parser.bump()
            if parser.at(TokenKind.LT) and not parser.has_preceding_trivia:
                parser.bump()
                parse_type(parser)
                parser.expect(TokenKind.GT)
            _parse_label_qualifier(parser)
            return marker.complete(parser, KotlinSyntaxKind.SUPER_EXPRESSION)
        case TokenKind.LPAR:
            marker = parser.start()
            parser.bump()
            _expect_expression(parser)
            parser.expect(TokenKind.RPAR)
            return marker.complete(parser, KotlinSyntaxKind.PARENTHESIZED)
        case TokenKind.LBRACE:
            return _parse_lambda(parser)
        case TokenKind.IF_KEYWORD:
            return _parse_if(parser)
        case TokenKind.WHEN_KEYWORD:
            return _parse_when(parser)
        case TokenKind.TRY_KEYWORD:
            return _parse_try(parser)
        case TokenKind.OBJECT_KEYWORD:
            marker = parser.start()
            declaration = parser.start()
            _parse_object_rest(parser)
            declaration.complete(parser, KotlinSyntaxKind.OBJECT_DECLARATION)
            return marker.complete(parser, KotlinSyntaxKind.OBJECT_LITERAL)
        case TokenKind.COLONCOLON:
            marker = parser.start()
            _parse_callable_reference_suffix(parser)
            return marker.complete(parser, KotlinSyntaxKind.CALLABLE_REFERENCE_EXPRESSION)
        case TokenKind.RETURN_KEYWORD:
            marker = parser.start()
            parser.bump()
            _parse_label_qualifier(parser)
            if parser.at_set(EXPRESSION_START) and not parser.has_preceding_line_break:
                parse_expression(parser)
            return marker.complete(parser, KotlinSyntaxKind.RETURN)
        case TokenKind.THROW_KEYWORD:
            marker = parser.start()
            parser.bump()
            _expect_expression(parser)
            return marker.complete(parser, KotlinSyntaxKind.THROW)
        case TokenKind.BREAK_KEYWORD | TokenKind.CONTINUE_KEYWORD:
            marker = parser.start()
            parser.bump()
            _parse_label_qualifier(parser)
            node_kind = (
                KotlinSyntaxKind.BREAK if kind == TokenKind.BREAK_KEYWORD else KotlinSyntaxKind.CONTINUE
            )
            return marker.complete(parser, node_kind)
    return None


def _parse_label_qualifier(parser: Parser) -> None:
    if parser.at(TokenKind.AT) and not parser.has_preceding_trivia:
        marker = parser.start()
        parser.bump()
        if parser.at(TokenKind.IDENTIFIER) and not parser.has_preceding_trivia:
            parser.bump()
        else:
            parser.error(_expected_name(parser))
        marker.complete(parser, KotlinSyntaxKind.LABEL_QUALIFIER)


def _parse_lambda(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    literal = parser.start()
    parser.bump()

    if _at_lambda_parameters(parser):
        parameters = parser.start()
        while parser.at(TokenKind.IDENTIFIER):
            parameter = parser.start()
            parser.bump()
            if parser.at(TokenKind.COLON):
                parser.bump()
                parse_type(parser)
            parameter.complete(parser, KotlinSyntaxKind.VALUE_PARAMETER)
            if not parser.eat(TokenKind.COMMA):
                break
        parameters.complete(parser, KotlinSyntaxKind.VALUE_PARAMETER_LIST)
        parser.expect(TokenKind.ARROW)
    elif parser.at(TokenKind.ARROW):
        parser.bump()

    parse_statement_list(
        parser,
        stop_at=frozenset({TokenKind.RBRACE, TokenKind.EOF}),
        context=StatementContext.BLOCK,
        wrap_kind=KotlinSyntaxKind.BLOCK,
    )
    parser.expect(TokenKind.RBRACE)
    literal.complete(parser, KotlinSyntaxKind.FUNCTION_LITERAL)
    return marker.complete(parser, KotlinSyntaxKind.LAMBDA_EXPRESSION)


def _at_lambda_parameters(parser: Parser) -> bool:
    if not parser.at(TokenKind.IDENTIFIER):
        return False
    return parser.nth(1) in (TokenKind.ARROW, TokenKind.COMMA, TokenKind.COLON)


def _parse_condition(parser: Parser) -> None:
    parser.expect(TokenKind.LPAR)
    _expect_expression(parser)
    parser.expect(TokenKind.RPAR)


def _parse_if(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _parse_condition(parser)
    if not parser.at(TokenKind.ELSE_KEYWORD):
        _parse_control_structure_body(parser)
    if parser.at(TokenKind.ELSE_KEYWORD):
        parser.bump()
        _parse_control_structure_body(parser)
    return marker.complete(parser, KotlinSyntaxKind.IF)


def _parse_when(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if parser.at(TokenKind.LPAR):
        _parse_condition(parser)

    if parser.expect(TokenKind.LBRACE).is_present():
        recovery = ParseRecoveryTokenSet(
            node_kind=KotlinSyntaxKind.ERROR,
            recovery_set=frozenset({TokenKind.RBRACE}),
        ).enable_recovery_on_line_break()

        def recover_entry(current: Parser, parsed: ParsedSyntax) -> bool:
            if parsed.is_present():
                return True
            current.error(_unexpected_token(current))
            _, recovery_error = recovery.recover(current)
            if recovery_error == RecoveryError.ALREADY_RECOVERED:
                error = current.start()
                current.bump_any()
                error.complete(current, KotlinSyntaxKind.ERROR)
                return True
            return recovery_error is None

        ParseNodeList(
            list_kind=KotlinSyntaxKind.WHEN,
            is_at_list_end=lambda current: current.at(TokenKind.RBRACE),
            parse_element=_parse_when_entry,
            recover=recover_entry,
        ).parse_elements(parser)
        parser.expect(TokenKind.RBRACE)

    return marker.complete(parser, KotlinSyntaxKind.WHEN)


def _parse_when_entry(parser: Parser) -> ParsedSyntax:
    if not (
        parser.at(TokenKind.ELSE_KEYWORD)
        or parser.at_set(EXPRESSION_START)
        or parser.at(TokenKind.IN_KEYWORD)
        or parser.at(TokenKind.NOT_IN)
        or parser.at(TokenKind.IS_KEYWORD)
        or parser.at(TokenKind.NOT_IS)
    ):
        return ParsedSyntax.absent()

    marker = parser.start()
    if parser.at(TokenKind.ELSE_KEYWORD):
        parser.bump()
    else:
        while True:
            _parse_when_condition(parser)
            if not parser.eat(TokenKind.COMMA):
                break
    parser.expect(TokenKind.ARROW)
    _parse_control_structure_body(parser)
    return ParsedSyntax.present(marker.complete(parser, KotlinSyntaxKind.WHEN_ENTRY))


def _parse_when_condition(parser: Parser) -> None:
    marker = parser.start()
    if parser.at(TokenKind.IN_KEYWORD) or parser.at(TokenKind.NOT_IN):
        _parse_operation_reference(parser)
        _expect_expression(parser)
        marker.complete(parser, KotlinSyntaxKind.WHEN_CONDITION_IN_RANGE)
    elif parser.at(TokenKind.IS_KEYWORD) or parser.at(TokenKind.NOT_IS):
        _parse_operation_reference(parser)
        parse_type(parser)
        marker.complete(parser, KotlinSyntaxKind.WHEN_CONDITION_IS_PATTERN)
    else:
        _expect_expression(parser)
        marker.complete(parser, KotlinSyntaxKind.WHEN_CONDITION_EXPRESSION)


def _parse_try(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _parse_block(parser)
    while parser.at(TokenKind.CATCH_KEYWORD):
        catch = parser.start()
        parser.bump()
        _parse_value_parameter_list(parser)
        _parse_block(parser)
        catch.complete(parser, KotlinSyntaxKind.CATCH)
    if parser.at(TokenKind.FINALLY_KEYWORD):
        finally_ = parser.start()
        parser.bump()
        _parse_block(parser)
        finally_.complete(parser, KotlinSyntaxKind.FINALLY)
    return marker.complete(parser, KotlinSyntaxKind.TRY)


def _parse_for(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    parser.expect(TokenKind.LPAR)
    if parser.at(TokenKind.LPAR):
        destructuring = parser.start()
        _parse_destructuring_entries(parser)
        destructuring.complete(parser, KotlinSyntaxKind.DESTRUCTURING_DECLARATION)
    else:
        parameter = parser.start()
        parse_modifier_list(parser, in_parameter=True)
        _expect_name(parser)
        if parser.at(TokenKind.COLON):
            parser.bump()
            parse_type(parser)
        parameter.complete(parser, KotlinSyntaxKind.VALUE_PARAMETER)
    parser.expect(TokenKind.IN_KEYWORD)
    _expect_expression(parser)
    parser.expect(TokenKind.RPAR)
    _parse_control_structure_body(parser)
    return marker.complete(parser, KotlinSyntaxKind.FOR)


def _parse_while(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _parse_condition(parser)
    _parse_control_structure_body(parser)
    return marker.complete(parser, KotlinSyntaxKind.WHILE)


def _parse_do_while(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _parse_control_structure_body(parser)
    if parser.expect(TokenKind.WHILE_KEYWORD).is_present():
        _parse_condition(parser)
    return marker.complete(parser, KotlinSyntaxKind.DO_WHILE)


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def _expect_name(parser: Parser) -> bool:
    if parser.at(TokenKind.IDENTIFIER):
        parser.bump()
        return True
    parser.error(_expected_name(parser))
    return False


def _expected_name(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(PARSER_EXPECTED_DECLARATION_NAME, parser.current_range)


def _expected_expression(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(PARSER_EXPECTED_EXPRESSION, parser.current_range)


def _expected_type(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(
        PARSER_EXPECTED_TOKEN,
        parser.current_range,
        message="Expected a type",
    )


def _expected_token(parser: Parser, spelling: str) -> Diagnostic:
    return diagnostic_from_spec(
        PARSER_EXPECTED_TOKEN,
        parser.current_range,
        message=f"Expected `{spelling}`",
    )


def _unexpected_token(parser: Parser) -> Diagnostic:
    return diagnostic_from_spec(
        PARSER_UNEXPECTED_TOKEN,
        parser.current_range,
        message=f"Unexpected token {parser.current.name}",
    )
