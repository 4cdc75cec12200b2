"""Map the red CST into the lossless tree.

One case per concrete kind. Leading trivia is claimed per token: the first
caller asking for the trivia before a token gets it, everyone after gets
`Space.EMPTY`. Outer nodes ask before their children, so a node that starts
at the same token as its parent never duplicates the parent's prefix.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from kotlinpy.cst import SyntaxElement, SyntaxNode
from kotlinpy.diagnostics import Diagnostic
from kotlinpy.mapping.errors import InconsistentTriviaError, UnsupportedConstructError
from kotlinpy.mapping.options import MapperOptions, UnsupportedPolicy
from kotlinpy.mapping.trivia import Direction, capture_trivia, first_token
from kotlinpy.printer import print_tree
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.tree import (
    EMPTY_SYMBOLS,
    Annotation,
    ArrayAccess,
    Assignment,
    AssignmentOperation,
    AssignmentOperator,
    Binary,
    BinaryOperator,
    Block,
    Break,
    By,
    Catch,
    CheckNotNull,
    ClassDeclaration,
    ClassKind,
    ClassKindType,
    CompilationUnit,
    Container,
    Continue,
    ControlParentheses,
    Destructuring,
    DoWhileLoop,
    Else,
    Empty,
    EnumValue,
    EnumValueSet,
    Expression,
    FieldAccess,
    ForEachControl,
    ForEachLoop,
    FunctionType,
    Identifier,
    If,
    ImplicitReturn,
    Import,
    Infix,
    InstanceOf,
    IsNullable,
    Lambda,
    LeftPadded,
    Literal,
    LiteralKind,
    Markers,
    MemberReference,
    MethodDeclaration,
    MethodInvocation,
    Modifier,
    ModifierType,
    NamedVariable,
    NotIs,
    ObjectExpression,
    OmitBraces,
    OmitParentheses,
    OperatorOverload,
    Package,
    ParameterizedType,
    Parentheses,
    Reified,
    Return,
    RightPadded,
    SafeCall,
    Semicolon,
    SingleExpressionBlock,
    Space,
    Statement,
    SymbolTable,
    Throw,
    TrailingComma,
    TrailingLambdaArgument,
    Tree,
    Try,
    TypeCast,
    TypeParameter,
    TypeTree,
    Unary,
    UnaryOperator,
    Unknown,
    VariableDeclarations,
    Variance,
    When,
    WhenBranch,
    WhileLoop,
    Wildcard,
)

LITERAL_NODE_KINDS: dict[KotlinSyntaxKind, LiteralKind] = {
    KotlinSyntaxKind.INTEGER_CONSTANT: LiteralKind.INTEGER,
    KotlinSyntaxKind.FLOAT_CONSTANT: LiteralKind.FLOAT,
    KotlinSyntaxKind.CHARACTER_CONSTANT: LiteralKind.CHARACTER,
    KotlinSyntaxKind.STRING_TEMPLATE: LiteralKind.STRING,
    KotlinSyntaxKind.BOOLEAN_CONSTANT: LiteralKind.BOOLEAN,
    KotlinSyntaxKind.NULL: LiteralKind.NULL,
}

TYPE_NODE_KINDS: frozenset[KotlinSyntaxKind] = frozenset(
    {
        KotlinSyntaxKind.USER_TYPE,
        KotlinSyntaxKind.NULLABLE_TYPE,
        KotlinSyntaxKind.FUNCTION_TYPE,
    }
)


@dataclass(frozen=True, slots=True)
class MappedTree:
    tree: CompilationUnit
    diagnostics: list[Diagnostic]


class _Cursor:
    """Reads the significant children of one node in order."""

    __slots__ = ("_node", "_items", "_index")

    def __init__(self, node: SyntaxNode) -> None:
        self._node = node
        self._items = node.significant_children()
        self._index = 0

    def peek(self) -> SyntaxElement | None:
        if self._index < len(self._items):
            return self._items[self._index]
        return None

    def at(self, *kinds: KotlinSyntaxKind | None) -> bool:
        item = self.peek()
        return item is not None and item.kind in kinds

    def take(self, *kinds: KotlinSyntaxKind) -> SyntaxElement | None:
        if not self.at(*kinds):
            return None
        item = self._items[self._index]
        self._index += 1
        return item

    def expect(self, *kinds: KotlinSyntaxKind) -> SyntaxElement:
        item = self.take(*kinds)
        if item is None:
            raise self._missing(kinds)
        return item

    def expect_node(self, *kinds: KotlinSyntaxKind) -> SyntaxNode:
        item = self.peek()
        if not isinstance(item, SyntaxNode) or item.kind not in kinds:
            raise self._missing(kinds)
        self._index += 1
        return item

    def next_node(self) -> SyntaxNode:
        item = self.peek()
        if not isinstance(item, SyntaxNode):
            raise self._missing(())
        self._index += 1
        return item

    def take_until(self, kind: KotlinSyntaxKind) -> tuple[SyntaxElement, ...]:
        start = self._index
        while self.peek() is not None and not self.at(kind):
            self._index += 1
        return self._items[start : self._index]

    def finish(self) -> None:
        item = self.peek()
        if item is not None:
            raise UnsupportedConstructError(
                item.kind.name,
                item.range,
                f"unexpected {item.kind.name} in {self._node.kind.name}",
            )

    def _missing(self, kinds: Sequence[KotlinSyntaxKind]) -> UnsupportedConstructError:
        item = self.peek()
        names = " or ".join(kind.name for kind in kinds) or "a node"
        found = item.kind.name if item is not None else "end of node"
        return UnsupportedConstructError(
            self._node.kind.name,
            (item or self._node).range,
            f"expected {names}, found {found}",
        )


class KotlinTreeMapper:
    """Builds lossless nodes for one source file."""

    def __init__(
        self,
        symbols: SymbolTable | None = None,
        options: MapperOptions | None = None,
        *,
        source_path: str | None = None,
    ) -> None:
        self.symbols = symbols if symbols is not None else EMPTY_SYMBOLS
        self.options = options if options is not None else MapperOptions()
        self.source_path = source_path
        self.diagnostics: list[Diagnostic] = []
        self._claimed: set[int] = set()

    # -----------------------------------------------------------------------
    # Entry points
    # -----------------------------------------------------------------------

    def map_compilation_unit(self, root: SyntaxNode) -> CompilationUnit:
        if root.kind != KotlinSyntaxKind.FILE:
            raise _unsupported(root, "expected a FILE node")

        cursor = _Cursor(root)
        package: RightPadded[Package] | None = None
        if (directive := cursor.take(KotlinSyntaxKind.PACKAGE_DIRECTIVE)) is not None:
            package = RightPadded(self._package(_as_node(directive)))
            if (semicolon := cursor.take(KotlinSyntaxKind.SEMICOLON)) is not None:
                package = self._with_semicolon(package, semicolon)

        imports: tuple[RightPadded[Import], ...] = ()
        if (import_list := cursor.take(KotlinSyntaxKind.IMPORT_LIST)) is not None:
            imports = self._imports(_as_node(import_list))

        statements = self._statement_list(cursor.take_until(KotlinSyntaxKind.EOF), top_level=True)

        eof_token = root.first_child(KotlinSyntaxKind.EOF)
        eof = self._prefix(eof_token) if eof_token is not None else Space.EMPTY
        source = root.source
        return CompilationUnit(
            package_declaration=package,
            imports=imports,
            statements=statements,
            eof=eof,
            source_path=self.source_path,
            charset_bom_marked=source.startswith("\ufeff"),
            line_ending=detect_line_ending(source),
        )

    def map_element(self, node: SyntaxNode) -> Tree:
        if node.kind == KotlinSyntaxKind.FILE:
            return self.map_compilation_unit(node)
        if node.kind in TYPE_NODE_KINDS:
            return self._type(node)
        return self._statement(node)

    # -----------------------------------------------------------------------
    # Trivia
    # -----------------------------------------------------------------------

    def _prefix(self, element: SyntaxElement) -> Space:
        token = first_token(element)
        if token is None or token.start in self._claimed:
            return Space.EMPTY
        self._claimed.add(token.start)
        return capture_trivia(token, Direction.BACKWARD)

    def _with_semicolon[T](self, padded: RightPadded[T], semicolon: SyntaxElement) -> RightPadded[T]:
        return RightPadded(
            padded.element,
            after=self._prefix(semicolon),
            markers=padded.markers.add(Semicolon()),
        )

    def _overload(self, node: SyntaxNode) -> Markers:
        method = self.symbols.method_at(node.range)
        if method is None:
            return Markers.EMPTY
        return Markers.of(OperatorOverload(method))

    # -----------------------------------------------------------------------
    # Statements
    # -----------------------------------------------------------------------

    def _statement_list(
        self,
        elements: Sequence[SyntaxElement],
        *,
        top_level: bool = False,
    ) -> tuple[RightPadded[Statement], ...]:
        statements: list[RightPadded[Statement]] = []
        for element in elements:
            if element.kind == KotlinSyntaxKind.SEMICOLON:
                if not statements or statements[-1].markers.has(Semicolon):
                    # A `;` with no statement of its own.
                    empty = Empty(prefix=self._prefix(element))
                    statements.append(RightPadded(empty, markers=Markers.of(Semicolon())))
                else:
                    statements[-1] = self._with_semicolon(statements[-1], element)
                continue
            node = _as_node(element)
            statement = self._top_level_statement(node) if top_level else self._statement(node)
            statements.append(RightPadded(statement))
        return tuple(statements)

    def _top_level_statement(self, node: SyntaxNode) -> Statement:
        prefix = self._prefix(node)
        try:
            statement = self._statement(node)
        except UnsupportedConstructError as error:
            if self.options.unsupported != UnsupportedPolicy.SKIP_DECLARATION:
                raise
            self.diagnostics.append(error.to_diagnostic())
            statement = Unknown(source=node.text)

        statement = statement.with_prefix(prefix)
        if self.options.verify:
            printed = print_tree(statement.with_prefix(Space.EMPTY))
            if printed != node.text:
                raise InconsistentTriviaError(node.range, "Reprint does not match the source")
        return statement

    def _statement(self, node: SyntaxNode) -> Statement:
        match node.kind:
            case KotlinSyntaxKind.CLASS | KotlinSyntaxKind.OBJECT_DECLARATION:
                return self._class(node)
            case KotlinSyntaxKind.FUN:
                return self._function(node)
            case KotlinSyntaxKind.PROPERTY:
                return self._property(node)
            case KotlinSyntaxKind.DESTRUCTURING_DECLARATION:
                return self._destructuring(node)
            case KotlinSyntaxKind.FOR:
                return self._for(node)
            case KotlinSyntaxKind.WHILE:
                return self._while(node)
            case KotlinSyntaxKind.DO_WHILE:
                return self._do_while(node)
            case KotlinSyntaxKind.BLOCK:
                return self._block(node)
        return self._expression(node)

    def _body(self, node: SyntaxNode) -> Statement:
        if node.kind == KotlinSyntaxKind.BLOCK:
            return self._block(node)
        return self._statement(node)

    def _block(self, node: SyntaxNode) -> Block:
        cursor = _Cursor(node)
        prefix = self._prefix(cursor.expect(KotlinSyntaxKind.LBRACE))
        statements = self._statement_list(cursor.take_until(KotlinSyntaxKind.RBRACE))
        end = self._prefix(cursor.expect(KotlinSyntaxKind.RBRACE))
        cursor.finish()
        return Block(prefix=prefix, statements=statements, end=end)

    def _class_body(self, node: SyntaxNode) -> Block:
        """Like `_block`, but an enum body opens with its entries as one statement."""
        cursor = _Cursor(node)
        prefix = self._prefix(cursor.expect(KotlinSyntaxKind.LBRACE))
        entries: list[RightPadded[Statement]] = []
        if cursor.at(KotlinSyntaxKind.ENUM_ENTRY):
            entries.append(RightPadded(self._enum_values(cursor)))
            if (semicolon := cursor.take(KotlinSyntaxKind.SEMICOLON)) is not None:
                entries[0] = self._with_semicolon(entries[0], semicolon)
        members = self._statement_list(cursor.take_until(KotlinSyntaxKind.RBRACE))
        end = self._prefix(cursor.expect(KotlinSyntaxKind.RBRACE))
        cursor.finish()
        return Block(prefix=prefix, statements=(*entries, *members), end=end)

    def _enum_values(self, cursor: _Cursor) -> EnumValueSet:
        prefix = self._prefix(_as_node(cursor.peek()))
        enums: list[RightPadded[EnumValue]] = []
        while (entry := cursor.take(KotlinSyntaxKind.ENUM_ENTRY)) is not None:
            value = self._enum_value(_as_node(entry))
            if (comma := cursor.take(KotlinSyntaxKind.COMMA)) is None:
                enums.append(RightPadded(value))
                break
            after = self._prefix(comma)
            if cursor.at(KotlinSyntaxKind.ENUM_ENTRY):
                enums.append(RightPadded(value, after=after))
            else:
                enums.append(RightPadded(value, after=after, markers=Markers.of(TrailingComma())))
        return EnumValueSet(prefix=prefix, enums=tuple(enums))

    def _enum_value(self, node: SyntaxNode) -> EnumValue:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        name = self._identifier(cursor.expect(KotlinSyntaxKind.IDENTIFIER))
        arguments = None
        if (argument_list := cursor.take(KotlinSyntaxKind.VALUE_ARGUMENT_LIST)) is not None:
            arguments = self._container(
                _as_node(argument_list),
                self._value_argument,
                KotlinSyntaxKind.LPAR,
                KotlinSyntaxKind.RPAR,
            )
        body = None
        if (class_body := cursor.take(KotlinSyntaxKind.CLASS_BODY)) is not None:
            body = self._class_body(_as_node(class_body))
        cursor.finish()
        return EnumValue(prefix=prefix, name=name, arguments=arguments, body=body)

    def _control_parentheses(self, cursor: _Cursor) -> ControlParentheses:
        prefix = self._prefix(cursor.expect(KotlinSyntaxKind.LPAR))
        condition = self._expression(cursor.next_node())
        after = self._prefix(cursor.expect(KotlinSyntaxKind.RPAR))
        return ControlParentheses(prefix=prefix, tree=RightPadded(condition, after=after))

    def _for(self, node: SyntaxNode) -> ForEachLoop:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.FOR_KEYWORD)
        control_prefix = self._prefix(cursor.expect(KotlinSyntaxKind.LPAR))
        if cursor.at(KotlinSyntaxKind.DESTRUCTURING_DECLARATION):
            raise _unsupported(_as_node(cursor.peek()), "destructuring loop variable")
        variable = self._parameter(cursor.expect_node(KotlinSyntaxKind.VALUE_PARAMETER))
        before_in = self._prefix(cursor.expect(KotlinSyntaxKind.IN_KEYWORD))
        iterable = self._expression(cursor.next_node())
        before_close = self._prefix(cursor.expect(KotlinSyntaxKind.RPAR))
        body = self._body(cursor.next_node())
        cursor.finish()
        return ForEachLoop(
            prefix=prefix,
            control=ForEachControl(
                prefix=control_prefix,
                variable=RightPadded(variable, after=before_in),
                iterable=RightPadded(iterable, after=before_close),
            ),
            body=body,
        )

    def _while(self, node: SyntaxNode) -> WhileLoop:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.WHILE_KEYWORD)
        condition = self._control_parentheses(cursor)
        body = self._body(cursor.next_node())
        cursor.finish()
        return WhileLoop(prefix=prefix, condition=condition, body=body)

    def _do_while(self, node: SyntaxNode) -> DoWhileLoop:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.DO_KEYWORD)
        body = self._body(cursor.next_node())
        before_while = self._prefix(cursor.expect(KotlinSyntaxKind.WHILE_KEYWORD))
        condition = self._control_parentheses(cursor)
        cursor.finish()
        return DoWhileLoop(
            prefix=prefix,
            body=body,
            while_condition=LeftPadded(before_while, condition),
        )

    # -----------------------------------------------------------------------
    # Declarations
    # -----------------------------------------------------------------------

    def _package(self, node: SyntaxNode) -> Package:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.PACKAGE_KEYWORD)
        expression = self._name_expression(cursor.next_node())
        cursor.finish()
        return Package(prefix=prefix, expression=expression)

    def _imports(self, node: SyntaxNode) -> tuple[RightPadded[Import], ...]:
        imports: list[RightPadded[Import]] = []
        for child in node.significant_children():
            if child.kind == KotlinSyntaxKind.SEMICOLON and imports:
                imports[-1] = self._with_semicolon(imports[-1], child)
            elif child.kind == KotlinSyntaxKind.IMPORT_DIRECTIVE:
                imports.append(RightPadded(self._import(_as_node(child))))
            else:
                raise _unsupported(child)
        return tuple(imports)

    def _import(self, node: SyntaxNode) -> Import:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.IMPORT_KEYWORD)
        qualid: Identifier | FieldAccess = self._name_expression(cursor.next_node())
        if (dot := cursor.take(KotlinSyntaxKind.DOT)) is not None:
            before = self._prefix(dot)
            star = cursor.expect(KotlinSyntaxKind.MUL)
            # The access starts where the name does, so it takes over the name's prefix.
            qualid = FieldAccess(
                prefix=qualid.prefix,
                target=qualid.with_prefix(Space.EMPTY),
                name=LeftPadded(before, Identifier(prefix=self._prefix(star), simple_name="*")),
            )

        alias: LeftPadded[Identifier] | None = None
        if (alias_node := cursor.take(KotlinSyntaxKind.IMPORT_ALIAS)) is not None:
            alias_cursor = _Cursor(_as_node(alias_node))
            before_as = self._prefix(alias_cursor.expect(KotlinSyntaxKind.AS_KEYWORD))
            alias = LeftPadded(
                before_as, self._identifier(alias_cursor.expect(KotlinSyntaxKind.IDENTIFIER))
            )
            alias_cursor.finish()
        cursor.finish()
        return Import(prefix=prefix, qualid=qualid, alias=alias)

    def _name_expression(self, node: SyntaxNode) -> Identifier | FieldAccess:
        expression = self._expression(node)
        if not isinstance(expression, Identifier | FieldAccess):
            raise _unsupported(node, "expected a qualified name")
        return expression

    def _modifier_list(
        self, node: SyntaxElement | None
    ) -> tuple[tuple[Annotation, ...], tuple[Modifier, ...], tuple[Annotation, ...]]:
        """Split a modifier list into leading annotations, modifiers and the
        annotations left for the declaration keyword."""
        if node is None:
            return (), (), ()

        leading: list[Annotation] = []
        modifiers: list[Modifier] = []
        pending: list[Annotation] = []
        for child in _as_node(node).significant_children():
            if child.kind == KotlinSyntaxKind.ANNOTATION_ENTRY:
                (pending if modifiers else leading).append(self._annotation(_as_node(child)))
                continue
            modifiers.append(
                Modifier(
                    prefix=self._prefix(child),
                    keyword=child.text,
                    type=ModifierType.of(child.text),
                    annotations=tuple(pending),
                )
            )
            pending = []
        return tuple(leading), tuple(modifiers), tuple(pending)

    def _keyword(self, token: SyntaxElement, annotations: tuple[Annotation, ...]) -> Modifier:
        return Modifier(
            prefix=self._prefix(token),
            keyword=token.text,
            type=ModifierType.KEYWORD,
            annotations=annotations,
        )

    def _annotation(self, node: SyntaxNode) -> Annotation:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.AT)
        annotation_type = self._user_type(cursor.expect_node(KotlinSyntaxKind.USER_TYPE))
        arguments = None
        if (argument_list := cursor.take(KotlinSyntaxKind.VALUE_ARGUMENT_LIST)) is not None:
            arguments = self._container(
                _as_node(argument_list),
                self._value_argument,
                KotlinSyntaxKind.LPAR,
                KotlinSyntaxKind.RPAR,
            )
        cursor.finish()
        return Annotation(prefix=prefix, annotation_type=annotation_type, arguments=arguments)

    def _class(self, node: SyntaxNode) -> ClassDeclaration:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        leading, modifiers, pending = self._modifier_list(cursor.take(KotlinSyntaxKind.MODIFIER_LIST))
        keyword = cursor.expect(
            KotlinSyntaxKind.CLASS_KEYWORD,
            KotlinSyntaxKind.INTERFACE_KEYWORD,
            KotlinSyntaxKind.OBJECT_KEYWORD,
        )
        kind = ClassKind(
            prefix=self._prefix(keyword),
            type=ClassKindType(keyword.text),
            annotations=pending,
        )

        name = None
        if (name_token := cursor.take(KotlinSyntaxKind.IDENTIFIER)) is not None:
            name = self._identifier(name_token)
        type_parameters = self._type_parameters(cursor.take(KotlinSyntaxKind.TYPE_PARAMETER_LIST))

        primary_constructor = None
        if (constructor := cursor.take(KotlinSyntaxKind.PRIMARY_CONSTRUCTOR)) is not None:
            constructor_cursor = _Cursor(_as_node(constructor))
            parameters = constructor_cursor.expect_node(KotlinSyntaxKind.VALUE_PARAMETER_LIST)
            constructor_cursor.finish()
            primary_constructor = self._parameters(parameters)

        implements = None
        if (colon := cursor.take(KotlinSyntaxKind.COLON)) is not None:
            before = self._prefix(colon)
            super_types = self._container(
                cursor.expect_node(KotlinSyntaxKind.SUPER_TYPE_LIST),
                self._super_type_entry,
                None,
                None,
            )
            implements = super_types.with_before(before)

        body = None
        if (class_body := cursor.take(KotlinSyntaxKind.CLASS_BODY)) is not None:
            body = self._class_body(_as_node(class_body))
        cursor.finish()

        return ClassDeclaration(
            prefix=prefix,
            leading_annotations=leading,
            modifiers=modifiers,
            kind=kind,
            name=name,
            type_parameters=type_parameters,
            primary_constructor=primary_constructor,
            implements=implements,
            body=body,
            type=self.symbols.type_at(node.range),
        )

    def _super_type_entry(self, node: SyntaxNode) -> TypeTree | MethodInvocation:
        cursor = _Cursor(node)
        match node.kind:
            case KotlinSyntaxKind.SUPER_TYPE_ENTRY:
                super_type = self._type(cursor.next_node())
                cursor.finish()
                return super_type
            case KotlinSyntaxKind.SUPER_TYPE_CALL_ENTRY:
                prefix = self._prefix(node)
                callee = self._user_type(cursor.expect_node(KotlinSyntaxKind.USER_TYPE))
                arguments = self._arguments(
                    cursor.expect_node(KotlinSyntaxKind.VALUE_ARGUMENT_LIST), None
                )
                cursor.finish()
                return _constructor_call(callee, arguments).with_prefix(prefix)
        raise _unsupported(node)

    def _function(self, node: SyntaxNode) -> MethodDeclaration:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        leading, modifiers, pending = self._modifier_list(cursor.take(KotlinSyntaxKind.MODIFIER_LIST))
        modifiers = (*modifiers, self._keyword(cursor.expect(KotlinSyntaxKind.FUN_KEYWORD), pending))
        type_parameters = self._type_parameters(cursor.take(KotlinSyntaxKind.TYPE_PARAMETER_LIST))

        receiver: RightPadded[TypeTree] | None = None
        if cursor.at(*TYPE_NODE_KINDS):
            receiver_type = self._type(cursor.next_node())
            dot = cursor.expect(KotlinSyntaxKind.DOT, KotlinSyntaxKind.SAFE_ACCESS)
            if dot.kind == KotlinSyntaxKind.SAFE_ACCESS:
                # `T?.name` lexes as `T` `?.`: keep the `?` on the type.
                nullable = receiver_type.markers.add(IsNullable(self._prefix(dot)))
                receiver = RightPadded(receiver_type.with_markers(nullable))
            else:
                receiver = RightPadded(receiver_type, after=self._prefix(dot))

        name = self._identifier(cursor.expect(KotlinSyntaxKind.IDENTIFIER))
        parameters = self._parameters(cursor.expect_node(KotlinSyntaxKind.VALUE_PARAMETER_LIST))
        return_type = self._type_annotation(cursor)

        body = None
        if (block := cursor.take(KotlinSyntaxKind.BLOCK)) is not None:
            body = self._block(_as_node(block))
        elif (equals := cursor.take(KotlinSyntaxKind.EQ)) is not None:
            body = self._expression_body(equals, cursor.next_node())
        cursor.finish()

        return MethodDeclaration(
            prefix=prefix,
            leading_annotations=leading,
            modifiers=modifiers,
            type_parameters=type_parameters,
            receiver=receiver,
            name=name,
            parameters=parameters,
            return_type=return_type,
            body=body,
            method_type=self.symbols.method_at(node.range),
        )

    def _expression_body(self, equals: SyntaxElement, node: SyntaxNode) -> Block:
        before = self._prefix(equals)
        statement = Return(expression=self._expression(node), markers=Markers.of(ImplicitReturn()))
        return Block(
            prefix=before,
            statements=(RightPadded(statement),),
            markers=Markers.of(SingleExpressionBlock(), OmitBraces()),
        )

    def _parameters(self, node: SyntaxNode) -> Container[Statement]:
        return self._container(node, self._parameter, KotlinSyntaxKind.LPAR, KotlinSyntaxKind.RPAR)

    def _parameter(self, node: SyntaxNode) -> VariableDeclarations:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        leading, modifiers, pending = self._modifier_list(cursor.take(KotlinSyntaxKind.MODIFIER_LIST))
        if (keyword := cursor.take(KotlinSyntaxKind.VAL_KEYWORD, KotlinSyntaxKind.VAR_KEYWORD)) is not None:
            modifiers = (*modifiers, self._keyword(keyword, pending))
        elif pending:
            raise _unsupported(node, "annotation after the last modifier")

        name_token = cursor.expect(KotlinSyntaxKind.IDENTIFIER)
        variable = NamedVariable(
            prefix=self._prefix(name_token),
            name=Identifier(simple_name=name_token.text, type=self.symbols.type_at(name_token.range)),
            type_expression=self._type_annotation(cursor),
            initializer=self._initializer(cursor),
        )
        cursor.finish()
        return VariableDeclarations(
            prefix=prefix,
            leading_annotations=leading,
            modifiers=modifiers,
            variables=(RightPadded(variable),),
        )

    def _property(self, node: SyntaxNode) -> VariableDeclarations:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        leading, modifiers, pending = self._modifier_list(cursor.take(KotlinSyntaxKind.MODIFIER_LIST))
        keyword = cursor.expect(KotlinSyntaxKind.VAL_KEYWORD, KotlinSyntaxKind.VAR_KEYWORD)
        modifiers = (*modifiers, self._keyword(keyword, pending))
        if cursor.at(KotlinSyntaxKind.TYPE_PARAMETER_LIST):
            raise _unsupported(_as_node(cursor.peek()), "generic property")

        name_token = cursor.expect(KotlinSyntaxKind.IDENTIFIER)
        variable_prefix = self._prefix(name_token)
        type_expression = self._type_annotation(cursor)

        markers = Markers.EMPTY
        initializer = self._initializer(cursor)
        if initializer is None and (delegate := cursor.take(KotlinSyntaxKind.PROPERTY_DELEGATE)) is not None:
            delegate_cursor = _Cursor(_as_node(delegate))
            before_by = self._prefix(delegate_cursor.expect(KotlinSyntaxKind.IDENTIFIER))
            initializer = LeftPadded(before_by, self._expression(delegate_cursor.next_node()))
            delegate_cursor.finish()
            markers = Markers.of(By())

        accessors: list[MethodDeclaration] = []
        while (accessor := cursor.take(KotlinSyntaxKind.PROPERTY_ACCESSOR)) is not None:
            accessors.append(self._accessor(_as_node(accessor)))
        cursor.finish()

        variable = NamedVariable(
            prefix=variable_prefix,
            name=Identifier(simple_name=name_token.text, type=self.symbols.type_at(name_token.range)),
            type_expression=type_expression,
            initializer=initializer,
            markers=markers,
        )
        return VariableDeclarations(
            prefix=prefix,
            leading_annotations=leading,
            modifiers=modifiers,
            variables=(RightPadded(variable),),
            accessors=tuple(accessors),
        )

    def _accessor(self, node: SyntaxNode) -> MethodDeclaration:
        """`get() = ...`, `set(value) { ... }` or a bare `private set`."""
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        leading, modifiers, pending = self._modifier_list(cursor.take(KotlinSyntaxKind.MODIFIER_LIST))
        if pending:
            raise _unsupported(node, "annotation after the last accessor modifier")
        name = self._identifier(cursor.expect(KotlinSyntaxKind.IDENTIFIER))

        if (parameter_list := cursor.take(KotlinSyntaxKind.VALUE_PARAMETER_LIST)) is not None:
            parameters = self._parameters(_as_node(parameter_list))
        else:
            parameters = Container(before=Space.EMPTY, padded=(), markers=Markers.of(OmitParentheses()))
        return_type = self._type_annotation(cursor)

        body = None
        if (block := cursor.take(KotlinSyntaxKind.BLOCK)) is not None:
            body = self._block(_as_node(block))
        elif (equals := cursor.take(KotlinSyntaxKind.EQ)) is not None:
            body = self._expression_body(equals, cursor.next_node())
        cursor.finish()

        return MethodDeclaration(
            prefix=prefix,
            leading_annotations=leading,
            modifiers=modifiers,
            name=name,
            parameters=parameters,
            return_type=return_type,
            body=body,
            method_type=self.symbols.method_at(node.range),
        )

    def _destructuring(self, node: SyntaxNode) -> VariableDeclarations:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        leading, modifiers, pending = self._modifier_list(cursor.take(KotlinSyntaxKind.MODIFIER_LIST))
        keyword = cursor.expect(KotlinSyntaxKind.VAL_KEYWORD, KotlinSyntaxKind.VAR_KEYWORD)
        modifiers = (*modifiers, self._keyword(keyword, pending))

        open_prefix = self._prefix(cursor.expect(KotlinSyntaxKind.LPAR))
        variables: list[RightPadded[NamedVariable]] = []
        while True:
            entry = _Cursor(cursor.expect_node(KotlinSyntaxKind.DESTRUCTURING_DECLARATION_ENTRY))
            variable = NamedVariable(
                prefix=Space.EMPTY if variables else open_prefix,
                name=self._identifier(entry.expect(KotlinSyntaxKind.IDENTIFIER)),
                type_expression=self._type_annotation(entry),
            )
            entry.finish()
            if (comma := cursor.take(KotlinSyntaxKind.COMMA)) is not None:
                variables.append(RightPadded(variable, after=self._prefix(comma)))
                continue
            variables.append(RightPadded(variable, after=self._prefix(cursor.expect(KotlinSyntaxKind.RPAR))))
            break

        initializer = self._initializer(cursor)
        if initializer is None:
            raise _unsupported(node, "destructuring declaration without initializer")
        cursor.finish()
        last = variables[-1]
        variables[-1] = last.with_element(last.element.with_fields(initializer=initializer))

        return VariableDeclarations(
            prefix=prefix,
            leading_annotations=leading,
            modifiers=modifiers,
            variables=tuple(variables),
            markers=Markers.of(Destructuring()),
        )

    def _type_annotation(self, cursor: _Cursor) -> LeftPadded[TypeTree] | None:
        colon = cursor.take(KotlinSyntaxKind.COLON)
        if colon is None:
            return None
        before = self._prefix(colon)
        return LeftPadded(before, self._type(cursor.next_node()))

    def _initializer(self, cursor: _Cursor) -> LeftPadded[Expression] | None:
        equals = cursor.take(KotlinSyntaxKind.EQ)
        if equals is None:
            return None
        before = self._prefix(equals)
        return LeftPadded(before, self._expression(cursor.next_node()))

    def _type_parameters(self, node: SyntaxElement | None) -> Container[TypeParameter] | None:
        if node is None:
            return None
        return self._container(
            _as_node(node), self._type_parameter, KotlinSyntaxKind.LT, KotlinSyntaxKind.GT
        )

    def _type_parameter(self, node: SyntaxNode) -> TypeParameter:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        markers = Markers.EMPTY
        annotations: list[Annotation] = []
        modifiers: list[Modifier] = []
        if (modifier_list := cursor.take(KotlinSyntaxKind.MODIFIER_LIST)) is not None:
            for index, child in enumerate(_as_node(modifier_list).significant_children()):
                if child.kind == KotlinSyntaxKind.ANNOTATION_ENTRY:
                    if modifiers or markers:
                        raise _unsupported(child, "annotation after a type parameter modifier")
                    annotations.append(self._annotation(_as_node(child)))
                elif child.text == "reified":
                    if index != 0:
                        raise _unsupported(child, "`reified` must come first")
                    markers = Markers.of(Reified())
                else:
                    modifiers.append(
                        Modifier(
                            prefix=self._prefix(child),
                            keyword=child.text,
                            type=ModifierType.of(child.text),
                        )
                    )

        name = self._identifier(cursor.expect(KotlinSyntaxKind.IDENTIFIER))
        bounds = self._type_annotation(cursor)
        cursor.finish()
        return TypeParameter(
            prefix=prefix,
            annotations=tuple(annotations),
            modifiers=tuple(modifiers),
            name=name,
            bounds=bounds,
            markers=markers,
        )

    # -----------------------------------------------------------------------
    # Types
    # -----------------------------------------------------------------------

    def _type(self, node: SyntaxNode) -> TypeTree:
        match node.kind:
            case KotlinSyntaxKind.USER_TYPE:
                return self._user_type(node)
            case KotlinSyntaxKind.NULLABLE_TYPE:
                prefix = self._prefix(node)
                cursor = _Cursor(node)
                inner = self._type(cursor.next_node())
                question = cursor.expect(KotlinSyntaxKind.QUEST)
                cursor.finish()
                nullable = inner.markers.add(IsNullable(self._prefix(question)))
                return inner.with_fields(prefix=prefix, markers=nullable)
            case KotlinSyntaxKind.FUNCTION_TYPE:
                return self._function_type(node)
        raise _unsupported(node)

    def _function_type(self, node: SyntaxNode) -> FunctionType:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        parameters = self._container(
            cursor.expect_node(KotlinSyntaxKind.VALUE_PARAMETER_LIST),
            self._function_type_parameter,
            KotlinSyntaxKind.LPAR,
            KotlinSyntaxKind.RPAR,
        )
        before = self._prefix(cursor.expect(KotlinSyntaxKind.ARROW))
        return_type = self._type(cursor.next_node())
        cursor.finish()
        return FunctionType(prefix=prefix, parameters=parameters, return_type=LeftPadded(before, return_type))

    def _function_type_parameter(self, node: SyntaxNode) -> TypeTree | NamedVariable:
        cursor = _Cursor(node)
        if (name_token := cursor.take(KotlinSyntaxKind.IDENTIFIER)) is None:
            parameter_type = self._type(cursor.next_node())
            cursor.finish()
            return parameter_type
        variable = NamedVariable(
            prefix=self._prefix(name_token),
            name=Identifier(simple_name=name_token.text),
            type_expression=self._type_annotation(cursor),
        )
        cursor.finish()
        return variable

    def _user_type(self, node: SyntaxNode) -> Identifier | FieldAccess | ParameterizedType:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        tree: Identifier | FieldAccess | ParameterizedType
        if (qualifier := cursor.take(KotlinSyntaxKind.USER_TYPE)) is not None:
            target = self._user_type(_as_node(qualifier))
            before = self._prefix(cursor.expect(KotlinSyntaxKind.DOT))
            name = self._identifier(cursor.expect_node(KotlinSyntaxKind.REFERENCE_EXPRESSION))
            tree = FieldAccess(target=target, name=LeftPadded(before, name))
        else:
            tree = self._identifier(cursor.expect_node(KotlinSyntaxKind.REFERENCE_EXPRESSION))

        if (arguments := cursor.take(KotlinSyntaxKind.TYPE_ARGUMENT_LIST)) is not None:
            tree = ParameterizedType(
                clazz=tree,
                type_parameters=self._container(
                    _as_node(arguments),
                    self._type_projection,
                    KotlinSyntaxKind.LT,
                    KotlinSyntaxKind.GT,
                ),
            )
        cursor.finish()
        return tree.with_prefix(prefix)

    def _type_projection(self, node: SyntaxNode) -> TypeTree:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        if cursor.take(KotlinSyntaxKind.MUL) is not None:
            cursor.finish()
            return Wildcard(prefix=prefix)

        variance = None
        if (modifier_list := cursor.take(KotlinSyntaxKind.MODIFIER_LIST)) is not None:
            words = _as_node(modifier_list).significant_children()
            if len(words) != 1 or words[0].text not in ("in", "out"):
                raise _unsupported(modifier_list, "only a single variance modifier is mapped")
            variance = Variance(words[0].text)

        bounded = self._type(cursor.next_node())
        cursor.finish()
        if variance is None:
            return bounded.with_prefix(prefix)
        return Wildcard(prefix=prefix, variance=variance, bounded_type=bounded)

    # -----------------------------------------------------------------------
    # Expressions
    # -----------------------------------------------------------------------

    def _expression(self, node: SyntaxNode) -> Expression:
        match node.kind:
            case KotlinSyntaxKind.REFERENCE_EXPRESSION:
                return self._identifier(node)
            case KotlinSyntaxKind.THIS_EXPRESSION | KotlinSyntaxKind.SUPER_EXPRESSION:
                if len(node.significant_children()) != 1:
                    raise _unsupported(node, "labelled or qualified receiver")
                return self._identifier(node)
            case kind if kind in LITERAL_NODE_KINDS:
                return Literal(
                    prefix=self._prefix(node),
                    value_source=node.text,
                    kind=LITERAL_NODE_KINDS[kind],
                )
            case KotlinSyntaxKind.PARENTHESIZED:
                return self._parenthesized(node)
            case KotlinSyntaxKind.BINARY_EXPRESSION:
                return self._binary(node)
            case KotlinSyntaxKind.IS_EXPRESSION:
                return self._instance_of(node)
            case KotlinSyntaxKind.BINARY_WITH_TYPE:
                return self._type_cast(node)
            case KotlinSyntaxKind.PREFIX_EXPRESSION:
                return self._prefix_unary(node)
            case KotlinSyntaxKind.POSTFIX_EXPRESSION:
                return self._postfix_unary(node)
            case KotlinSyntaxKind.CALL_EXPRESSION:
                return self._call(node)
            case KotlinSyntaxKind.DOT_QUALIFIED_EXPRESSION | KotlinSyntaxKind.SAFE_ACCESS_EXPRESSION:
                return self._qualified(node)
            case KotlinSyntaxKind.ARRAY_ACCESS_EXPRESSION:
                return self._array_access(node)
            case KotlinSyntaxKind.LAMBDA_EXPRESSION:
                return self._lambda(node)
            case KotlinSyntaxKind.CALLABLE_REFERENCE_EXPRESSION:
                return self._member_reference(node)
            case KotlinSyntaxKind.OBJECT_LITERAL:
                prefix = self._prefix(node)
                cursor = _Cursor(node)
                declaration = self._class(cursor.expect_node(KotlinSyntaxKind.OBJECT_DECLARATION))
                cursor.finish()
                return ObjectExpression(prefix=prefix, declaration=declaration)
            case KotlinSyntaxKind.IF:
                return self._if(node)
            case KotlinSyntaxKind.WHEN:
                return self._when(node)
            case KotlinSyntaxKind.TRY:
                return self._try(node)
            case KotlinSyntaxKind.RETURN:
                return self._return(node)
            case KotlinSyntaxKind.BREAK | KotlinSyntaxKind.CONTINUE:
                return self._jump(node)
            case KotlinSyntaxKind.THROW:
                prefix = self._prefix(node)
                cursor = _Cursor(node)
                cursor.expect(KotlinSyntaxKind.THROW_KEYWORD)
                exception = self._expression(cursor.next_node())
                cursor.finish()
                return Throw(prefix=prefix, exception=exception)
        raise _unsupported(node)

    def _identifier(self, element: SyntaxElement) -> Identifier:
        return Identifier(
            prefix=self._prefix(element),
            simple_name=element.text,
            type=self.symbols.type_at(element.range),
        )

    def _parenthesized(self, node: SyntaxNode) -> Parentheses:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.LPAR)
        inner = self._expression(cursor.next_node())
        after = self._prefix(cursor.expect(KotlinSyntaxKind.RPAR))
        cursor.finish()
        return Parentheses(prefix=prefix, tree=RightPadded(inner, after=after))

    def _binary(self, node: SyntaxNode) -> Expression:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        left = self._expression(cursor.next_node())
        operation = cursor.expect_node(KotlinSyntaxKind.OPERATION_REFERENCE)
        before = self._prefix(operation)
        right = self._expression(cursor.next_node())
        cursor.finish()

        symbol = operation.text
        if symbol == "=":
            return Assignment(prefix=prefix, variable=left, assignment=LeftPadded(before, right))

        if (assignment_operator := AssignmentOperator.from_symbol(symbol)) is not None:
            return AssignmentOperation(
                prefix=prefix,
                variable=left,
                operator=LeftPadded(before, assignment_operator),
                assignment=right,
                markers=self._overload(node),
            )

        if (binary_operator := BinaryOperator.from_symbol(symbol)) is not None:
            return Binary(
                prefix=prefix,
                left=left,
                operator=LeftPadded(before, binary_operator),
                right=right,
                markers=self._overload(node),
            )

        if operation.first_child(KotlinSyntaxKind.IDENTIFIER) is not None:
            return MethodInvocation(
                prefix=prefix,
                select=RightPadded(left, after=before),
                name=Identifier(simple_name=symbol),
                arguments=Container(before=Space.EMPTY, padded=(RightPadded(right),)),
                method_type=self.symbols.method_at(node.range),
                markers=Markers.of(Infix()),
            )
        raise _unsupported(operation, f"operator {symbol!r}")

    def _instance_of(self, node: SyntaxNode) -> InstanceOf:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        expression = self._expression(cursor.next_node())
        operation = cursor.expect_node(KotlinSyntaxKind.OPERATION_REFERENCE)
        before = self._prefix(operation)
        clazz = self._type(cursor.next_node())
        cursor.finish()
        return InstanceOf(
            prefix=prefix,
            expression=RightPadded(expression, after=before),
            clazz=clazz,
            markers=Markers.of(NotIs()) if operation.text == "!is" else Markers.EMPTY,
        )

    def _type_cast(self, node: SyntaxNode) -> TypeCast:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        expression = self._expression(cursor.next_node())
        operation = cursor.expect_node(KotlinSyntaxKind.OPERATION_REFERENCE)
        before = self._prefix(operation)
        clazz = self._type(cursor.next_node())
        cursor.finish()
        return TypeCast(
            prefix=prefix,
            expression=expression,
            clazz=LeftPadded(before, clazz),
            safe=operation.text == "as?",
        )

    def _prefix_unary(self, node: SyntaxNode) -> Unary:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        operation = cursor.expect_node(KotlinSyntaxKind.OPERATION_REFERENCE)
        operator = UnaryOperator.from_symbol(operation.text, postfix=False)
        if operator is None:
            raise _unsupported(operation, f"prefix operator {operation.text!r}")
        before = self._prefix(operation)
        expression = self._expression(cursor.next_node())
        cursor.finish()
        return Unary(
            prefix=prefix,
            operator=LeftPadded(before, operator),
            expression=expression,
            markers=self._overload(node),
        )

    def _postfix_unary(self, node: SyntaxNode) -> Expression:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        expression = self._expression(cursor.next_node())
        operation = cursor.expect_node(KotlinSyntaxKind.OPERATION_REFERENCE)
        before = self._prefix(operation)
        cursor.finish()

        if operation.text == "!!":
            checked = expression.markers.add(CheckNotNull(before))
            return expression.with_fields(prefix=prefix, markers=checked)

        operator = UnaryOperator.from_symbol(operation.text, postfix=True)
        if operator is None:
            raise _unsupported(operation, f"postfix operator {operation.text!r}")
        return Unary(
            prefix=prefix,
            operator=LeftPadded(before, operator),
            expression=expression,
            markers=self._overload(node),
        )

    def _call(
        self,
        node: SyntaxNode,
        select: RightPadded[Expression] | None = None,
    ) -> MethodInvocation:
        # A selector call leaves its first token to the name: the trivia
        # after `.` belongs there.
        prefix = self._prefix(node) if select is None else Space.EMPTY
        cursor = _Cursor(node)
        callee = cursor.next_node()
        if callee.kind != KotlinSyntaxKind.REFERENCE_EXPRESSION:
            raise _unsupported(callee, "call on an expression that is not a name")
        name = self._identifier(callee)

        type_parameters = None
        if (type_arguments := cursor.take(KotlinSyntaxKind.TYPE_ARGUMENT_LIST)) is not None:
            type_parameters = self._container(
                _as_node(type_arguments),
                self._type_projection,
                KotlinSyntaxKind.LT,
                KotlinSyntaxKind.GT,
            )
        arguments = self._arguments(
            cursor.take(KotlinSyntaxKind.VALUE_ARGUMENT_LIST),
            cursor.take(KotlinSyntaxKind.LAMBDA_ARGUMENT),
        )
        cursor.finish()
        return MethodInvocation(
            prefix=prefix,
            select=select,
            name=name,
            type_parameters=type_parameters,
            arguments=arguments,
            method_type=self.symbols.method_at(node.range),
        )

    def _arguments(
        self,
        argument_list: SyntaxElement | None,
        lambda_argument: SyntaxElement | None,
    ) -> Container[Expression]:
        if argument_list is not None:
            arguments = self._container(
                _as_node(argument_list),
                self._value_argument,
                KotlinSyntaxKind.LPAR,
                KotlinSyntaxKind.RPAR,
            )
        else:
            arguments = Container(
                before=Space.EMPTY,
                padded=(),
                markers=Markers.of(OmitParentheses()),
            )

        if lambda_argument is not None:
            lambda_cursor = _Cursor(_as_node(lambda_argument))
            trailing = self._lambda(lambda_cursor.expect_node(KotlinSyntaxKind.LAMBDA_EXPRESSION))
            lambda_cursor.finish()
            arguments = arguments.with_padded(
                (
                    *arguments.padded,
                    RightPadded(trailing, markers=Markers.of(TrailingLambdaArgument())),
                )
            )
        return arguments

    def _value_argument(self, node: SyntaxNode) -> Expression:
        children = node.significant_children()
        if len(children) == 1 and isinstance(children[0], SyntaxNode):
            return self._expression(children[0])
        if (
            len(children) == 3
            and children[0].kind == KotlinSyntaxKind.REFERENCE_EXPRESSION
            and children[1].kind == KotlinSyntaxKind.EQ
            and isinstance(children[2], SyntaxNode)
        ):
            prefix = self._prefix(node)
            variable = self._identifier(children[0])
            before = self._prefix(children[1])
            return Assignment(
                prefix=prefix,
                variable=variable,
                assignment=LeftPadded(before, self._expression(children[2])),
            )
        raise _unsupported(node, "spread argument")

    def _qualified(self, node: SyntaxNode) -> Expression:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        target = self._expression(cursor.next_node())
        dot = cursor.expect(KotlinSyntaxKind.DOT, KotlinSyntaxKind.SAFE_ACCESS)
        before = self._prefix(dot)
        selector = cursor.next_node()
        cursor.finish()
        markers = Markers.of(SafeCall()) if dot.kind == KotlinSyntaxKind.SAFE_ACCESS else Markers.EMPTY

        match selector.kind:
            case KotlinSyntaxKind.REFERENCE_EXPRESSION:
                return FieldAccess(
                    prefix=prefix,
                    target=target,
                    name=LeftPadded(before, self._identifier(selector)),
                    type=self.symbols.type_at(node.range),
                    markers=markers,
                )
            case KotlinSyntaxKind.CALL_EXPRESSION:
                invocation = self._call(selector, select=RightPadded(target, after=before))
                method_type = invocation.method_type or self.symbols.method_at(node.range)
                return invocation.with_fields(prefix=prefix, markers=markers, method_type=method_type)
        raise _unsupported(selector)

    def _member_reference(self, node: SyntaxNode) -> MemberReference:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        containing: Expression = Empty()
        if not cursor.at(KotlinSyntaxKind.COLONCOLON):
            containing = self._expression(cursor.next_node())
        before = self._prefix(cursor.expect(KotlinSyntaxKind.COLONCOLON))
        reference = self._identifier(
            cursor.expect(KotlinSyntaxKind.IDENTIFIER, KotlinSyntaxKind.CLASS_KEYWORD)
        )
        cursor.finish()
        return MemberReference(
            prefix=prefix,
            containing=RightPadded(containing, after=before),
            reference=reference,
            type=self.symbols.type_at(node.range),
            method_type=self.symbols.method_at(node.range),
        )

    def _array_access(self, node: SyntaxNode) -> ArrayAccess:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        indexed = self._expression(cursor.next_node())
        index = self._container(
            cursor.expect_node(KotlinSyntaxKind.INDICES),
            self._expression,
            KotlinSyntaxKind.LBRACKET,
            KotlinSyntaxKind.RBRACKET,
        )
        cursor.finish()
        return ArrayAccess(prefix=prefix, indexed=indexed, index=index, markers=self._overload(node))

    def _lambda(self, node: SyntaxNode) -> Lambda:
        prefix = self._prefix(node)
        outer = _Cursor(node)
        cursor = _Cursor(outer.expect_node(KotlinSyntaxKind.FUNCTION_LITERAL))
        outer.finish()
        cursor.expect(KotlinSyntaxKind.LBRACE)

        parameters: list[RightPadded[VariableDeclarations]] = []
        arrow = None
        if (parameter_list := cursor.take(KotlinSyntaxKind.VALUE_PARAMETER_LIST)) is not None:
            parameter_cursor = _Cursor(_as_node(parameter_list))
            while True:
                parameter = self._parameter(parameter_cursor.expect_node(KotlinSyntaxKind.VALUE_PARAMETER))
                if (comma := parameter_cursor.take(KotlinSyntaxKind.COMMA)) is None:
                    parameters.append(RightPadded(parameter))
                    break
                parameters.append(RightPadded(parameter, after=self._prefix(comma)))
            parameter_cursor.finish()
            arrow = self._prefix(cursor.expect(KotlinSyntaxKind.ARROW))
        elif (arrow_token := cursor.take(KotlinSyntaxKind.ARROW)) is not None:
            arrow = self._prefix(arrow_token)

        statements: tuple[RightPadded[Statement], ...] = ()
        if (block := cursor.take(KotlinSyntaxKind.BLOCK)) is not None:
            statements = self._statement_list(_as_node(block).significant_children())
        end = self._prefix(cursor.expect(KotlinSyntaxKind.RBRACE))
        cursor.finish()
        return Lambda(
            prefix=prefix,
            parameters=tuple(parameters),
            arrow=arrow,
            body=Block(statements=statements, end=end),
        )

    def _if(self, node: SyntaxNode) -> If:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.IF_KEYWORD)
        condition = self._control_parentheses(cursor)

        then_part = None
        if cursor.peek() is not None and not cursor.at(KotlinSyntaxKind.ELSE_KEYWORD):
            then_part = RightPadded(self._body(cursor.next_node()))

        else_part = None
        if (else_token := cursor.take(KotlinSyntaxKind.ELSE_KEYWORD)) is not None:
            before_else = self._prefix(else_token)
            else_part = Else(prefix=before_else, body=self._body(cursor.next_node()))
        cursor.finish()
        return If(prefix=prefix, if_condition=condition, then_part=then_part, else_part=else_part)

    def _when(self, node: SyntaxNode) -> When:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.WHEN_KEYWORD)
        selector = None
        if cursor.at(KotlinSyntaxKind.LPAR):
            selector = self._control_parentheses(cursor)

        open_prefix = self._prefix(cursor.expect(KotlinSyntaxKind.LBRACE))
        branches: list[RightPadded[Statement]] = []
        while cursor.at(KotlinSyntaxKind.WHEN_ENTRY):
            branches.append(RightPadded(self._when_branch(cursor.next_node())))
        end = self._prefix(cursor.expect(KotlinSyntaxKind.RBRACE))
        cursor.finish()
        return When(
            prefix=prefix,
            selector=selector,
            branches=Block(prefix=open_prefix, statements=tuple(branches), end=end),
        )

    def _when_branch(self, node: SyntaxNode) -> WhenBranch:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        expressions: list[RightPadded[Expression]] = []
        if (else_token := cursor.take(KotlinSyntaxKind.ELSE_KEYWORD)) is not None:
            otherwise = self._identifier(else_token)
            expressions.append(
                RightPadded(otherwise, after=self._prefix(cursor.expect(KotlinSyntaxKind.ARROW)))
            )
        else:
            while True:
                condition = self._when_condition(
                    cursor.expect_node(
                        KotlinSyntaxKind.WHEN_CONDITION_EXPRESSION,
                        KotlinSyntaxKind.WHEN_CONDITION_IN_RANGE,
                        KotlinSyntaxKind.WHEN_CONDITION_IS_PATTERN,
                    )
                )
                if (comma := cursor.take(KotlinSyntaxKind.COMMA)) is not None:
                    expressions.append(RightPadded(condition, after=self._prefix(comma)))
                    continue
                arrow = cursor.expect(KotlinSyntaxKind.ARROW)
                expressions.append(RightPadded(condition, after=self._prefix(arrow)))
                break

        body = self._body(cursor.next_node())
        cursor.finish()
        return WhenBranch(prefix=prefix, expressions=tuple(expressions), body=body)

    def _when_condition(self, node: SyntaxNode) -> Expression:
        cursor = _Cursor(node)
        if node.kind == KotlinSyntaxKind.WHEN_CONDITION_EXPRESSION:
            expression = self._expression(cursor.next_node())
            cursor.finish()
            return expression

        prefix = self._prefix(node)
        operation = cursor.expect_node(KotlinSyntaxKind.OPERATION_REFERENCE)
        before = self._prefix(operation)
        if node.kind == KotlinSyntaxKind.WHEN_CONDITION_IN_RANGE:
            operator = (
                BinaryOperator.NOT_CONTAINS if operation.text == "!in" else BinaryOperator.CONTAINS
            )
            right = self._expression(cursor.next_node())
            cursor.finish()
            return Binary(
                prefix=prefix,
                left=Empty(),
                operator=LeftPadded(before, operator),
                right=right,
            )

        clazz = self._type(cursor.next_node())
        cursor.finish()
        return InstanceOf(
            prefix=prefix,
            expression=RightPadded(Empty(), after=before),
            clazz=clazz,
            markers=Markers.of(NotIs()) if operation.text == "!is" else Markers.EMPTY,
        )

    def _try(self, node: SyntaxNode) -> Try:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.TRY_KEYWORD)
        body = self._block(cursor.expect_node(KotlinSyntaxKind.BLOCK))

        catches: list[Catch] = []
        while cursor.at(KotlinSyntaxKind.CATCH):
            catches.append(self._catch(cursor.next_node()))

        finally_ = None
        if (finally_node := cursor.take(KotlinSyntaxKind.FINALLY)) is not None:
            finally_cursor = _Cursor(_as_node(finally_node))
            before = self._prefix(finally_cursor.expect(KotlinSyntaxKind.FINALLY_KEYWORD))
            finally_ = LeftPadded(before, self._block(finally_cursor.expect_node(KotlinSyntaxKind.BLOCK)))
            finally_cursor.finish()
        cursor.finish()
        return Try(prefix=prefix, body=body, catches=tuple(catches), finally_=finally_)

    def _catch(self, node: SyntaxNode) -> Catch:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.CATCH_KEYWORD)
        parameters = _Cursor(cursor.expect_node(KotlinSyntaxKind.VALUE_PARAMETER_LIST))
        open_prefix = self._prefix(parameters.expect(KotlinSyntaxKind.LPAR))
        parameter = self._parameter(parameters.expect_node(KotlinSyntaxKind.VALUE_PARAMETER))
        after = self._prefix(parameters.expect(KotlinSyntaxKind.RPAR))
        parameters.finish()
        body = self._block(cursor.expect_node(KotlinSyntaxKind.BLOCK))
        cursor.finish()
        return Catch(
            prefix=prefix,
            parameter=ControlParentheses(prefix=open_prefix, tree=RightPadded(parameter, after=after)),
            body=body,
        )

    def _return(self, node: SyntaxNode) -> Return:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.RETURN_KEYWORD)
        if cursor.at(KotlinSyntaxKind.LABEL_QUALIFIER):
            raise _unsupported(_as_node(cursor.peek()), "labelled return")
        expression = self._expression(cursor.next_node()) if cursor.peek() is not None else None
        cursor.finish()
        return Return(prefix=prefix, expression=expression)

    def _jump(self, node: SyntaxNode) -> Break | Continue:
        prefix = self._prefix(node)
        cursor = _Cursor(node)
        cursor.expect(KotlinSyntaxKind.BREAK_KEYWORD, KotlinSyntaxKind.CONTINUE_KEYWORD)
        cursor.finish()
        if node.kind == KotlinSyntaxKind.BREAK:
            return Break(prefix=prefix)
        return Continue(prefix=prefix)

    # -----------------------------------------------------------------------
    # Lists
    # -----------------------------------------------------------------------

    def _container[T](
        self,
        node: SyntaxNode,
        map_element: Callable[[SyntaxNode], T],
        open_kind: KotlinSyntaxKind | None,
        close_kind: KotlinSyntaxKind | None,
    ) -> Container[T]:
        """Map a comma separated list; `()` maps to a single `Empty` element.

        A comma right before the closing delimiter becomes a `TrailingComma`.
        """
        cursor = _Cursor(node)
        before = Space.EMPTY
        if open_kind is not None:
            before = self._prefix(cursor.expect(open_kind))

        padded: list[RightPadded[T]] = []
        while cursor.peek() is not None and not cursor.at(close_kind):
            element = map_element(cursor.next_node())
            if (comma := cursor.take(KotlinSyntaxKind.COMMA)) is not None:
                after = self._prefix(comma)
                if close_kind is None or not cursor.at(close_kind):
                    padded.append(RightPadded(element, after=after))
                    continue
                suffix = self._prefix(cursor.expect(close_kind))
                cursor.finish()
                trailing = Markers.of(TrailingComma(suffix))
                padded.append(RightPadded(element, after=after, markers=trailing))
                return Container(before=before, padded=tuple(padded))
            after = Space.EMPTY
            if close_kind is not None:
                after = self._prefix(cursor.expect(close_kind))
            cursor.finish()
            padded.append(RightPadded(element, after=after))
            return Container(before=before, padded=tuple(padded))

        if padded or close_kind is None:
            raise _unsupported(node, "trailing comma without a closing delimiter")
        empty = Empty(prefix=self._prefix(cursor.expect(close_kind)))
        cursor.finish()
        return Container(before=before, padded=(RightPadded(empty),))


def _constructor_call(
    callee: Identifier | FieldAccess | ParameterizedType,
    arguments: Container[Expression],
) -> MethodInvocation:
    """Rewrite a super type with arguments (`Base<T>(x)`) as an invocation."""
    prefix = callee.prefix
    type_parameters = None
    name_tree: Identifier | FieldAccess | ParameterizedType = callee.with_prefix(Space.EMPTY)
    if isinstance(name_tree, ParameterizedType):
        type_parameters = name_tree.type_parameters
        name_tree = name_tree.clazz

    match name_tree:
        case Identifier():
            return MethodInvocation(
                prefix=prefix,
                name=name_tree,
                type_parameters=type_parameters,
                arguments=arguments,
            )
        case FieldAccess(target=target, name=name):
            return MethodInvocation(
                prefix=prefix,
                select=RightPadded(target, after=name.before),
                name=name.element,
                type_parameters=type_parameters,
                arguments=arguments,
            )
    raise TypeError(f"Unexpected constructor callee {type(name_tree).__name__}")


def _as_node(element: SyntaxElement | None) -> SyntaxNode:
    if not isinstance(element, SyntaxNode):
        if element is None:
            raise TypeError("Expected a syntax node, found nothing")
        raise _unsupported(element, "expected a node")
    return element


def _unsupported(element: SyntaxElement, detail: str | None = None) -> UnsupportedConstructError:
    return UnsupportedConstructError(element.kind.name, element.range, detail)


def detect_line_ending(text: str) -> str:
    """The first line break in `text`, `"\\n"` when there is none."""
    newline = text.find("\n")
    carriage = text.find("\r")
    if carriage == -1:
        return "\n"
    if newline == carriage + 1:
        return "\r\n"
    if newline == -1 or carriage < newline:
        return "\r"
    return "\n"


def map_tree(
    root: SyntaxNode,
    symbols: SymbolTable | None = None,
    *,
    options: MapperOptions | None = None,
    source_path: str | None = None,
) -> CompilationUnit:
    return map_source_file(root, symbols, options=options, source_path=source_path).tree


def map_source_file(
    root: SyntaxNode,
    symbols: SymbolTable | None = None,
    *,
    options: MapperOptions | None = None,
    source_path: str | None = None,
) -> MappedTree:
    """Map a FILE node, also returning diagnostics for skipped declarations."""
    mapper = KotlinTreeMapper(symbols, options, source_path=source_path)
    tree = mapper.map_compilation_unit(root)
    return MappedTree(tree=tree, diagnostics=list(mapper.diagnostics))


def map_node(
    node: SyntaxNode,
    symbols: SymbolTable | None = None,
    *,
    options: MapperOptions | None = None,
) -> Tree:
    """Map any declaration, statement, expression or type node.

    The node's own leading trivia is left out, so the reprint equals
    `node.text`.
    """
    mapper = KotlinTreeMapper(symbols, options)
    token = first_token(node)
    if token is not None:
        mapper._claimed.add(token.start)
    return mapper.map_element(node)


__all__ = [
    "KotlinTreeMapper",
    "MappedTree",
    "detect_line_ending",
    "map_node",
    "map_source_file",
    "map_tree",
]
