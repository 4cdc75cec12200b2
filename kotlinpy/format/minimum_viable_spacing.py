"""Insert the whitespace a tree needs to print as valid, re-parseable source.

Trees built or rewritten in code can leave two words glued together
(`funfoo`, `returnx`) or two statements on one line. This pass only ever adds
whitespace: one space between words, a line break between statements that
have no `;` between them.
"""

from __future__ import annotations

from kotlinpy.style import TabsAndIndentsStyle, intellij_tabs_and_indents
from kotlinpy.tree import (
    Annotation,
    ArrayAccess,
    Assignment,
    AssignmentOperation,
    Binary,
    BinaryOperator,
    Block,
    Break,
    By,
    ClassDeclaration,
    ClassKind,
    CompilationUnit,
    Continue,
    DoWhileLoop,
    Else,
    Empty,
    FieldAccess,
    ForEachControl,
    ForEachLoop,
    Identifier,
    If,
    ImplicitReturn,
    Import,
    Infix,
    InstanceOf,
    Literal,
    MemberReference,
    MethodDeclaration,
    MethodInvocation,
    Modifier,
    NamedVariable,
    ObjectExpression,
    OmitBraces,
    Package,
    Reified,
    Return,
    RightPadded,
    Semicolon,
    Space,
    Throw,
    Tree,
    Try,
    TypeCast,
    TypeParameter,
    Unary,
    Unknown,
    VariableDeclarations,
    When,
    WhileLoop,
    Wildcard,
)
from kotlinpy.visit import TraversalState, TreeVisitor

_KEYWORD_OPERATORS = frozenset({BinaryOperator.CONTAINS, BinaryOperator.NOT_CONTAINS})


def ensure_space(space: Space) -> Space:
    """A single space where there is none; anything else is kept."""
    if space.is_empty:
        return Space.SINGLE_SPACE
    return space


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _is_braced(tree: Tree) -> bool:
    return isinstance(tree, Block) and not tree.markers.has(OmitBraces)


def starts_with_word(tree: Tree) -> bool:
    """Whether the first printed character after `tree.prefix` is a word character."""
    match tree:
        case Identifier(simple_name=name):
            return bool(name) and _is_word_char(name[0])
        case Literal(value_source=source) | Unknown(source=source):
            return bool(source) and _is_word_char(source[0])
        case FieldAccess(target=target):
            return _leads_with_word(target)
        case MethodInvocation(select=select, name=name):
            if select is not None:
                return _leads_with_word(select.element)
            return _leads_with_word(name)
        case Binary(left=left):
            return _leads_with_word(left)
        case Assignment(variable=variable) | AssignmentOperation(variable=variable):
            return _leads_with_word(variable)
        case ArrayAccess(indexed=indexed):
            return _leads_with_word(indexed)
        case MemberReference(containing=containing):
            return _leads_with_word(containing.element)
        case TypeCast(expression=expression):
            return _leads_with_word(expression)
        case InstanceOf(expression=expression):
            return _leads_with_word(expression.element)
        case Unary(operator=operator, expression=expression):
            return operator.element.postfix and _leads_with_word(expression)
        case Return(expression=expression) if tree.markers.has(ImplicitReturn):
            return expression is not None and _leads_with_word(expression)
        case Block():
            return False
        case VariableDeclarations() | MethodDeclaration() | ClassDeclaration():
            leading = tree.leading_annotations
            return not leading and not _first_modifier_annotated(tree.modifiers)
        case (
            If() | When() | Try() | Return() | Break() | Continue() | Throw()
            | WhileLoop() | DoWhileLoop() | ForEachLoop() | ObjectExpression()
        ):
            return True
    return False


def _leads_with_word(tree: Tree) -> bool:
    # A nested prefix sits right after the outer keyword and already separates it.
    return tree.prefix.is_empty and starts_with_word(tree)


def _first_modifier_annotated(modifiers: tuple[Modifier, ...]) -> bool:
    return bool(modifiers) and bool(modifiers[0].annotations)


class MinimumViableSpacingVisitor(TreeVisitor):
    def __init__(self, tabs_and_indents: TabsAndIndentsStyle | None = None) -> None:
        self.tabs_and_indents = (
            tabs_and_indents if tabs_and_indents is not None else intellij_tabs_and_indents()
        )
        self._depth = 0
        self._line_ending = "\n"

    def visit[T: Tree](self, tree: T, state: TraversalState) -> T:
        if isinstance(tree, CompilationUnit):
            self._line_ending = tree.line_ending
        nested = _is_braced(tree)
        if nested:
            self._depth += 1
        try:
            return super().visit(tree, state)
        finally:
            if nested:
                self._depth -= 1

    def visit_node[T: Tree](self, tree: T, state: TraversalState) -> T:
        match tree:
            case CompilationUnit():
                return self._compilation_unit(tree, state)
            case Block():
                return tree.with_fields(statements=self._separate(tree.statements, None, state))
            case ClassDeclaration():
                annotations, modifiers, _ = self._words(tree.leading_annotations, tree.modifiers, state)
                kind = self._class_kind(tree.kind, state, preceded=bool(annotations or modifiers))
                name = tree.name
                if name is not None:
                    name = self._ensure_prefix(name, state)
                return tree.with_fields(
                    leading_annotations=annotations, modifiers=modifiers, kind=kind, name=name
                )
            case MethodDeclaration():
                return self._method_declaration(tree, state)
            case VariableDeclarations():
                annotations, modifiers, preceded = self._words(
                    tree.leading_annotations, tree.modifiers, state
                )
                variables = tree.variables
                if preceded and variables:
                    first = variables[0]
                    variables = (first.with_element(self._ensure_prefix(first.element, state)), *variables[1:])
                accessors = tuple(self._ensure_prefix(accessor, state) for accessor in tree.accessors)
                return tree.with_fields(
                    leading_annotations=annotations,
                    modifiers=modifiers,
                    variables=variables,
                    accessors=_same_or_new(tree.accessors, list(accessors)),
                )
            case NamedVariable(initializer=initializer) if initializer is not None and tree.markers.has(By):
                if not state.is_live(initializer.element):
                    return tree
                initializer = initializer.with_before(ensure_space(initializer.before))
                return tree.with_fields(
                    initializer=initializer.with_element(self._ensure_prefix(initializer.element, state))
                )
            case TypeParameter():
                return self._type_parameter(tree, state)
            case Wildcard(bounded_type=bounded_type) if bounded_type is not None:
                return tree.with_fields(bounded_type=self._ensure_prefix(bounded_type, state))
            case Package(expression=expression):
                return tree.with_fields(expression=self._ensure_prefix(expression, state))
            case Import():
                alias = tree.alias
                if alias is not None and state.is_live(alias.element):
                    alias = alias.with_before(ensure_space(alias.before))
                    alias = alias.with_element(self._ensure_prefix(alias.element, state))
                return tree.with_fields(qualid=self._ensure_prefix(tree.qualid, state), alias=alias)
            case Return(expression=expression) if expression is not None:
                if tree.markers.has(ImplicitReturn):
                    return tree
                return tree.with_fields(expression=self._ensure_word(expression, state))
            case Throw(exception=exception):
                return tree.with_fields(exception=self._ensure_word(exception, state))
            case Binary(operator=operator) if operator.element in _KEYWORD_OPERATORS:
                if not state.is_live(tree.right):
                    return tree
                if not isinstance(tree.left, Empty):
                    operator = operator.with_before(ensure_space(operator.before))
                return tree.with_fields(operator=operator, right=self._ensure_prefix(tree.right, state))
            case InstanceOf():
                if not state.is_live(tree.clazz):
                    return tree
                expression = tree.expression
                if not isinstance(expression.element, Empty):
                    expression = expression.with_after(ensure_space(expression.after))
                return tree.with_fields(expression=expression, clazz=self._ensure_prefix(tree.clazz, state))
            case TypeCast(clazz=clazz):
                if not state.is_live(clazz.element):
                    return tree
                clazz = clazz.with_before(ensure_space(clazz.before))
                return tree.with_fields(clazz=clazz.with_element(self._ensure_prefix(clazz.element, state)))
            case MethodInvocation(select=select) if select is not None and tree.markers.has(Infix):
                if not state.is_live(tree.name):
                    return tree
                arguments = tree.arguments
                padded = tuple(
                    item.with_element(self._ensure_prefix(item.element, state)) for item in arguments.padded
                )
                return tree.with_fields(
                    select=select.with_after(ensure_space(select.after)),
                    arguments=arguments.with_padded(padded),
                )
            case If():
                return self._if(tree, state)
            case ForEachControl():
                iterable = tree.iterable
                if not state.is_live(iterable.element):
                    return tree
                return tree.with_fields(
                    variable=tree.variable.with_after(ensure_space(tree.variable.after)),
                    iterable=iterable.with_element(self._ensure_prefix(iterable.element, state)),
                )
            case DoWhileLoop():
                body = self._ensure_word(tree.body, state)
                while_condition = tree.while_condition
                if not _is_braced(body) and state.is_live(while_condition.element):
                    while_condition = while_condition.with_before(ensure_space(while_condition.before))
                return tree.with_fields(body=body, while_condition=while_condition)
        return tree

    # -----------------------------------------------------------------------
    # Declarations
    # -----------------------------------------------------------------------

    def _method_declaration(self, method: MethodDeclaration, state: TraversalState) -> MethodDeclaration:
        annotations, modifiers, preceded = self._words(method.leading_annotations, method.modifiers, state)
        receiver = method.receiver
        name = method.name
        if preceded and method.type_parameters is None:
            if receiver is not None:
                receiver = receiver.with_element(self._ensure_prefix(receiver.element, state))
            else:
                name = self._ensure_prefix(name, state)
        return method.with_fields(
            leading_annotations=annotations, modifiers=modifiers, receiver=receiver, name=name
        )

    def _type_parameter(self, parameter: TypeParameter, state: TraversalState) -> TypeParameter:
        reified = parameter.markers.has(Reified)
        annotations, modifiers, preceded = self._words(
            parameter.annotations, parameter.modifiers, state, preceded=reified
        )
        name = self._ensure_prefix(parameter.name, state) if preceded else parameter.name
        return parameter.with_fields(annotations=annotations, modifiers=modifiers, name=name)

    def _class_kind(self, kind: ClassKind, state: TraversalState, *, preceded: bool) -> ClassKind:
        annotations = []
        for annotation in kind.annotations:
            annotations.append(self._ensure_prefix(annotation, state) if preceded else annotation)
            preceded = True
        kind = kind.with_fields(annotations=_same_or_new(kind.annotations, annotations))
        return self._ensure_prefix(kind, state) if preceded else kind

    def _words(
        self,
        annotations: tuple[Annotation, ...],
        modifiers: tuple[Modifier, ...],
        state: TraversalState,
        *,
        preceded: bool = False,
    ) -> tuple[tuple[Annotation, ...], tuple[Modifier, ...], bool]:
        """Separate a run of annotations and modifier keywords.

        Returns the rewritten run and whether any word was printed, so the
        caller knows if the following name needs a space.
        """
        new_annotations = []
        for annotation in annotations:
            new_annotations.append(self._ensure_prefix(annotation, state) if preceded else annotation)
            preceded = True

        new_modifiers = []
        for modifier in modifiers:
            inner = []
            for annotation in modifier.annotations:
                inner.append(self._ensure_prefix(annotation, state) if preceded else annotation)
                preceded = True
            modifier = modifier.with_fields(annotations=_same_or_new(modifier.annotations, inner))
            new_modifiers.append(self._ensure_prefix(modifier, state) if preceded else modifier)
            preceded = True

        return (
            _same_or_new(annotations, new_annotations),
            _same_or_new(modifiers, new_modifiers),
            preceded,
        )

    # -----------------------------------------------------------------------
    # Statements
    # -----------------------------------------------------------------------

    def _compilation_unit(self, unit: CompilationUnit, state: TraversalState) -> CompilationUnit:
        previous: RightPadded[Tree] | None = unit.package_declaration
        imports = self._separate(unit.imports, previous, state)
        if imports:
            previous = imports[-1]
        statements = self._separate(unit.statements, previous, state)
        return unit.with_fields(imports=imports, statements=statements)

    def _separate[T: Tree](
        self,
        items: tuple[RightPadded[T], ...],
        previous: RightPadded[Tree] | None,
        state: TraversalState,
    ) -> tuple[RightPadded[T], ...]:
        """Put statements that share a line without a `;` on separate lines."""
        result: list[RightPadded[T]] = []
        for item in items:
            element = item.element
            if (
                previous is not None
                and not previous.markers.has(Semicolon)
                and not element.prefix.contains_newline()
                and state.is_live(element)
            ):
                item = item.with_element(element.with_prefix(self._line_break(element.prefix)))
            result.append(item)
            previous = item
        return _same_or_new(items, result)

    def _line_break(self, prefix: Space) -> Space:
        line = Space(self._line_ending + self.tabs_and_indents.indent(self._depth))
        if prefix.has_comments:
            return Space.merge(line, prefix)
        return line

    def _if(self, node: If, state: TraversalState) -> If:
        else_part = node.else_part
        if else_part is None or not state.is_live(else_part):
            return node
        then_part = node.then_part
        if then_part is None or not _is_braced(then_part.element):
            else_part = else_part.with_prefix(ensure_space(else_part.prefix))
        return node.with_fields(else_part=self._else_body(else_part, state))

    def _else_body(self, else_part: Else, state: TraversalState) -> Else:
        return else_part.with_fields(body=self._ensure_word(else_part.body, state))

    # -----------------------------------------------------------------------
    # Slots
    # -----------------------------------------------------------------------

    def _ensure_prefix[T: Tree](self, tree: T, state: TraversalState) -> T:
        if not state.is_live(tree):
            return tree
        return tree.with_prefix(ensure_space(tree.prefix))

    def _ensure_word[T: Tree](self, tree: T, state: TraversalState) -> T:
        """Separate `tree` from a preceding keyword when it starts with a word."""
        if not tree.prefix.is_empty or not starts_with_word(tree):
            return tree
        return self._ensure_prefix(tree, state)


def _same_or_new[T](old: tuple[T, ...], new: list[T]) -> tuple[T, ...]:
    if len(old) == len(new) and all(a is b for a, b in zip(old, new, strict=True)):
        return old
    return tuple(new)


__all__ = ["MinimumViableSpacingVisitor", "ensure_space", "starts_with_word"]
