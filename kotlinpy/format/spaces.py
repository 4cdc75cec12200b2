"""Normalize single spaces around punctuation, keywords and operators.

Every rule targets one trivia slot and asks for zero or one space. Slots that
hold a line break are left alone; a slot that holds comments only gets its
last comment's suffix adjusted, so comments are never rewritten.
"""

from __future__ import annotations

from kotlinpy.style import SpacesStyle, intellij_spaces
from kotlinpy.tree import (
    Annotation,
    ArrayAccess,
    Assignment,
    AssignmentOperation,
    Binary,
    Block,
    By,
    Catch,
    ClassDeclaration,
    CompilationUnit,
    Container,
    ControlParentheses,
    DoWhileLoop,
    Empty,
    EnumValue,
    EnumValueSet,
    ForEachControl,
    ForEachLoop,
    FunctionType,
    If,
    Infix,
    Lambda,
    LeftPadded,
    MethodDeclaration,
    MethodInvocation,
    NamedVariable,
    OmitBraces,
    OmitParentheses,
    OperatorCategory,
    ParameterizedType,
    Parentheses,
    Return,
    RightPadded,
    Semicolon,
    SingleExpressionBlock,
    Space,
    TrailingComma,
    TrailingLambdaArgument,
    Tree,
    Try,
    TypeParameter,
    Unary,
    When,
    WhenBranch,
    WhileLoop,
)
from kotlinpy.visit import TraversalState, TreeVisitor

BITWISE_INFIX_NAMES = frozenset({"and", "or", "xor", "shl", "shr", "ushr"})


def spaced(space: Space, wanted: bool) -> Space:
    """`space` with zero or one space, unless it spans a line break."""
    target = " " if wanted else ""
    if space.has_comments:
        if _has_line_break(space.last_whitespace):
            return space
        return space.with_last_whitespace(target)
    if _has_line_break(space.whitespace):
        return space
    return space.with_whitespace(target)


def _has_line_break(text: str) -> bool:
    return "\n" in text or "\r" in text


def _is_braced(tree: Tree | None) -> bool:
    return isinstance(tree, Block) and not tree.markers.has(OmitBraces)


def _fuses(symbol: str, right: Tree) -> bool:
    """Whether `symbol` written right before `right` would lex as another operator."""
    if not isinstance(right, Unary) or right.operator.element.postfix:
        return False
    return symbol[-1] in "+-" and right.operator.element.symbol[0] == symbol[-1]


class SpacesVisitor(TreeVisitor):
    def __init__(self, style: SpacesStyle | None = None) -> None:
        self.style = style if style is not None else intellij_spaces()

    def visit_node[T: Tree](self, tree: T, state: TraversalState) -> T:
        style = self.style
        match tree:
            case CompilationUnit():
                return tree.with_fields(
                    package_declaration=(
                        None
                        if tree.package_declaration is None
                        else self._semicolon(tree.package_declaration, state)
                    ),
                    imports=tuple(self._semicolon(item, state) for item in tree.imports),
                    statements=tuple(self._semicolon(item, state) for item in tree.statements),
                )
            case Block():
                return tree.with_fields(
                    statements=tuple(self._semicolon(item, state) for item in tree.statements)
                )
            case MethodDeclaration():
                return self._method_declaration(tree, state)
            case ClassDeclaration():
                return self._class_declaration(tree, state)
            case TypeParameter(bounds=bounds) if bounds is not None:
                return tree.with_fields(
                    bounds=self._left(
                        bounds,
                        style.type_parameters.before_colon_in_bounds,
                        style.type_parameters.after_colon_in_bounds,
                        state,
                    )
                )
            case NamedVariable():
                return self._named_variable(tree, state)
            case MethodInvocation():
                return self._method_invocation(tree, state)
            case Annotation(arguments=arguments) if arguments is not None:
                return tree.with_fields(
                    arguments=self._container(
                        arguments,
                        state,
                        before=style.before_parentheses.annotation_parameters,
                        within=style.within.parentheses,
                    )
                )
            case ParameterizedType():
                return tree.with_fields(
                    type_parameters=self._container(
                        tree.type_parameters, state, within=style.within.angle_brackets
                    )
                )
            case FunctionType():
                arrow = style.around_operators.arrow
                return tree.with_fields(
                    parameters=self._container(tree.parameters, state, within=style.within.parentheses),
                    return_type=self._left(tree.return_type, arrow, arrow, state),
                )
            case EnumValueSet():
                enums = self._separated(tree.enums, state)
                if enums and enums[-1].markers.has(TrailingComma):
                    enums = (*enums[:-1], self._after(enums[-1], style.other.before_comma, state))
                return tree.with_fields(enums=enums)
            case EnumValue():
                arguments = tree.arguments
                if arguments is not None:
                    arguments = self._container(
                        arguments,
                        state,
                        before=style.before_parentheses.method_call,
                        within=style.within.parentheses,
                    )
                body = tree.body
                if body is not None:
                    body = self._brace(body, state)
                return tree.with_fields(arguments=arguments, body=body)
            case If():
                return self._if(tree, state)
            case WhileLoop():
                return tree.with_fields(
                    condition=self._control(tree.condition, style.before_parentheses.while_parentheses, state),
                    body=self._brace(tree.body, state),
                )
            case DoWhileLoop():
                while_condition = tree.while_condition
                if _is_braced(tree.body):
                    while_condition = self._before(while_condition, style.other.before_keywords, state)
                control = self._control(
                    while_condition.element, style.before_parentheses.while_parentheses, state
                )
                return tree.with_fields(
                    body=self._brace(tree.body, state),
                    while_condition=while_condition.with_element(control),
                )
            case ForEachLoop():
                control = tree.control
                if state.is_live(control):
                    control = control.with_prefix(
                        spaced(control.prefix, style.before_parentheses.for_parentheses)
                    )
                return tree.with_fields(control=control, body=self._brace(tree.body, state))
            case ForEachControl():
                within = style.within.parentheses
                return tree.with_fields(
                    variable=self._element_prefix(tree.variable, within, state),
                    iterable=self._after(tree.iterable, within, state),
                )
            case When():
                selector = tree.selector
                if selector is not None:
                    selector = self._control(selector, style.before_parentheses.when_parentheses, state)
                return tree.with_fields(selector=selector, branches=self._brace(tree.branches, state))
            case WhenBranch():
                return self._when_branch(tree, state)
            case Try():
                return self._try(tree, state)
            case Catch():
                return tree.with_fields(
                    parameter=self._control(tree.parameter, style.before_parentheses.catch_parentheses, state),
                    body=self._brace(tree.body, state),
                )
            case Binary():
                return self._binary(tree, state)
            case Unary():
                return self._unary(tree, state)
            case Assignment():
                assignment = style.around_operators.assignment
                return tree.with_fields(
                    assignment=self._left(tree.assignment, assignment, assignment, state)
                )
            case AssignmentOperation():
                assignment = style.around_operators.assignment
                operator = tree.operator
                right = tree.assignment
                if state.is_live(right):
                    operator = operator.with_before(spaced(operator.before, assignment))
                    right = right.with_prefix(spaced(right.prefix, assignment))
                return tree.with_fields(operator=operator, assignment=right)
            case Parentheses():
                within = style.within.parentheses
                inner = self._element_prefix(tree.tree, within, state)
                return tree.with_fields(tree=self._after(inner, within, state))
            case ArrayAccess():
                return tree.with_fields(
                    index=self._container(tree.index, state, within=style.within.brackets)
                )
            case Lambda():
                return self._lambda(tree, state)
        return tree

    # -----------------------------------------------------------------------
    # Declarations
    # -----------------------------------------------------------------------

    def _method_declaration(self, method: MethodDeclaration, state: TraversalState) -> MethodDeclaration:
        style = self.style
        type_parameters = method.type_parameters
        if type_parameters is not None:
            type_parameters = self._container(type_parameters, state, within=style.within.angle_brackets)
        return_type = method.return_type
        if return_type is not None:
            return_type = self._left(
                return_type,
                style.other.before_colon_after_declaration_name,
                style.other.after_colon_before_declaration_type,
                state,
            )
        return method.with_fields(
            type_parameters=type_parameters,
            parameters=self._container(
                method.parameters,
                state,
                before=style.before_parentheses.method_declaration,
                within=style.within.parentheses,
            ),
            return_type=return_type,
            body=self._method_body(method.body, state),
        )

    def _method_body(self, body: Block | None, state: TraversalState) -> Block | None:
        if body is None or not state.is_live(body):
            return body
        if not body.markers.has(SingleExpressionBlock):
            return self._brace(body, state)

        assignment = self.style.around_operators.assignment
        statements = body.statements
        if statements and isinstance(statements[0].element, Return):
            implicit = statements[0].element
            expression = implicit.expression
            if expression is not None and state.is_live(expression):
                implicit = implicit.with_fields(
                    expression=expression.with_prefix(spaced(expression.prefix, assignment))
                )
            statements = (statements[0].with_element(implicit), *statements[1:])
        return body.with_fields(prefix=spaced(body.prefix, assignment), statements=statements)

    def _class_declaration(self, declaration: ClassDeclaration, state: TraversalState) -> ClassDeclaration:
        style = self.style
        type_parameters = declaration.type_parameters
        if type_parameters is not None:
            type_parameters = self._container(
                type_parameters,
                state,
                before=style.type_parameters.before_opening_angle_bracket,
                within=style.within.angle_brackets,
            )
        primary_constructor = declaration.primary_constructor
        if primary_constructor is not None:
            primary_constructor = self._container(
                primary_constructor,
                state,
                before=style.before_parentheses.method_declaration,
                within=style.within.parentheses,
            )
        implements = declaration.implements
        if implements is not None:
            implements = self._container(
                implements,
                state,
                before=style.other.before_colon_in_new_type_definition,
                first=style.other.after_colon_in_new_type_definition,
            )
        body = declaration.body
        if body is not None:
            body = self._brace(body, state)
        return declaration.with_fields(
            type_parameters=type_parameters,
            primary_constructor=primary_constructor,
            implements=implements,
            body=body,
        )

    def _named_variable(self, variable: NamedVariable, state: TraversalState) -> NamedVariable:
        style = self.style
        type_expression = variable.type_expression
        if type_expression is not None:
            type_expression = self._left(
                type_expression,
                style.other.before_colon_after_declaration_name,
                style.other.after_colon_before_declaration_type,
                state,
            )
        initializer = variable.initializer
        if initializer is not None and not variable.markers.has(By):
            assignment = style.around_operators.assignment
            initializer = self._left(initializer, assignment, assignment, state)
        return variable.with_fields(type_expression=type_expression, initializer=initializer)

    # -----------------------------------------------------------------------
    # Expressions
    # -----------------------------------------------------------------------

    def _method_invocation(self, invocation: MethodInvocation, state: TraversalState) -> MethodInvocation:
        style = self.style
        if invocation.markers.has(Infix):
            if invocation.name.simple_name not in BITWISE_INFIX_NAMES or not style.around_operators.bitwise:
                return invocation
            select = invocation.select
            arguments = invocation.arguments
            if select is None or not state.is_live(invocation.name):
                return invocation
            select = select.with_after(spaced(select.after, True))
            padded = tuple(self._element_prefix(item, True, state) for item in arguments.padded)
            return invocation.with_fields(select=select, arguments=arguments.with_padded(padded))

        type_parameters = invocation.type_parameters
        if type_parameters is not None:
            type_parameters = self._container(type_parameters, state, within=style.within.angle_brackets)
        arguments = invocation.arguments
        if not arguments.markers.has(OmitParentheses):
            arguments = self._container(
                arguments,
                state,
                before=style.before_parentheses.method_call,
                within=style.within.parentheses,
            )
        else:
            arguments = arguments.with_padded(
                tuple(self._trailing_lambda(item, state) for item in arguments.padded)
            )
        return invocation.with_fields(type_parameters=type_parameters, arguments=arguments)

    def _binary(self, binary: Binary, state: TraversalState) -> Binary:
        wanted = self._around(binary.operator.element.category)
        if wanted is None or not state.is_live(binary.right):
            return binary
        operator = binary.operator
        if not isinstance(binary.left, Empty):
            operator = operator.with_before(spaced(operator.before, wanted))
        right = binary.right
        # `a - -b` must not print as `a--b`.
        after = wanted or _fuses(operator.element.symbol, right)
        right = right.with_prefix(spaced(right.prefix, after))
        return binary.with_fields(operator=operator, right=right)

    def _unary(self, unary: Unary, state: TraversalState) -> Unary:
        wanted = self.style.around_operators.unary
        if unary.operator.element.postfix:
            return unary.with_fields(operator=unary.operator.with_before(spaced(unary.operator.before, wanted)))
        expression = unary.expression
        if not state.is_live(expression):
            return unary
        # `- -x` must not collapse into `--x`.
        if not wanted and isinstance(expression, Unary) and not expression.operator.element.postfix:
            return unary
        return unary.with_fields(expression=expression.with_prefix(spaced(expression.prefix, wanted)))

    def _lambda(self, node: Lambda, state: TraversalState) -> Lambda:
        style = self.style
        parameters = self._separated(node.parameters, state)
        arrow = node.arrow
        body = node.body
        if arrow is not None and parameters:
            arrow = spaced(arrow, style.around_operators.arrow)
            statements = body.statements
            if statements and state.is_live(statements[0].element):
                statements = (self._element_prefix(statements[0], style.around_operators.arrow, state), *statements[1:])
                body = body.with_fields(statements=statements)
        return node.with_fields(parameters=parameters, arrow=arrow, body=body)

    # -----------------------------------------------------------------------
    # Control flow
    # -----------------------------------------------------------------------

    def _if(self, node: If, state: TraversalState) -> If:
        style = self.style
        then_part = node.then_part
        if then_part is not None:
            then_part = then_part.with_element(self._brace(then_part.element, state))
        else_part = node.else_part
        if else_part is not None and state.is_live(else_part):
            if then_part is not None and _is_braced(then_part.element):
                else_part = else_part.with_prefix(spaced(else_part.prefix, style.other.before_keywords))
            else_part = else_part.with_fields(body=self._brace(else_part.body, state))
        return node.with_fields(
            if_condition=self._control(node.if_condition, style.before_parentheses.if_parentheses, state),
            then_part=then_part,
            else_part=else_part,
        )

    def _when_branch(self, branch: WhenBranch, state: TraversalState) -> WhenBranch:
        arrow = self.style.around_operators.arrow
        expressions = self._separated(branch.expressions, state)
        if expressions:
            expressions = (*expressions[:-1], self._after(expressions[-1], arrow, state))
        body = branch.body
        if state.is_live(body):
            body = body.with_prefix(spaced(body.prefix, arrow))
        return branch.with_fields(expressions=expressions, body=body)

    def _try(self, node: Try, state: TraversalState) -> Try:
        before_keywords = self.style.other.before_keywords
        catches = tuple(
            catch.with_prefix(spaced(catch.prefix, before_keywords)) if state.is_live(catch) else catch
            for catch in node.catches
        )
        finally_ = node.finally_
        if finally_ is not None and state.is_live(finally_.element):
            finally_ = finally_.with_before(spaced(finally_.before, before_keywords))
            finally_ = finally_.with_element(self._brace(finally_.element, state))
        return node.with_fields(body=self._brace(node.body, state), catches=catches, finally_=finally_)

    def _control(self, control: ControlParentheses, wanted: bool, state: TraversalState) -> ControlParentheses:
        """Space before `(` of a control construct and inside its parentheses."""
        if not state.is_live(control):
            return control
        within = self.style.within.parentheses
        inner = self._element_prefix(control.tree, within, state)
        inner = self._after(inner, within, state)
        return control.with_fields(prefix=spaced(control.prefix, wanted), tree=inner)

    # -----------------------------------------------------------------------
    # Slots
    # -----------------------------------------------------------------------

    def _around(self, category: OperatorCategory) -> bool | None:
        around = self.style.around_operators
        match category:
            case OperatorCategory.ASSIGNMENT:
                return around.assignment
            case OperatorCategory.LOGICAL:
                return around.logical
            case OperatorCategory.EQUALITY:
                return around.equality
            case OperatorCategory.RELATIONAL:
                return around.relational
            case OperatorCategory.BITWISE:
                return around.bitwise
            case OperatorCategory.ADDITIVE:
                return around.additive
            case OperatorCategory.MULTIPLICATIVE:
                return around.multiplicative
            case OperatorCategory.UNARY:
                return around.unary
            case OperatorCategory.RANGE:
                return around.range
            case OperatorCategory.ELVIS:
                return around.elvis
            case OperatorCategory.ARROW:
                return around.arrow
        # Keyword operators (`in`, `!in`) always need their spaces.
        return None

    def _brace[T: Tree](self, tree: T, state: TraversalState) -> T:
        """Space before the `{` of a braced block."""
        if not _is_braced(tree) or not state.is_live(tree):
            return tree
        return tree.with_prefix(spaced(tree.prefix, self.style.other.before_left_brace))

    def _semicolon[T](self, padded: RightPadded[T], state: TraversalState) -> RightPadded[T]:
        if not padded.markers.has(Semicolon) or not state.is_live(padded.element):
            return padded
        return padded.with_after(spaced(padded.after, self.style.other.before_semicolon))

    def _left[T: Tree](
        self,
        padded: LeftPadded[T],
        before: bool,
        after: bool,
        state: TraversalState,
    ) -> LeftPadded[T]:
        """Space before and after the keyword or operator of a left padded element."""
        element = padded.element
        if not state.is_live(element):
            return padded
        return LeftPadded(
            spaced(padded.before, before),
            element.with_prefix(spaced(element.prefix, after)),
            padded.markers,
        )

    def _before[T: Tree](self, padded: LeftPadded[T], wanted: bool, state: TraversalState) -> LeftPadded[T]:
        if not state.is_live(padded.element):
            return padded
        return padded.with_before(spaced(padded.before, wanted))

    def _after[T: Tree](self, padded: RightPadded[T], wanted: bool, state: TraversalState) -> RightPadded[T]:
        if not state.is_live(padded.element):
            return padded
        return padded.with_after(spaced(padded.after, wanted))

    def _element_prefix[T: Tree](self, padded: RightPadded[T], wanted: bool, state: TraversalState) -> RightPadded[T]:
        element = padded.element
        if not state.is_live(element):
            return padded
        return padded.with_element(element.with_prefix(spaced(element.prefix, wanted)))

    def _trailing_lambda[T: Tree](self, padded: RightPadded[T], state: TraversalState) -> RightPadded[T]:
        if not padded.markers.has(TrailingLambdaArgument):
            return padded
        return self._element_prefix(padded, self.style.other.before_left_brace, state)

    def _trailing_comma[T: Tree](
        self, padded: RightPadded[T], within: bool | None, state: TraversalState
    ) -> RightPadded[T]:
        """Space before a trailing `,` and between it and the closing delimiter."""
        padded = self._after(padded, self.style.other.before_comma, state)
        comma = padded.markers.find_first(TrailingComma)
        if within is None or comma is None or not state.is_live(padded.element):
            return padded
        suffix = spaced(comma.suffix, within)
        if suffix is comma.suffix:
            return padded
        return padded.with_markers(padded.markers.remove(TrailingComma).add(TrailingComma(suffix)))

    def _separated[T: Tree](
        self, items: tuple[RightPadded[T], ...], state: TraversalState
    ) -> tuple[RightPadded[T], ...]:
        """Comma spacing for a bare comma separated run."""
        other = self.style.other
        last = len(items) - 1
        result: list[RightPadded[T]] = []
        for index, item in enumerate(items):
            if index > 0:
                item = self._element_prefix(item, other.after_comma, state)
            if index < last:
                item = self._after(item, other.before_comma, state)
            result.append(item)
        return tuple(result)

    def _container[T: Tree](
        self,
        container: Container[T],
        state: TraversalState,
        *,
        before: bool | None = None,
        within: bool | None = None,
        first: bool | None = None,
    ) -> Container[T]:
        """Comma, delimiter and within-delimiter spacing of a container.

        `first` overrides `within` for the first element's prefix; trailing
        lambdas sit outside the delimiters and only get the brace rule.
        """
        padded = container.padded
        if not padded:
            return container
        regular = [item for item in padded if not item.markers.has(TrailingLambdaArgument)]
        last_regular = len(regular) - 1
        other = self.style.other
        first_wanted = first if first is not None else within

        result: list[RightPadded[T]] = []
        for index, item in enumerate(padded):
            if item.markers.has(TrailingLambdaArgument):
                result.append(self._trailing_lambda(item, state))
                continue
            if index == 0:
                if first_wanted is not None:
                    item = self._element_prefix(item, first_wanted, state)
            else:
                item = self._element_prefix(item, other.after_comma, state)
            if index < last_regular:
                item = self._after(item, other.before_comma, state)
            elif item.markers.has(TrailingComma):
                item = self._trailing_comma(item, within, state)
            elif within is not None:
                item = self._after(item, within, state)
            result.append(item)

        before_space = container.before
        if before is not None and state.is_live(padded[0].element):
            before_space = spaced(before_space, before)
        return container.with_before(before_space).with_padded(tuple(result))


__all__ = ["BITWISE_INFIX_NAMES", "SpacesVisitor", "spaced"]
