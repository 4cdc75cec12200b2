"""Print the lossless tree back to source text.

Printing is a pure function of the tree: every node renders to a string that
its parent concatenates. Symbols are never consulted.
"""

from __future__ import annotations

from collections.abc import Iterable

from kotlinpy.tree import (
    Annotation,
    ArrayAccess,
    Assignment,
    AssignmentOperation,
    Binary,
    Block,
    Break,
    By,
    Catch,
    CheckNotNull,
    ClassDeclaration,
    ClassKind,
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
    MemberReference,
    MethodDeclaration,
    MethodInvocation,
    Modifier,
    NamedVariable,
    NotIs,
    ObjectExpression,
    OmitBraces,
    OmitParentheses,
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
    Throw,
    TrailingComma,
    TrailingLambdaArgument,
    Tree,
    Try,
    TypeCast,
    TypeParameter,
    Unary,
    Unknown,
    VariableDeclarations,
    When,
    WhenBranch,
    WhileLoop,
    Wildcard,
)

BYTE_ORDER_MARK = "\ufeff"


def print_tree(tree: Tree) -> str:
    """Render `tree` with its own prefix and every nested trivia slot."""
    match tree:
        case Modifier(annotations=annotations, prefix=prefix, keyword=keyword):
            text = _join(annotations) + _space(prefix) + keyword
        case ClassKind(annotations=annotations, prefix=prefix, type=kind):
            text = _join(annotations) + _space(prefix) + kind.value
        case _:
            text = _space(tree.prefix) + _content(tree)

    for marker in tree.markers:
        match marker:
            case IsNullable(prefix=prefix):
                text += _space(prefix) + "?"
            case CheckNotNull(prefix=prefix):
                text += _space(prefix) + "!!"
    return text


def print_right_padded(padded: RightPadded[Tree]) -> str:
    text = print_tree(padded.element) + _space(padded.after)
    if padded.markers.has(Semicolon):
        text += ";"
    if (comma := padded.markers.find_first(TrailingComma)) is not None:
        text += "," + _space(comma.suffix)
    return text


def print_space(space: Space) -> str:
    return space.printed()


def _content(tree: Tree) -> str:
    match tree:
        case CompilationUnit():
            return _compilation_unit(tree)
        case Package(expression=expression):
            return "package" + print_tree(expression)
        case Import(qualid=qualid, alias=alias):
            text = "import" + print_tree(qualid)
            if alias is not None:
                text += _left(alias, "as")
            return text
        case Identifier(simple_name=name):
            return name
        case Literal(value_source=source):
            return source
        case Empty():
            return ""
        case Unknown(source=source):
            return source
        case Annotation(annotation_type=annotation_type, arguments=arguments):
            text = "@" + print_tree(annotation_type)
            if arguments is not None:
                text += _container(arguments, "(", ")")
            return text
        case ParameterizedType(clazz=clazz, type_parameters=type_parameters):
            return print_tree(clazz) + _container(type_parameters, "<", ">")
        case Wildcard(variance=variance, bounded_type=bounded_type):
            if variance is None or bounded_type is None:
                return "*"
            return variance.value + print_tree(bounded_type)
        case FunctionType(parameters=parameters, return_type=return_type):
            return _container(parameters, "(", ")") + _left(return_type, "->")
        case TypeParameter():
            text = "reified" if tree.markers.has(Reified) else ""
            text += _join(tree.annotations) + _join(tree.modifiers) + print_tree(tree.name)
            if tree.bounds is not None:
                text += _left(tree.bounds, ":")
            return text
        case FieldAccess(target=target, name=name):
            dot = "?." if tree.markers.has(SafeCall) else "."
            return print_tree(target) + _left(name, dot)
        case MethodInvocation():
            return _method_invocation(tree)
        case Binary(left=left, operator=operator, right=right):
            return print_tree(left) + _space(operator.before) + operator.element.symbol + print_tree(right)
        case Unary(operator=operator, expression=expression):
            if operator.element.postfix:
                return print_tree(expression) + _space(operator.before) + operator.element.symbol
            return _space(operator.before) + operator.element.symbol + print_tree(expression)
        case Assignment(variable=variable, assignment=assignment):
            return print_tree(variable) + _left(assignment, "=")
        case AssignmentOperation(variable=variable, operator=operator, assignment=assignment):
            return print_tree(variable) + _space(operator.before) + operator.element.symbol + print_tree(assignment)
        case ArrayAccess(indexed=indexed, index=index):
            return print_tree(indexed) + _container(index, "[", "]")
        case Parentheses(tree=inner) | ControlParentheses(tree=inner):
            return "(" + print_right_padded(inner) + ")"
        case Lambda():
            return _lambda(tree)
        case MemberReference(containing=containing, reference=reference):
            return print_right_padded(containing) + "::" + print_tree(reference)
        case ObjectExpression(declaration=declaration):
            return print_tree(declaration)
        case TypeCast(expression=expression, clazz=clazz, safe=safe):
            return print_tree(expression) + _left(clazz, "as?" if safe else "as")
        case InstanceOf(expression=expression, clazz=clazz):
            keyword = "!is" if tree.markers.has(NotIs) else "is"
            return print_right_padded(expression) + keyword + print_tree(clazz)
        case Block():
            return _block(tree)
        case Else(body=body):
            return "else" + print_tree(body)
        case If(if_condition=condition, then_part=then_part, else_part=else_part):
            text = "if" + print_tree(condition)
            if then_part is not None:
                text += print_right_padded(then_part)
            if else_part is not None:
                text += print_tree(else_part)
            return text
        case WhileLoop(condition=condition, body=body):
            return "while" + print_tree(condition) + print_tree(body)
        case DoWhileLoop(body=body, while_condition=while_condition):
            return "do" + print_tree(body) + _left(while_condition, "while")
        case ForEachControl(variable=variable, iterable=iterable):
            return "(" + print_right_padded(variable) + "in" + print_right_padded(iterable) + ")"
        case ForEachLoop(control=control, body=body):
            return "for" + print_tree(control) + print_tree(body)
        case WhenBranch(expressions=expressions, body=body):
            return ",".join(print_right_padded(e) for e in expressions) + "->" + print_tree(body)
        case When(selector=selector, branches=branches):
            text = "when"
            if selector is not None:
                text += print_tree(selector)
            return text + print_tree(branches)
        case Catch(parameter=parameter, body=body):
            return "catch" + print_tree(parameter) + print_tree(body)
        case Try(body=body, catches=catches, finally_=finally_):
            text = "try" + print_tree(body) + _join(catches)
            if finally_ is not None:
                text += _left(finally_, "finally")
            return text
        case Return(expression=expression):
            text = "" if tree.markers.has(ImplicitReturn) else "return"
            if expression is not None:
                text += print_tree(expression)
            return text
        case Break():
            return "break"
        case Continue():
            return "continue"
        case Throw(exception=exception):
            return "throw" + print_tree(exception)
        case NamedVariable():
            return _named_variable(tree, with_initializer=True)
        case VariableDeclarations():
            return _variable_declarations(tree)
        case MethodDeclaration():
            return _method_declaration(tree)
        case ClassDeclaration():
            return _class_declaration(tree)
        case EnumValue(name=name, arguments=arguments, body=body):
            text = print_tree(name)
            if arguments is not None:
                text += _container(arguments, "(", ")")
            if body is not None:
                text += print_tree(body)
            return text
        case EnumValueSet(enums=enums):
            return ",".join(print_right_padded(padded) for padded in enums)
    raise TypeError(f"Cannot print {type(tree).__name__}")


def _compilation_unit(unit: CompilationUnit) -> str:
    text = BYTE_ORDER_MARK if unit.charset_bom_marked else ""
    if unit.package_declaration is not None:
        text += print_right_padded(unit.package_declaration)
    text += "".join(print_right_padded(item) for item in unit.imports)
    text += "".join(print_right_padded(statement) for statement in unit.statements)
    return text + _space(unit.eof)


def _method_invocation(invocation: MethodInvocation) -> str:
    if invocation.markers.has(Infix) and invocation.select is not None:
        argument = invocation.arguments.padded[0]
        return print_right_padded(invocation.select) + print_tree(invocation.name) + print_right_padded(argument)

    text = ""
    if invocation.select is not None:
        text += print_right_padded(invocation.select)
        text += "?." if invocation.markers.has(SafeCall) else "."
    text += print_tree(invocation.name)
    if invocation.type_parameters is not None:
        text += _container(invocation.type_parameters, "<", ">")

    arguments = invocation.arguments
    regular = [p for p in arguments.padded if not p.markers.has(TrailingLambdaArgument)]
    trailing = [p for p in arguments.padded if p.markers.has(TrailingLambdaArgument)]
    if not arguments.markers.has(OmitParentheses):
        text += _space(arguments.before) + "(" + ",".join(print_right_padded(p) for p in regular) + ")"
    return text + "".join(print_right_padded(p) for p in trailing)


def _lambda(node: Lambda) -> str:
    text = "{" + ",".join(print_right_padded(p) for p in node.parameters)
    if node.arrow is not None:
        text += _space(node.arrow) + "->"
    body = node.body
    text += _space(body.prefix) + "".join(print_right_padded(s) for s in body.statements)
    return text + _space(body.end) + "}"


def _block(block: Block) -> str:
    statements = "".join(print_right_padded(s) for s in block.statements)
    if block.markers.has(SingleExpressionBlock):
        return "=" + statements + _space(block.end)
    if block.markers.has(OmitBraces):
        return statements + _space(block.end)
    return "{" + statements + _space(block.end) + "}"


def _named_variable(variable: NamedVariable, *, with_initializer: bool) -> str:
    text = print_tree(variable.name)
    if variable.type_expression is not None:
        text += _left(variable.type_expression, ":")
    if with_initializer and variable.initializer is not None:
        text += _left(variable.initializer, "by" if variable.markers.has(By) else "=")
    return text


def _variable_declarations(declarations: VariableDeclarations) -> str:
    text = _join(declarations.leading_annotations) + _join(declarations.modifiers)
    if not declarations.markers.has(Destructuring):
        text += "".join(print_right_padded(v) for v in declarations.variables)
        return text + _join(declarations.accessors)

    # `(a, b) = value`: the first variable's prefix precedes `(`, the
    # initializer sits on the last variable.
    variables = declarations.variables
    text += _space(variables[0].element.prefix) + "("
    text += ",".join(
        _named_variable(padded.element, with_initializer=False) + _space(padded.after)
        for padded in variables
    )
    text += ")"
    initializer = variables[-1].element.initializer
    if initializer is not None:
        text += _left(initializer, "=")
    return text


def _method_declaration(method: MethodDeclaration) -> str:
    text = _join(method.leading_annotations) + _join(method.modifiers)
    if method.type_parameters is not None:
        text += _container(method.type_parameters, "<", ">")
    if method.receiver is not None:
        text += print_right_padded(method.receiver) + "."
    text += print_tree(method.name)
    if not method.parameters.markers.has(OmitParentheses):
        text += _container(method.parameters, "(", ")")
    if method.return_type is not None:
        text += _left(method.return_type, ":")
    if method.body is not None:
        text += print_tree(method.body)
    return text


def _class_declaration(declaration: ClassDeclaration) -> str:
    text = _join(declaration.leading_annotations) + _join(declaration.modifiers)
    text += print_tree(declaration.kind)
    if declaration.name is not None:
        text += print_tree(declaration.name)
    if declaration.type_parameters is not None:
        text += _container(declaration.type_parameters, "<", ">")
    if declaration.primary_constructor is not None:
        text += _container(declaration.primary_constructor, "(", ")")
    if declaration.implements is not None:
        text += _container(declaration.implements, ":", "")
    if declaration.body is not None:
        text += print_tree(declaration.body)
    return text


def _container(container: Container[Tree], open_text: str, close_text: str) -> str:
    inner = ",".join(print_right_padded(padded) for padded in container.padded)
    return _space(container.before) + open_text + inner + close_text


def _left(padded: LeftPadded[Tree], keyword: str) -> str:
    return _space(padded.before) + keyword + print_tree(padded.element)


def _join(trees: Iterable[Tree]) -> str:
    return "".join(print_tree(tree) for tree in trees)


def _space(space: Space) -> str:
    return space.printed()


__all__ = ["BYTE_ORDER_MARK", "print_right_padded", "print_space", "print_tree"]
