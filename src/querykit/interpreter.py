"""
Expression interpreter.

Evaluates expression trees built from querykit.expressions and turns
LambdaExpressions into ordinary Python callables.

    accessor = compile_lambda(
        LambdaExpression(
            parameters=(x,),
            body=MemberExpression(x, "id"),
        )
    )
    accessor(animal)  ->  animal.id

Supported: constants, defaults, parameters, member access, binary and unary
operators, type tests, conditionals, lambdas, invocations, method calls,
indexing, construction and initializers, blocks, switch, try.

Not supported (raise UnsupportedExpressionError): loop, goto, label,
dynamic and runtime-variable nodes.
"""

import operator
from collections import ChainMap
from typing import Any, Callable, Mapping, Optional

from querykit.errors import InvalidArgumentError, UnsupportedExpressionError, require
from querykit.expressions import (
    BinaryExpression,
    BinaryOperator,
    BlockExpression,
    ConditionalExpression,
    ConstantExpression,
    DefaultExpression,
    Expression,
    IndexExpression,
    InvocationExpression,
    LambdaExpression,
    ListInitExpression,
    MemberAssignment,
    MemberExpression,
    MemberInitExpression,
    MemberListBinding,
    MemberMemberBinding,
    MethodCallExpression,
    NewArrayExpression,
    NewExpression,
    ParameterExpression,
    SwitchExpression,
    TryExpression,
    TypeBinaryExpression,
    UnaryExpression,
    UnaryOperator,
)

Scope = ChainMap

_OPERATORS = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUBTRACT: operator.sub,
    BinaryOperator.MULTIPLY: operator.mul,
    BinaryOperator.DIVIDE: operator.truediv,
    BinaryOperator.FLOOR_DIVIDE: operator.floordiv,
    BinaryOperator.MODULO: operator.mod,
    BinaryOperator.POWER: operator.pow,
    BinaryOperator.EQUALS: operator.eq,
    BinaryOperator.NOT_EQUALS: operator.ne,
    BinaryOperator.GREATER_THAN: operator.gt,
    BinaryOperator.GREATER_EQUAL: operator.ge,
    BinaryOperator.LESS_THAN: operator.lt,
    BinaryOperator.LESS_EQUAL: operator.le,
}

_DEFAULTS = (int, float, complex, bool, str, bytes, tuple, list, dict, set, frozenset)


def evaluate(node: Expression, env: Optional[Mapping[ParameterExpression, Any]] = None) -> Any:
    """
    Evaluate node with the given parameter bindings.

    Args:
        node: Root of the tree
        env: Values for free parameters (optional)

    Raises:
        MissingArgumentError: node is None
        InvalidArgumentError: a parameter is not bound
        UnsupportedExpressionError: the tree holds a node kind listed above as unsupported
    """
    require(node, "node")
    return _eval(node, ChainMap(dict(env or {})))


def compile_lambda(node: LambdaExpression) -> Callable[..., Any]:
    """Turn a LambdaExpression into a Python callable."""
    require(node, "node")
    if not isinstance(node, LambdaExpression):
        raise TypeError(f"Expected LambdaExpression, got {type(node).__name__}")
    return _make_function(node, ChainMap({}))


def _make_function(node: LambdaExpression, scope: Scope) -> Callable[..., Any]:
    def function(*args):
        if len(args) != len(node.parameters):
            raise TypeError(
                f"{node.name or 'lambda'} expects {len(node.parameters)} argument(s), got {len(args)}"
            )
        return _eval(node.body, scope.new_child(dict(zip(node.parameters, args))))

    function.__name__ = node.name or "lambda"
    return function


def _eval(node: Expression, scope: Scope) -> Any:
    if isinstance(node, ConstantExpression):
        return node.value

    if isinstance(node, ParameterExpression):
        if node not in scope:
            raise InvalidArgumentError(f"Parameter {node.name} is not bound", "node")
        return scope[node]

    if isinstance(node, MemberExpression):
        return getattr(_eval(node.expression, scope), node.member)

    if isinstance(node, BinaryExpression):
        return _eval_binary(node, scope)

    if isinstance(node, UnaryExpression):
        operand = _eval(node.operand, scope)
        if node.operator == UnaryOperator.NOT:
            return not operand
        if node.operator == UnaryOperator.NEGATE:
            return -operand
        return node.target_type(operand)

    if isinstance(node, TypeBinaryExpression):
        return isinstance(_eval(node.expression, scope), node.type_operand)

    if isinstance(node, DefaultExpression):
        return node.value_type() if node.value_type in _DEFAULTS else None

    if isinstance(node, ConditionalExpression):
        if _eval(node.test, scope):
            return _eval(node.if_true, scope)
        return _eval(node.if_false, scope)

    if isinstance(node, LambdaExpression):
        return _make_function(node, scope)

    if isinstance(node, InvocationExpression):
        function = _eval(node.expression, scope)
        return function(*_eval_all(node.arguments, scope))

    if isinstance(node, MethodCallExpression):
        args = _eval_all(node.arguments, scope)
        if node.instance is None:
            return node.method(*args)
        target = _eval(node.instance, scope)
        if isinstance(node.method, str):
            return getattr(target, node.method)(*args)
        return node.method(target, *args)

    if isinstance(node, IndexExpression):
        target = _eval(node.instance, scope)
        args = _eval_all(node.arguments, scope)
        return target[args[0] if len(args) == 1 else tuple(args)]

    if isinstance(node, NewExpression):
        args = _eval_all(node.arguments, scope)
        if node.members:
            return node.constructor(**dict(zip(node.members, args)))
        return node.constructor(*args)

    if isinstance(node, NewArrayExpression):
        return _eval_all(node.expressions, scope)

    if isinstance(node, ListInitExpression):
        collection = _eval(node.new_expression, scope)
        _apply_initializers(collection, node.initializers, scope)
        return collection

    if isinstance(node, MemberInitExpression):
        instance = _eval(node.new_expression, scope)
        _apply_bindings(instance, node.bindings, scope)
        return instance

    if isinstance(node, BlockExpression):
        inner = scope.new_child({variable: None for variable in node.variables})
        result = None
        for expression in node.expressions:
            result = _eval(expression, inner)
        return result

    if isinstance(node, SwitchExpression):
        value = _eval(node.switch_value, scope)
        for case in node.cases:
            if any(_eval(test, scope) == value for test in case.test_values):
                return _eval(case.body, scope)
        if node.default_body is None:
            return None
        return _eval(node.default_body, scope)

    if isinstance(node, TryExpression):
        return _eval_try(node, scope)

    raise UnsupportedExpressionError(f"Unsupported Expression type: {type(node)}")


def _eval_all(nodes, scope: Scope) -> list:
    return [_eval(node, scope) for node in nodes]


def _eval_binary(node: BinaryExpression, scope: Scope) -> Any:
    op = node.operator
    if op == BinaryOperator.ASSIGN:
        value = _eval(node.right, scope)
        _assign(node.left, value, scope)
        return value

    left = _eval(node.left, scope)
    # Short-circuit operators only evaluate the right side when needed
    if op == BinaryOperator.AND:
        return left and _eval(node.right, scope)
    if op == BinaryOperator.OR:
        return left or _eval(node.right, scope)
    if op == BinaryOperator.COALESCE:
        return left if left is not None else _eval(node.right, scope)

    return _OPERATORS[op](left, _eval(node.right, scope))


def _assign(target: Expression, value: Any, scope: Scope) -> None:
    if isinstance(target, ParameterExpression):
        for mapping in scope.maps:
            if target in mapping:
                mapping[target] = value
                return
        scope[target] = value
    elif isinstance(target, MemberExpression):
        setattr(_eval(target.expression, scope), target.member, value)
    elif isinstance(target, IndexExpression):
        container = _eval(target.instance, scope)
        args = _eval_all(target.arguments, scope)
        container[args[0] if len(args) == 1 else tuple(args)] = value
    else:
        raise UnsupportedExpressionError(f"Cannot assign to {type(target).__name__}")


def _apply_initializers(collection: Any, initializers, scope: Scope) -> None:
    for init in initializers:
        getattr(collection, init.add_method)(*_eval_all(init.arguments, scope))


def _apply_bindings(instance: Any, bindings, scope: Scope) -> None:
    for binding in bindings:
        if isinstance(binding, MemberAssignment):
            setattr(instance, binding.member, _eval(binding.expression, scope))
        elif isinstance(binding, MemberListBinding):
            _apply_initializers(getattr(instance, binding.member), binding.initializers, scope)
        elif isinstance(binding, MemberMemberBinding):
            _apply_bindings(getattr(instance, binding.member), binding.bindings, scope)
        else:
            raise UnsupportedExpressionError(f"Unsupported member binding: {type(binding)}")


def _eval_try(node: TryExpression, scope: Scope) -> Any:
    try:
        return _eval(node.body, scope)
    except Exception as exc:
        for handler in node.handlers:
            if not isinstance(exc, handler.test):
                continue
            inner = scope.new_child({handler.variable: exc} if handler.variable else {})
            if handler.filter is not None and not _eval(handler.filter, inner):
                continue
            return _eval(handler.body, inner)
        if node.fault is not None:
            _eval(node.fault, scope)
        raise
    finally:
        if node.finally_body is not None:
            _eval(node.finally_body, scope)
