"""
Structural decomposition of expression nodes.

One accessor per node variant. Each returns the node's immediate
components as a flat tuple, in a fixed order, so callers can unpack a
node in one line:

    params, body = deconstruct_lambda(node)
    operator, left, right = deconstruct_binary(body)

deconstruct(node) picks the accessor by variant.

IMPORTANT:
    Every accessor raises MissingArgumentError for None and TypeError
    for a node of the wrong variant. Nothing is copied or evaluated.
"""

from typing import Any, Callable, Dict, Tuple

from querykit.errors import require
from querykit.expressions import (
    BinaryExpression,
    BlockExpression,
    CatchBlock,
    ConditionalExpression,
    ConstantExpression,
    DefaultExpression,
    DynamicExpression,
    ElementInit,
    GotoExpression,
    IndexExpression,
    InvocationExpression,
    LabelExpression,
    LabelTarget,
    LambdaExpression,
    ListInitExpression,
    LoopExpression,
    MemberAssignment,
    MemberBinding,
    MemberExpression,
    MemberInitExpression,
    MemberListBinding,
    MemberMemberBinding,
    MethodCallExpression,
    NewArrayExpression,
    NewExpression,
    ParameterExpression,
    RuntimeVariablesExpression,
    SwitchCase,
    SwitchExpression,
    TryExpression,
    TypeBinaryExpression,
    UnaryExpression,
)


def _check(node: Any, variant: type) -> Any:
    require(node, "node")
    if not isinstance(node, variant):
        raise TypeError(f"Expected {variant.__name__}, got {type(node).__name__}")
    return node


def deconstruct_binary(node: BinaryExpression) -> Tuple:
    """(operator, left, right)"""
    _check(node, BinaryExpression)
    return node.operator, node.left, node.right


def deconstruct_unary(node: UnaryExpression) -> Tuple:
    """(operator, operand)"""
    _check(node, UnaryExpression)
    return node.operator, node.operand


def deconstruct_block(node: BlockExpression) -> Tuple:
    """(node_type, expressions, result, variables)"""
    _check(node, BlockExpression)
    return node.node_type, node.expressions, node.result, node.variables


def deconstruct_catch_block(node: CatchBlock) -> Tuple:
    """(body, filter, test, variable)"""
    _check(node, CatchBlock)
    return node.body, node.filter, node.test, node.variable


def deconstruct_conditional(node: ConditionalExpression) -> Tuple:
    """(test, node_type, if_true, if_false)"""
    _check(node, ConditionalExpression)
    return node.test, node.node_type, node.if_true, node.if_false


def deconstruct_constant(node: ConstantExpression) -> Tuple:
    """(node_type, constant_type, value)"""
    _check(node, ConstantExpression)
    return node.node_type, node.constant_type, node.value


def deconstruct_default(node: DefaultExpression) -> Tuple:
    """(node_type, value_type)"""
    _check(node, DefaultExpression)
    return node.node_type, node.value_type


def deconstruct_dynamic(node: DynamicExpression) -> Tuple:
    """(node_type, operation, arguments)"""
    _check(node, DynamicExpression)
    return node.node_type, node.operation, node.arguments


def deconstruct_element_init(node: ElementInit) -> Tuple:
    """(arguments, add_method)"""
    _check(node, ElementInit)
    return node.arguments, node.add_method


def deconstruct_goto(node: GotoExpression) -> Tuple:
    """(node_type, kind, target)"""
    _check(node, GotoExpression)
    return node.node_type, node.kind, node.target


def deconstruct_index(node: IndexExpression) -> Tuple:
    """(node_type, instance, arguments)"""
    _check(node, IndexExpression)
    return node.node_type, node.instance, node.arguments


def deconstruct_invocation(node: InvocationExpression) -> Tuple:
    """(node_type, expression, arguments)"""
    _check(node, InvocationExpression)
    return node.node_type, node.expression, node.arguments


def deconstruct_label(node: LabelExpression) -> Tuple:
    """(node_type, default_value, target)"""
    _check(node, LabelExpression)
    return node.node_type, node.default_value, node.target


def deconstruct_label_target(node: LabelTarget) -> Tuple:
    """(name,)"""
    _check(node, LabelTarget)
    return (node.name,)


def deconstruct_lambda(node: LambdaExpression) -> Tuple:
    """(parameters, body)"""
    _check(node, LambdaExpression)
    return node.parameters, node.body


def deconstruct_list_init(node: ListInitExpression) -> Tuple:
    """(node_type, new_expression, initializers)"""
    _check(node, ListInitExpression)
    return node.node_type, node.new_expression, node.initializers


def deconstruct_loop(node: LoopExpression) -> Tuple:
    """(node_type, body, continue_label, break_label)"""
    _check(node, LoopExpression)
    return node.node_type, node.body, node.continue_label, node.break_label


def deconstruct_member_assignment(node: MemberAssignment) -> Tuple:
    """(expression, member, binding_type)"""
    _check(node, MemberAssignment)
    return node.expression, node.member, node.binding_type


def deconstruct_member_binding(node: MemberBinding) -> Tuple:
    """(member, binding_type) for any of the three binding kinds."""
    _check(node, MemberBinding)
    return node.member, node.binding_type


def deconstruct_member(node: MemberExpression) -> Tuple:
    """(node_type, expression, member)"""
    _check(node, MemberExpression)
    return node.node_type, node.expression, node.member


def deconstruct_member_init(node: MemberInitExpression) -> Tuple:
    """(node_type, new_expression, bindings)"""
    _check(node, MemberInitExpression)
    return node.node_type, node.new_expression, node.bindings


def deconstruct_member_list_binding(node: MemberListBinding) -> Tuple:
    """(member, binding_type, initializers)"""
    _check(node, MemberListBinding)
    return node.member, node.binding_type, node.initializers


def deconstruct_member_member_binding(node: MemberMemberBinding) -> Tuple:
    """(member, bindings, binding_type)"""
    _check(node, MemberMemberBinding)
    return node.member, node.bindings, node.binding_type


def deconstruct_method_call(node: MethodCallExpression) -> Tuple:
    """(node_type, instance, method, arguments)"""
    _check(node, MethodCallExpression)
    return node.node_type, node.instance, node.method, node.arguments


def deconstruct_new_array(node: NewArrayExpression) -> Tuple:
    """(node_type, expressions)"""
    _check(node, NewArrayExpression)
    return node.node_type, node.expressions


def deconstruct_new(node: NewExpression) -> Tuple:
    """(node_type, arguments, members, constructor)"""
    _check(node, NewExpression)
    return node.node_type, node.arguments, node.members, node.constructor


def deconstruct_parameter(node: ParameterExpression) -> Tuple:
    """(node_type, param_type, name, by_ref)"""
    _check(node, ParameterExpression)
    return node.node_type, node.param_type, node.name, node.by_ref


def deconstruct_runtime_variables(node: RuntimeVariablesExpression) -> Tuple:
    """(node_type, variables)"""
    _check(node, RuntimeVariablesExpression)
    return node.node_type, node.variables


def deconstruct_switch_case(node: SwitchCase) -> Tuple:
    """(body, test_values)"""
    _check(node, SwitchCase)
    return node.body, node.test_values


def deconstruct_switch(node: SwitchExpression) -> Tuple:
    """(switch_value, cases, default_body)"""
    _check(node, SwitchExpression)
    return node.switch_value, node.cases, node.default_body


def deconstruct_try(node: TryExpression) -> Tuple:
    """(node_type, body, fault, handlers, finally_body)"""
    _check(node, TryExpression)
    return node.node_type, node.body, node.fault, node.handlers, node.finally_body


def deconstruct_type_binary(node: TypeBinaryExpression) -> Tuple:
    """(node_type, expression, type_operand)"""
    _check(node, TypeBinaryExpression)
    return node.node_type, node.expression, node.type_operand


_ACCESSORS: Dict[type, Callable[[Any], Tuple]] = {
    BinaryExpression: deconstruct_binary,
    UnaryExpression: deconstruct_unary,
    BlockExpression: deconstruct_block,
    CatchBlock: deconstruct_catch_block,
    ConditionalExpression: deconstruct_conditional,
    ConstantExpression: deconstruct_constant,
    DefaultExpression: deconstruct_default,
    DynamicExpression: deconstruct_dynamic,
    ElementInit: deconstruct_element_init,
    GotoExpression: deconstruct_goto,
    IndexExpression: deconstruct_index,
    InvocationExpression: deconstruct_invocation,
    LabelExpression: deconstruct_label,
    LabelTarget: deconstruct_label_target,
    LambdaExpression: deconstruct_lambda,
    ListInitExpression: deconstruct_list_init,
    LoopExpression: deconstruct_loop,
    MemberAssignment: deconstruct_member_assignment,
    MemberExpression: deconstruct_member,
    MemberInitExpression: deconstruct_member_init,
    MemberListBinding: deconstruct_member_list_binding,
    MemberMemberBinding: deconstruct_member_member_binding,
    MethodCallExpression: deconstruct_method_call,
    NewArrayExpression: deconstruct_new_array,
    NewExpression: deconstruct_new,
    ParameterExpression: deconstruct_parameter,
    RuntimeVariablesExpression: deconstruct_runtime_variables,
    SwitchCase: deconstruct_switch_case,
    SwitchExpression: deconstruct_switch,
    TryExpression: deconstruct_try,
    TypeBinaryExpression: deconstruct_type_binary,
}


def deconstruct(node: Any) -> Tuple:
    """
    Decompose any node with the accessor for its variant.

    Raises:
        MissingArgumentError: node is None
        TypeError: node is not a known variant
    """
    require(node, "node")
    accessor = _ACCESSORS.get(type(node))
    if accessor is None:
        raise TypeError(f"Unsupported Expression type: {type(node)}")
    return accessor(node)
