"""
Tests for the querykit expression nodes.

These tests verify:
    - Nodes can be created and composed into trees
    - Nodes are immutable
    - Sequence-valued fields are stored as tuples
    - Every node reports its node_type
"""

import pytest

from querykit.expressions import (
    BinaryExpression,
    BinaryOperator,
    BlockExpression,
    ConstantExpression,
    DefaultExpression,
    ElementInit,
    Expression,
    ExpressionType,
    LambdaExpression,
    ListInitExpression,
    MemberAssignment,
    MemberBindingType,
    MemberExpression,
    MemberListBinding,
    MemberMemberBinding,
    MethodCallExpression,
    NewExpression,
    ParameterExpression,
    SwitchCase,
    SwitchExpression,
    UnaryExpression,
    UnaryOperator,
)


class TestLeaves:
    """Constants, defaults and parameters."""

    def test_constant(self):
        const = ConstantExpression(5)
        assert const.value == 5
        assert const.constant_type is int
        assert const.node_type == ExpressionType.CONSTANT

    def test_constant_none(self):
        assert ConstantExpression(None).constant_type is type(None)

    def test_default(self):
        assert DefaultExpression(int).node_type == ExpressionType.DEFAULT

    def test_parameter_defaults(self):
        x = ParameterExpression("x")
        assert x.param_type is None
        assert x.by_ref is False
        assert isinstance(x, Expression)

    def test_parameters_compare_by_value(self):
        assert ParameterExpression("x", int) == ParameterExpression("x", int)
        assert hash(ParameterExpression("x")) == hash(ParameterExpression("x"))
        assert ParameterExpression("x") != ParameterExpression("y")

    def test_immutable(self):
        const = ConstantExpression(1)
        with pytest.raises(AttributeError):
            const.value = 2


class TestOperators:
    """Binary and unary nodes report their operator."""

    def test_binary(self):
        expr = BinaryExpression(BinaryOperator.ADD, ParameterExpression("x"), ConstantExpression(1))
        assert expr.node_type == BinaryOperator.ADD
        assert expr.left == ParameterExpression("x")
        assert expr.right == ConstantExpression(1)

    def test_nested(self):
        # (x > 1) and (x < 5)
        x = ParameterExpression("x")
        expr = BinaryExpression(
            BinaryOperator.AND,
            BinaryExpression(BinaryOperator.GREATER_THAN, x, ConstantExpression(1)),
            BinaryExpression(BinaryOperator.LESS_THAN, x, ConstantExpression(5)),
        )
        assert expr.left.operator == BinaryOperator.GREATER_THAN
        assert expr.right.right.value == 5

    def test_unary(self):
        expr = UnaryExpression(UnaryOperator.NOT, ConstantExpression(True))
        assert expr.node_type == UnaryOperator.NOT
        assert expr.target_type is None

    def test_operator_values(self):
        assert BinaryOperator("==") == BinaryOperator.EQUALS
        assert BinaryOperator("??") == BinaryOperator.COALESCE


class TestSequenceFields:
    """Lists passed in are frozen to tuples."""

    def test_lambda_parameters(self):
        x = ParameterExpression("x")
        lam = LambdaExpression([x], MemberExpression(x, "id"))
        assert lam.parameters == (x,)
        assert lam.node_type == ExpressionType.LAMBDA

    def test_method_call_arguments(self):
        call = MethodCallExpression(ParameterExpression("s"), "upper", [])
        assert call.arguments == ()
        assert call.node_type == ExpressionType.CALL

    def test_block(self):
        a, b = ConstantExpression(1), ConstantExpression(2)
        block = BlockExpression([a, b], [ParameterExpression("v")])
        assert block.expressions == (a, b)
        assert block.variables == (ParameterExpression("v"),)
        assert block.result == b

    def test_empty_block_result(self):
        assert BlockExpression(()).result is None

    def test_switch(self):
        case = SwitchCase([ConstantExpression(1)], ConstantExpression("one"))
        switch = SwitchExpression(ParameterExpression("x"), [case])
        assert case.test_values == (ConstantExpression(1),)
        assert switch.cases == (case,)
        assert switch.default_body is None

    def test_list_init(self):
        init = ElementInit("append", [ConstantExpression(1)])
        node = ListInitExpression(NewExpression(list), [init])
        assert node.initializers == (init,)
        assert node.node_type == ExpressionType.LIST_INIT


class TestMemberBindings:

    def test_binding_types(self):
        assign = MemberAssignment("name", ConstantExpression("Rex"))
        listed = MemberListBinding("tags", [ElementInit("append", [ConstantExpression("good")])])
        nested = MemberMemberBinding("owner", [assign])
        assert assign.binding_type == MemberBindingType.ASSIGNMENT
        assert listed.binding_type == MemberBindingType.LIST_BINDING
        assert nested.binding_type == MemberBindingType.MEMBER_BINDING
        assert nested.bindings == (assign,)
