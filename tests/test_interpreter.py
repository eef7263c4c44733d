"""
Tests for the expression interpreter.

These tests verify:
    - Lambdas compile to ordinary callables
    - Operators, control flow and initializers evaluate like Python
    - Unsupported node kinds fail loudly
"""

from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from querykit.deconstruct import deconstruct, deconstruct_lambda
from querykit.errors import InvalidArgumentError, MissingArgumentError, UnsupportedExpressionError
from querykit.expressions import (
    BinaryExpression,
    BinaryOperator,
    BlockExpression,
    CatchBlock,
    ConditionalExpression,
    ConstantExpression,
    DefaultExpression,
    ElementInit,
    GotoExpression,
    GotoKind,
    IndexExpression,
    InvocationExpression,
    LabelTarget,
    LambdaExpression,
    ListInitExpression,
    LoopExpression,
    MemberAssignment,
    MemberExpression,
    MemberInitExpression,
    MemberListBinding,
    MemberMemberBinding,
    MethodCallExpression,
    NewArrayExpression,
    NewExpression,
    ParameterExpression,
    SwitchCase,
    SwitchExpression,
    TryExpression,
    TypeBinaryExpression,
    UnaryExpression,
    UnaryOperator,
)
from querykit.interpreter import compile_lambda, evaluate

x = ParameterExpression("x")
y = ParameterExpression("y")


def const(value):
    return ConstantExpression(value)


def binary(op, left, right):
    return BinaryExpression(op, left, right)


@dataclass
class Owner:
    name: str = ""


@dataclass
class Pet:
    name: str = ""
    tags: List[str] = field(default_factory=list)
    owner: Optional[Owner] = field(default_factory=Owner)


class TestCompileLambda:

    def test_add_one(self):
        add_one = compile_lambda(LambdaExpression((x,), binary(BinaryOperator.ADD, x, const(1))))
        assert add_one(3) == 4

    def test_rewritten_constant(self):
        lam = LambdaExpression((x,), binary(BinaryOperator.ADD, x, const(1)))
        params, body = deconstruct_lambda(lam)
        operator, left, _ = deconstruct(body)
        rewritten = LambdaExpression(params, binary(operator, left, const(5)))
        assert compile_lambda(rewritten)(3) == 8

    def test_name(self):
        fn = compile_lambda(LambdaExpression((x,), x, name="identity"))
        assert fn.__name__ == "identity"

    def test_arity(self):
        fn = compile_lambda(LambdaExpression((x, y), x))
        with pytest.raises(TypeError):
            fn(1)

    def test_rejects_other_nodes(self):
        with pytest.raises(TypeError):
            compile_lambda(const(1))
        with pytest.raises(MissingArgumentError):
            compile_lambda(None)

    def test_closure_over_outer_parameter(self):
        # x => (y => x + y)
        inner = LambdaExpression((y,), binary(BinaryOperator.ADD, x, y))
        make_adder = compile_lambda(LambdaExpression((x,), inner))
        assert make_adder(10)(5) == 15

    def test_invocation(self):
        square = LambdaExpression((y,), binary(BinaryOperator.MULTIPLY, y, y))
        fn = compile_lambda(LambdaExpression((x,), InvocationExpression(square, (x,))))
        assert fn(7) == 49


class TestOperators:

    @pytest.mark.parametrize(
        "op,expected",
        [
            (BinaryOperator.SUBTRACT, 4),
            (BinaryOperator.DIVIDE, 3.5),
            (BinaryOperator.FLOOR_DIVIDE, 3),
            (BinaryOperator.MODULO, 1),
            (BinaryOperator.POWER, 49),
            (BinaryOperator.GREATER_EQUAL, True),
            (BinaryOperator.NOT_EQUALS, True),
        ],
    )
    def test_binary(self, op, expected):
        assert evaluate(binary(op, const(7), const(2))) == expected

    def test_and_short_circuits(self):
        boom = binary(BinaryOperator.DIVIDE, const(1), const(0))
        assert evaluate(binary(BinaryOperator.AND, const(False), boom)) is False
        assert evaluate(binary(BinaryOperator.OR, const(True), boom)) is True

    def test_coalesce(self):
        assert evaluate(binary(BinaryOperator.COALESCE, const(None), const(3))) == 3
        assert evaluate(binary(BinaryOperator.COALESCE, const(0), const(3))) == 0

    def test_unary(self):
        assert evaluate(UnaryExpression(UnaryOperator.NOT, const(0))) is True
        assert evaluate(UnaryExpression(UnaryOperator.NEGATE, const(2))) == -2
        assert evaluate(UnaryExpression(UnaryOperator.CONVERT, const("12"), int)) == 12

    def test_type_test(self):
        assert evaluate(TypeBinaryExpression(const(True), int)) is True

    def test_default(self):
        assert evaluate(DefaultExpression(int)) == 0
        assert evaluate(DefaultExpression(list)) == []
        assert evaluate(DefaultExpression(Pet)) is None

    def test_conditional(self):
        node = ConditionalExpression(binary(BinaryOperator.LESS_THAN, x, const(0)), const("neg"), const("pos"))
        assert evaluate(node, {x: -1}) == "neg"
        assert evaluate(node, {x: 1}) == "pos"

    def test_unbound_parameter(self):
        with pytest.raises(InvalidArgumentError):
            evaluate(x)


class TestAccess:

    def test_member_and_index(self):
        pet = Pet(name="Rex", tags=["good", "loud"])
        assert evaluate(MemberExpression(x, "name"), {x: pet}) == "Rex"
        assert evaluate(IndexExpression(MemberExpression(x, "tags"), (const(1),)), {x: pet}) == "loud"

    def test_method_calls(self):
        assert evaluate(MethodCallExpression(const("rex"), "upper")) == "REX"
        assert evaluate(MethodCallExpression(None, max, (const(2), const(9)))) == 9
        assert evaluate(MethodCallExpression(const("a-b"), str.split, (const("-"),))) == ["a", "b"]


class TestBlocks:

    def test_block_with_assignment(self):
        total = ParameterExpression("total")
        body = BlockExpression(
            (
                binary(BinaryOperator.ASSIGN, total, x),
                binary(BinaryOperator.ASSIGN, total, binary(BinaryOperator.MULTIPLY, total, const(3))),
                total,
            ),
            (total,),
        )
        assert compile_lambda(LambdaExpression((x,), body))(2) == 6

    def test_block_variables_start_as_none(self):
        v = ParameterExpression("v")
        assert evaluate(BlockExpression((v,), (v,))) is None

    def test_assign_member_and_index(self):
        pet = Pet(tags=["a"])
        evaluate(binary(BinaryOperator.ASSIGN, MemberExpression(x, "name"), const("Rex")), {x: pet})
        evaluate(binary(BinaryOperator.ASSIGN, IndexExpression(MemberExpression(x, "tags"), (const(0),)), const("b")), {x: pet})
        assert pet == Pet(name="Rex", tags=["b"])

    def test_switch(self):
        node = SwitchExpression(
            x,
            (
                SwitchCase((const(1), const(2)), const("small")),
                SwitchCase((const(3),), const("three")),
            ),
            const("other"),
        )
        assert [evaluate(node, {x: v}) for v in (2, 3, 9)] == ["small", "three", "other"]

    def test_switch_without_default(self):
        node = SwitchExpression(x, (SwitchCase((const(1),), const("one")),))
        assert evaluate(node, {x: 5}) is None


class TestTry:

    def _divide(self, handlers=(), fault=None, finally_body=None):
        return TryExpression(binary(BinaryOperator.DIVIDE, const(1), x), handlers, fault, finally_body)

    def test_no_error(self):
        assert evaluate(self._divide(), {x: 2}) == 0.5

    def test_handler(self):
        node = self._divide((CatchBlock(ZeroDivisionError, const("inf")),))
        assert evaluate(node, {x: 0}) == "inf"

    def test_handler_variable_and_filter(self):
        err = ParameterExpression("err")
        never = CatchBlock(Exception, const("filtered"), err, const(False))
        named = CatchBlock(
            ArithmeticError,
            MethodCallExpression(None, lambda e: type(e).__name__, (err,)),
            err,
        )
        assert evaluate(self._divide((never, named)), {x: 0}) == "ZeroDivisionError"

    def test_fault_and_finally(self):
        log = []
        record = lambda text: MethodCallExpression(None, log.append, (const(text),))  # noqa: E731
        node = self._divide((CatchBlock(KeyError, const(None)),), record("fault"), record("finally"))
        with pytest.raises(ZeroDivisionError):
            evaluate(node, {x: 0})
        assert log == ["fault", "finally"]

        log.clear()
        evaluate(node, {x: 1})
        assert log == ["finally"]


class TestConstruction:

    def test_new(self):
        assert evaluate(NewExpression(Owner, (const("Ann"),))) == Owner("Ann")
        assert evaluate(NewExpression(Owner, (const("Ann"),), ("name",))) == Owner(name="Ann")

    def test_new_array(self):
        assert evaluate(NewArrayExpression((const(1), x)), {x: 2}) == [1, 2]

    def test_list_init(self):
        node = ListInitExpression(
            NewExpression(list),
            (ElementInit("append", (const(1),)), ElementInit("extend", (const([2, 3]),))),
        )
        assert evaluate(node) == [1, 2, 3]

    def test_member_init(self):
        node = MemberInitExpression(
            NewExpression(Pet),
            (
                MemberAssignment("name", const("Rex")),
                MemberListBinding("tags", (ElementInit("append", (const("good"),)),)),
                MemberMemberBinding("owner", (MemberAssignment("name", const("Ann")),)),
            ),
        )
        assert evaluate(node) == Pet(name="Rex", tags=["good"], owner=Owner(name="Ann"))


class TestUnsupported:

    def test_loop(self):
        with pytest.raises(UnsupportedExpressionError):
            evaluate(LoopExpression(const(1), LabelTarget("end")))

    def test_goto_is_also_a_type_error(self):
        with pytest.raises(TypeError):
            evaluate(GotoExpression(GotoKind.BREAK, LabelTarget("end")))

    def test_missing_node(self):
        with pytest.raises(MissingArgumentError):
            evaluate(None)
