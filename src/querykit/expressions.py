"""
Expression System for querykit

Computations are represented as trees of immutable nodes, one dataclass per
node kind. The set is closed: every node is one of the variants below, and
code that inspects a tree checks the variant explicitly (isinstance or a
match statement).

This module is structure only.

    - deconstruct.py pulls the components out of a node as a flat tuple
    - interpreter.py evaluates a tree
    - reflection.py builds property-accessor lambdas from these nodes

ARCHITECTURAL RULE:
    Nodes never evaluate themselves.
    Sequence-valued fields are always stored as tuples.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Union


def _freeze(node, *names: str) -> None:
    # Frozen dataclasses only allow assignment through object.__setattr__
    for name in names:
        value = getattr(node, name)
        if value is not None and not isinstance(value, tuple):
            object.__setattr__(node, name, tuple(value))


class ExpressionType(Enum):
    """
    Node kinds.

    Operator nodes report their operator instead (see BinaryOperator and
    UnaryOperator); every other node reports one of these.
    """

    CONSTANT = "Constant"
    DEFAULT = "Default"
    PARAMETER = "Parameter"
    LAMBDA = "Lambda"
    MEMBER_ACCESS = "MemberAccess"
    CALL = "Call"
    INVOKE = "Invoke"
    INDEX = "Index"
    CONDITIONAL = "Conditional"
    BLOCK = "Block"
    LOOP = "Loop"
    GOTO = "Goto"
    LABEL = "Label"
    SWITCH = "Switch"
    TRY = "Try"
    TYPE_IS = "TypeIs"
    NEW = "New"
    NEW_ARRAY_INIT = "NewArrayInit"
    LIST_INIT = "ListInit"
    MEMBER_INIT = "MemberInit"
    DYNAMIC = "Dynamic"
    RUNTIME_VARIABLES = "RuntimeVariables"


class BinaryOperator(Enum):
    """Binary operators."""

    # Arithmetic
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    FLOOR_DIVIDE = "//"
    MODULO = "%"
    POWER = "**"

    # Logical (short-circuit)
    AND = "and"
    OR = "or"
    COALESCE = "??"

    # Comparison
    EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="
    LESS_THAN = "<"
    LESS_EQUAL = "<="

    # Assignment to a parameter, member or index
    ASSIGN = "="


class UnaryOperator(Enum):
    """Unary operators."""

    NOT = "not"
    NEGATE = "-"
    CONVERT = "convert"


class GotoKind(Enum):
    """What a GotoExpression stands for."""

    GOTO = "goto"
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"


class MemberBindingType(Enum):
    """How a member is initialized inside a MemberInitExpression."""

    ASSIGNMENT = "Assignment"
    MEMBER_BINDING = "MemberBinding"
    LIST_BINDING = "ListBinding"


class Expression(ABC):
    """
    Base class for all expression nodes.

    Every subclass provides node_type.

    DO NOT:
        - Add evaluation logic here (belongs in interpreter.py)
        - Add string rendering here
    """

    @property
    def node_type(self) -> Union[ExpressionType, "BinaryOperator", "UnaryOperator"]:
        raise NotImplementedError


# =========================================================================
# LEAVES
# =========================================================================


@dataclass(frozen=True)
class ConstantExpression(Expression):
    """
    A literal value.

    Properties:
        value: The value (any Python object)
    """

    value: Any

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.CONSTANT

    @property
    def constant_type(self) -> type:
        return type(self.value)


@dataclass(frozen=True)
class DefaultExpression(Expression):
    """The default value of a type (0, "", empty container, or None)."""

    value_type: type

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.DEFAULT


@dataclass(frozen=True)
class ParameterExpression(Expression):
    """
    A named parameter or block variable.

    Properties:
        name: Identifier
        param_type: Declared type (optional, documentation only)
        by_ref: Whether the parameter is passed by reference

    IMPORTANT:
        Parameters compare by value, so two ParameterExpression("x")
        refer to the same binding. Inner scopes shadow outer ones.
    """

    name: str
    param_type: Optional[type] = None
    by_ref: bool = False

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.PARAMETER


@dataclass(frozen=True)
class LabelTarget:
    """A jump target. Not an expression on its own."""

    name: Optional[str] = None


# =========================================================================
# OPERATORS
# =========================================================================


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    A binary operation.

    Example:
        x + 1

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.ADD,
            left=ParameterExpression("x"),
            right=ConstantExpression(1),
        )
    """

    operator: BinaryOperator
    left: Expression
    right: Expression

    @property
    def node_type(self) -> BinaryOperator:
        return self.operator


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    A unary operation.

    Properties:
        operator: UnaryOperator
        operand: The operand
        target_type: Conversion target, used only by CONVERT
    """

    operator: UnaryOperator
    operand: Expression
    target_type: Optional[type] = None

    @property
    def node_type(self) -> UnaryOperator:
        return self.operator


@dataclass(frozen=True)
class TypeBinaryExpression(Expression):
    """isinstance(expression, type_operand)"""

    expression: Expression
    type_operand: type

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.TYPE_IS


# =========================================================================
# ACCESS AND CALLS
# =========================================================================


@dataclass(frozen=True)
class MemberExpression(Expression):
    """
    Attribute access: expression.member

    This is the node property accessors are built from:
        x => x.name
    """

    expression: Expression
    member: str

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.MEMBER_ACCESS


@dataclass(frozen=True)
class MethodCallExpression(Expression):
    """
    A method or function call.

    Properties:
        instance: Receiver, or None for a plain function call
        method: Method name (with an instance) or a callable
        arguments: Argument expressions
    """

    instance: Optional[Expression]
    method: Union[str, Callable[..., Any]]
    arguments: Tuple[Expression, ...] = ()

    def __post_init__(self):
        _freeze(self, "arguments")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.CALL


@dataclass(frozen=True)
class InvocationExpression(Expression):
    """Calls the value of an expression (typically a lambda)."""

    expression: Expression
    arguments: Tuple[Expression, ...] = ()

    def __post_init__(self):
        _freeze(self, "arguments")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.INVOKE


@dataclass(frozen=True)
class IndexExpression(Expression):
    """instance[arguments...]"""

    instance: Expression
    arguments: Tuple[Expression, ...] = ()

    def __post_init__(self):
        _freeze(self, "arguments")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.INDEX


@dataclass(frozen=True)
class LambdaExpression(Expression):
    """
    An anonymous function.

    Example:
        x => x.id

    Becomes:
        LambdaExpression(
            parameters=(ParameterExpression("x"),),
            body=MemberExpression(ParameterExpression("x"), "id"),
        )
    """

    parameters: Tuple[ParameterExpression, ...]
    body: Expression
    name: Optional[str] = None

    def __post_init__(self):
        _freeze(self, "parameters")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.LAMBDA


@dataclass(frozen=True)
class DynamicExpression(Expression):
    """A late-bound operation identified by name."""

    operation: str
    arguments: Tuple[Expression, ...] = ()

    def __post_init__(self):
        _freeze(self, "arguments")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.DYNAMIC


# =========================================================================
# CONTROL FLOW
# =========================================================================


@dataclass(frozen=True)
class ConditionalExpression(Expression):
    """if_true if test else if_false"""

    test: Expression
    if_true: Expression
    if_false: Expression

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.CONDITIONAL


@dataclass(frozen=True)
class BlockExpression(Expression):
    """
    A sequence of expressions evaluated in order.

    Properties:
        expressions: Body, at least one expression
        variables: Block-scoped variables

    The value of the block is the value of its last expression.
    """

    expressions: Tuple[Expression, ...]
    variables: Tuple[ParameterExpression, ...] = ()

    def __post_init__(self):
        _freeze(self, "expressions", "variables")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.BLOCK

    @property
    def result(self) -> Optional[Expression]:
        return self.expressions[-1] if self.expressions else None


@dataclass(frozen=True)
class LoopExpression(Expression):
    """An unconditional loop, left through break_label."""

    body: Expression
    break_label: Optional[LabelTarget] = None
    continue_label: Optional[LabelTarget] = None

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.LOOP


@dataclass(frozen=True)
class GotoExpression(Expression):
    """A jump to a label (goto, return, break or continue)."""

    kind: GotoKind
    target: LabelTarget
    value: Optional[Expression] = None

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.GOTO


@dataclass(frozen=True)
class LabelExpression(Expression):
    """Marks where a LabelTarget sits in a block."""

    target: LabelTarget
    default_value: Optional[Expression] = None

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.LABEL


@dataclass(frozen=True)
class SwitchCase:
    """One arm of a SwitchExpression. Not an expression on its own."""

    test_values: Tuple[Expression, ...]
    body: Expression

    def __post_init__(self):
        _freeze(self, "test_values")


@dataclass(frozen=True)
class SwitchExpression(Expression):
    """
    Multi-way branch on switch_value.

    The first case with a test value equal to switch_value wins;
    default_body runs when none does.
    """

    switch_value: Expression
    cases: Tuple[SwitchCase, ...]
    default_body: Optional[Expression] = None

    def __post_init__(self):
        _freeze(self, "cases")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.SWITCH


@dataclass(frozen=True)
class CatchBlock:
    """
    An exception handler of a TryExpression.

    Properties:
        test: Exception type handled
        body: Handler body
        variable: Parameter bound to the caught exception (optional)
        filter: Extra condition the handler requires (optional)
    """

    test: type
    body: Expression
    variable: Optional[ParameterExpression] = None
    filter: Optional[Expression] = None


@dataclass(frozen=True)
class TryExpression(Expression):
    """
    try / except / finally.

    Properties:
        body: Protected expression
        handlers: CatchBlocks tried in order
        fault: Runs only when the body raised and no handler matched
        finally_body: Always runs
    """

    body: Expression
    handlers: Tuple[CatchBlock, ...] = ()
    fault: Optional[Expression] = None
    finally_body: Optional[Expression] = None

    def __post_init__(self):
        _freeze(self, "handlers")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.TRY


@dataclass(frozen=True)
class RuntimeVariablesExpression(Expression):
    """Exposes a set of variables for runtime inspection."""

    variables: Tuple[ParameterExpression, ...]

    def __post_init__(self):
        _freeze(self, "variables")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.RUNTIME_VARIABLES


# =========================================================================
# CONSTRUCTION AND INITIALIZERS
# =========================================================================


@dataclass(frozen=True)
class NewExpression(Expression):
    """
    A constructor call.

    Properties:
        constructor: The class (or factory) to call
        arguments: Argument expressions
        members: When given, arguments are passed as keywords named by members
    """

    constructor: Callable[..., Any]
    arguments: Tuple[Expression, ...] = ()
    members: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze(self, "arguments", "members")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.NEW


@dataclass(frozen=True)
class NewArrayExpression(Expression):
    """A list literal."""

    expressions: Tuple[Expression, ...] = ()

    def __post_init__(self):
        _freeze(self, "expressions")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.NEW_ARRAY_INIT


@dataclass(frozen=True)
class ElementInit:
    """One add_method(*arguments) call of a collection initializer."""

    add_method: str
    arguments: Tuple[Expression, ...]

    def __post_init__(self):
        _freeze(self, "arguments")


@dataclass(frozen=True)
class ListInitExpression(Expression):
    """Construct a collection, then add elements to it."""

    new_expression: NewExpression
    initializers: Tuple[ElementInit, ...]

    def __post_init__(self):
        _freeze(self, "initializers")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.LIST_INIT


class MemberBinding(ABC):
    """Base class of the three member initializer kinds."""

    member: str

    @property
    def binding_type(self) -> MemberBindingType:
        raise NotImplementedError


@dataclass(frozen=True)
class MemberAssignment(MemberBinding):
    """member = expression"""

    member: str
    expression: Expression

    @property
    def binding_type(self) -> MemberBindingType:
        return MemberBindingType.ASSIGNMENT


@dataclass(frozen=True)
class MemberListBinding(MemberBinding):
    """Add elements to the collection held by member."""

    member: str
    initializers: Tuple[ElementInit, ...]

    def __post_init__(self):
        _freeze(self, "initializers")

    @property
    def binding_type(self) -> MemberBindingType:
        return MemberBindingType.LIST_BINDING


@dataclass(frozen=True)
class MemberMemberBinding(MemberBinding):
    """Apply nested bindings to the object held by member."""

    member: str
    bindings: Tuple[MemberBinding, ...]

    def __post_init__(self):
        _freeze(self, "bindings")

    @property
    def binding_type(self) -> MemberBindingType:
        return MemberBindingType.MEMBER_BINDING


@dataclass(frozen=True)
class MemberInitExpression(Expression):
    """Construct an object, then initialize its members."""

    new_expression: NewExpression
    bindings: Tuple[MemberBinding, ...]

    def __post_init__(self):
        _freeze(self, "bindings")

    @property
    def node_type(self) -> ExpressionType:
        return ExpressionType.MEMBER_INIT
