"""
Expression System for label mini-lambdas

Mini-lambdas such as  .val >= 90 | .lbl == "Maybe"  are parsed into
Abstract Syntax Trees (ASTs) before they are evaluated.

This ensures:
    - Malformed text fails once, at parse time
    - No eval() of caller-supplied strings
    - Evaluation is a plain tree walk

ARCHITECTURAL RULE:
    These classes are structure only.
    Parsing and evaluation live in svylabels.lambdas.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class Expression(ABC):
    """
    Base class for all AST expressions.

    This is intentionally minimal.
    It exists to provide type-safety for the expression hierarchy.
    """
    pass


class BinaryOperator(Enum):
    """
    Binary operators supported in mini-lambdas.

    Logical and comparison operators select label entries,
    arithmetic operators compute new values for collapse.
    """

    # Logical operators
    AND = "AND"
    OR = "OR"

    # Comparison operators
    EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="
    LESS_THAN = "<"
    LESS_EQUAL = "<="
    IN = "IN"

    # Arithmetic operators
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    FLOOR_DIVIDE = "//"
    MODULO = "%"


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Represents a binary logical, comparison or arithmetic expression.

    Example:
        .val >= 90 | .lbl == "Maybe"

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.OR,
            left=BinaryExpression(
                operator=BinaryOperator.GREATER_EQUAL,
                left=VariableReference("val"),
                right=Literal(90)
            ),
            right=BinaryExpression(
                operator=BinaryOperator.EQUALS,
                left=VariableReference("lbl"),
                right=Literal("Maybe")
            )
        )
    """

    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class VariableReference(Expression):
    """
    References one of the two per-entry bindings.

    Properties:
        name: "val" (the entry's value) or "lbl" (the entry's label)
    """

    name: str


@dataclass(frozen=True)
class Literal(Expression):
    """
    Represents a literal constant value.

    Examples:
        - 90
        - 2.5
        - "Maybe"
        - True
        - None
    """

    value: Union[int, float, str, bool, None]


@dataclass(frozen=True)
class ListLiteral(Expression):
    """
    A literal collection, used as the right-hand side of IN.

    Example:
        .val in [10, 11]
    """

    items: Tuple[Expression, ...]


class UnaryOperator(Enum):
    """Unary operators."""
    NOT = "NOT"
    NEGATE = "-"


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Represents a unary operation.

    Example:
        not .lbl == "NIU"

    Becomes:
        UnaryExpression(
            operator=UnaryOperator.NOT,
            operand=BinaryExpression(...)
        )
    """

    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class FunctionCall(Expression):
    """
    A call to one of the whitelisted helper functions.

    Example:
        ifelse(.val == 10, 11, .val)

    Properties:
        name: Function name
        arguments: Argument expressions, in order
    """

    name: str
    arguments: Tuple[Expression, ...]
