"""
Mini-lambda parser and evaluator.

Turns a one-line expression over the per-entry bindings .val and .lbl
into an Expression AST, and evaluates that AST for one label entry.

Syntax Notes:
    - Logical: and / &, or / |, not / !
    - Comparison: == != < <= > >=, in / %in%, not in
    - Arithmetic: + - * / // %
    - Literals: numbers, 'quoted' or "quoted" strings, True, False, None,
      collections [a, b], (a, b), {a, b}
    - Whitelisted calls: ifelse(cond, yes, no), str, int, float, abs,
      round, lower, upper, startswith, endswith, contains

Examples:
    .val >= 90
    .val in [10, 11] | .lbl == "Maybe"
    (.val // 10) * 10
    ifelse(.val == 10, 11, .val)

Missing operands (None) propagate as None, except that `False and x`
is False and `True or x` is True.
"""

import ast
import logging
import math
import operator
import re
from typing import Any, Callable, Dict, List, Tuple

from svylabels.errors import ConfigurationError, ValidationError
from svylabels.expressions import (
    Expression,
    BinaryExpression,
    BinaryOperator,
    VariableReference,
    Literal,
    ListLiteral,
    UnaryExpression,
    UnaryOperator,
    FunctionCall,
)

logger = logging.getLogger(__name__)


class LambdaParseError(ConfigurationError):
    """Raised when mini-lambda text cannot be parsed."""
    pass


Token = Tuple[str, str]

_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<number>\d+(?:\.\d*)?|\.\d+)
      | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
      | (?P<binding>\.(?:val|lbl)\b)
      | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
      | (?P<op>%in%|//|==|!=|<=|>=|&&|\|\||[-+*/%<>()\[\]{},&|!])
      | (?P<error>\S)
    )""",
    re.VERBOSE,
)

_COMPARISON_OPS = {
    '==': BinaryOperator.EQUALS,
    '!=': BinaryOperator.NOT_EQUALS,
    '<': BinaryOperator.LESS_THAN,
    '>': BinaryOperator.GREATER_THAN,
    '<=': BinaryOperator.LESS_EQUAL,
    '>=': BinaryOperator.GREATER_EQUAL,
    '%in%': BinaryOperator.IN,
}

_ADDITIVE_OPS = {'+': BinaryOperator.ADD, '-': BinaryOperator.SUBTRACT}

_MULTIPLICATIVE_OPS = {
    '*': BinaryOperator.MULTIPLY,
    '/': BinaryOperator.DIVIDE,
    '//': BinaryOperator.FLOOR_DIVIDE,
    '%': BinaryOperator.MODULO,
}

_CLOSING = {'(': ')', '[': ']', '{': '}'}


def _ifelse(condition, yes, no):
    return yes if condition else no


# name -> (implementation, argument count)
FUNCTIONS: Dict[str, Tuple[Callable, int]] = {
    "ifelse": (_ifelse, 3),
    "str": (str, 1),
    "int": (int, 1),
    "float": (float, 1),
    "abs": (abs, 1),
    "round": (round, 1),
    "lower": (lambda s: s.lower(), 1),
    "upper": (lambda s: s.upper(), 1),
    "startswith": (lambda s, prefix: s.startswith(prefix), 2),
    "endswith": (lambda s, suffix: s.endswith(suffix), 2),
    "contains": (lambda s, part: part in s, 2),
}


def _tokenize(text: str) -> List[Token]:
    """Tokenize mini-lambda text into (kind, text) pairs."""
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        if kind is None:
            continue
        value = match.group(kind)
        if kind == 'error':
            raise LambdaParseError(f"Unexpected character {value!r} in {text!r}")
        if kind == 'name' and value.lower() in ('and', 'or', 'not', 'in'):
            kind, value = 'op', value.lower()
        elif kind == 'op' and value in ('&', '&&'):
            value = 'and'
        elif kind == 'op' and value in ('|', '||'):
            value = 'or'
        elif kind == 'op' and value == '!':
            value = 'not'
        tokens.append((kind, value))
    if not tokens:
        raise LambdaParseError(f"No valid tokens in expression: {text!r}")
    return tokens


def _peek(tokens: List[Token], pos: int) -> str:
    """Return the operator text at pos, or '' if pos is not an operator."""
    if pos < len(tokens) and tokens[pos][0] == 'op':
        return tokens[pos][1]
    return ''


def _expect(tokens: List[Token], pos: int, op: str) -> int:
    if _peek(tokens, pos) != op:
        found = tokens[pos][1] if pos < len(tokens) else "end of expression"
        raise LambdaParseError(f"Expected '{op}', got '{found}'")
    return pos + 1


def _parse_or_expression(tokens: List[Token], pos: int) -> tuple:
    """Parse OR expression (lowest precedence)."""
    left, pos = _parse_and_expression(tokens, pos)

    while _peek(tokens, pos) == 'or':
        right, pos = _parse_and_expression(tokens, pos + 1)
        left = BinaryExpression(BinaryOperator.OR, left, right)

    return left, pos


def _parse_and_expression(tokens: List[Token], pos: int) -> tuple:
    """Parse AND expression."""
    left, pos = _parse_not_expression(tokens, pos)

    while _peek(tokens, pos) == 'and':
        right, pos = _parse_not_expression(tokens, pos + 1)
        left = BinaryExpression(BinaryOperator.AND, left, right)

    return left, pos


def _parse_not_expression(tokens: List[Token], pos: int) -> tuple:
    """Parse NOT expression."""
    if _peek(tokens, pos) == 'not':
        operand, pos = _parse_not_expression(tokens, pos + 1)
        return UnaryExpression(UnaryOperator.NOT, operand), pos

    return _parse_comparison_expression(tokens, pos)


def _parse_comparison_expression(tokens: List[Token], pos: int) -> tuple:
    """Parse comparison expression (==, !=, <, >, <=, >=, in, not in)."""
    left, pos = _parse_additive_expression(tokens, pos)

    op = _peek(tokens, pos)
    if op in _COMPARISON_OPS:
        right, pos = _parse_additive_expression(tokens, pos + 1)
        return BinaryExpression(_COMPARISON_OPS[op], left, right), pos
    if op == 'in':
        right, pos = _parse_additive_expression(tokens, pos + 1)
        return BinaryExpression(BinaryOperator.IN, left, right), pos
    if op == 'not' and _peek(tokens, pos + 1) == 'in':
        right, pos = _parse_additive_expression(tokens, pos + 2)
        inside = BinaryExpression(BinaryOperator.IN, left, right)
        return UnaryExpression(UnaryOperator.NOT, inside), pos

    return left, pos


def _parse_additive_expression(tokens: List[Token], pos: int) -> tuple:
    left, pos = _parse_multiplicative_expression(tokens, pos)

    while _peek(tokens, pos) in _ADDITIVE_OPS:
        op = _ADDITIVE_OPS[_peek(tokens, pos)]
        right, pos = _parse_multiplicative_expression(tokens, pos + 1)
        left = BinaryExpression(op, left, right)

    return left, pos


def _parse_multiplicative_expression(tokens: List[Token], pos: int) -> tuple:
    left, pos = _parse_unary_expression(tokens, pos)

    while _peek(tokens, pos) in _MULTIPLICATIVE_OPS:
        op = _MULTIPLICATIVE_OPS[_peek(tokens, pos)]
        right, pos = _parse_unary_expression(tokens, pos + 1)
        left = BinaryExpression(op, left, right)

    return left, pos


def _parse_unary_expression(tokens: List[Token], pos: int) -> tuple:
    """Parse unary minus."""
    if _peek(tokens, pos) == '-':
        operand, pos = _parse_unary_expression(tokens, pos + 1)
        if isinstance(operand, Literal) and isinstance(operand.value, (int, float)) \
                and not isinstance(operand.value, bool):
            return Literal(-operand.value), pos
        return UnaryExpression(UnaryOperator.NEGATE, operand), pos

    return _parse_primary_expression(tokens, pos)


def _parse_sequence(tokens: List[Token], pos: int, closing: str) -> tuple:
    """Parse comma-separated expressions up to the closing bracket."""
    items = []
    if _peek(tokens, pos) == closing:
        return items, pos + 1
    while True:
        item, pos = _parse_or_expression(tokens, pos)
        items.append(item)
        op = _peek(tokens, pos)
        if op == ',':
            pos += 1
            if _peek(tokens, pos) == closing:
                return items, pos + 1
        elif op == closing:
            return items, pos + 1
        else:
            found = tokens[pos][1] if pos < len(tokens) else "end of expression"
            raise LambdaParseError(f"Expected ',' or '{closing}', got '{found}'")


def _parse_primary_expression(tokens: List[Token], pos: int) -> tuple:
    """Parse primary expression (literal, binding, collection, call or parenthesized)."""
    if pos >= len(tokens):
        raise LambdaParseError("Unexpected end of expression")

    kind, token = tokens[pos]

    if kind == 'number':
        if '.' in token:
            return Literal(float(token)), pos + 1
        return Literal(int(token)), pos + 1

    if kind == 'string':
        return Literal(ast.literal_eval(token)), pos + 1

    if kind == 'binding':
        return VariableReference(token[1:]), pos + 1

    if kind == 'name':
        lowered = token.lower()
        if lowered == 'true':
            return Literal(True), pos + 1
        if lowered == 'false':
            return Literal(False), pos + 1
        if token == 'None':
            return Literal(None), pos + 1
        if _peek(tokens, pos + 1) == '(':
            if token not in FUNCTIONS:
                raise LambdaParseError(f"Unknown function '{token}'")
            arguments, next_pos = _parse_sequence(tokens, pos + 2, ')')
            expected = FUNCTIONS[token][1]
            if len(arguments) != expected:
                raise LambdaParseError(
                    f"Function '{token}' takes {expected} argument(s), got {len(arguments)}"
                )
            return FunctionCall(token, tuple(arguments)), next_pos
        raise LambdaParseError(f"Unknown name '{token}' (use .val or .lbl)")

    if token == '(':
        expr, next_pos = _parse_or_expression(tokens, pos + 1)
        if _peek(tokens, next_pos) == ',':
            rest, next_pos = _parse_sequence(tokens, next_pos + 1, ')')
            return ListLiteral(tuple([expr] + rest)), next_pos
        return expr, _expect(tokens, next_pos, ')')

    if token in ('[', '{'):
        items, next_pos = _parse_sequence(tokens, pos + 1, _CLOSING[token])
        return ListLiteral(tuple(items)), next_pos

    raise LambdaParseError(f"Unexpected token: {token}")


def parse_lambda(text: str) -> Expression:
    """
    Parse mini-lambda text into an Expression AST.

    Args:
        text: Expression over .val and .lbl

    Returns:
        Expression AST

    Raises:
        LambdaParseError: If the text is not a valid mini-lambda
    """
    if not text or not text.strip():
        raise LambdaParseError("Empty expression")

    tokens = _tokenize(text)
    expr, pos = _parse_or_expression(tokens, 0)
    if pos < len(tokens):
        raise LambdaParseError(
            f"Unexpected tokens after parsing: {' '.join(t for _, t in tokens[pos:])}"
        )
    return expr


_ARITHMETIC = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUBTRACT: operator.sub,
    BinaryOperator.MULTIPLY: operator.mul,
    BinaryOperator.DIVIDE: operator.truediv,
    BinaryOperator.FLOOR_DIVIDE: operator.floordiv,
    BinaryOperator.MODULO: operator.mod,
    BinaryOperator.EQUALS: operator.eq,
    BinaryOperator.NOT_EQUALS: operator.ne,
    BinaryOperator.GREATER_THAN: operator.gt,
    BinaryOperator.GREATER_EQUAL: operator.ge,
    BinaryOperator.LESS_THAN: operator.lt,
    BinaryOperator.LESS_EQUAL: operator.le,
}


def is_missing(x: Any) -> bool:
    """True for None and float NaN."""
    return x is None or (isinstance(x, float) and math.isnan(x))


def _evaluate_logical(expr: BinaryExpression, bindings: Dict[str, Any]) -> Any:
    left = evaluate(expr.left, bindings)
    short_circuit = expr.operator == BinaryOperator.OR
    if not is_missing(left) and bool(left) == short_circuit:
        return short_circuit

    right = evaluate(expr.right, bindings)
    if not is_missing(right) and bool(right) == short_circuit:
        return short_circuit
    if is_missing(left) or is_missing(right):
        return None
    return not short_circuit


def evaluate(expr: Expression, bindings: Dict[str, Any]) -> Any:
    """
    Evaluate an Expression AST against one set of bindings.

    Args:
        expr: Parsed mini-lambda
        bindings: {"val": value, "lbl": label}

    Returns:
        The computed result (None when undefined)

    Raises:
        ValidationError: If an operation cannot be applied to its operands
    """
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, VariableReference):
        return bindings[expr.name]

    if isinstance(expr, ListLiteral):
        return [evaluate(item, bindings) for item in expr.items]

    if isinstance(expr, BinaryExpression):
        if expr.operator in (BinaryOperator.AND, BinaryOperator.OR):
            return _evaluate_logical(expr, bindings)

        left = evaluate(expr.left, bindings)
        right = evaluate(expr.right, bindings)
        if is_missing(left) or is_missing(right):
            return None
        try:
            if expr.operator == BinaryOperator.IN:
                return left in right
            return _ARITHMETIC[expr.operator](left, right)
        except (TypeError, ZeroDivisionError) as e:
            raise ValidationError(
                f"Cannot apply '{expr.operator.value}' to {left!r} and {right!r}: {e}"
            ) from e

    if isinstance(expr, UnaryExpression):
        operand = evaluate(expr.operand, bindings)
        if is_missing(operand):
            return None
        if expr.operator == UnaryOperator.NOT:
            return not operand
        try:
            return -operand
        except TypeError as e:
            raise ValidationError(f"Cannot negate {operand!r}") from e

    if isinstance(expr, FunctionCall):
        arguments = [evaluate(arg, bindings) for arg in expr.arguments]
        if expr.name == "ifelse":
            if is_missing(arguments[0]):
                return None
        elif any(is_missing(arg) for arg in arguments):
            return None
        func = FUNCTIONS[expr.name][0]
        try:
            return func(*arguments)
        except (TypeError, ValueError, AttributeError) as e:
            raise ValidationError(f"Cannot evaluate {expr.name}() on {arguments!r}: {e}") from e

    raise TypeError(f"Unsupported Expression type: {type(expr)}")


def compile_lambda(text: str) -> Callable[[Any, str], Any]:
    """
    Compile mini-lambda text into a two-argument function of (val, lbl).

    Raises:
        LambdaParseError: If the text is not a valid mini-lambda
    """
    expr = parse_lambda(text)
    logger.debug(f"Compiled mini-lambda {text!r} to {expr!r}")

    def lbl_function(val, lbl):
        return evaluate(expr, {"val": val, "lbl": lbl})

    lbl_function.__name__ = "lbl_lambda"
    lbl_function.expression = expr
    lbl_function.source = text
    return lbl_function
