"""
Expression Evaluator for KeyCalc
Validates a finalized token list and reduces it to a number.

Parentheses bind tightest. Inside each group, × and ÷ are reduced left to
right first, then + and − left to right.
"""
import logging
import math

from errors import (
    DivisionByZero,
    LeadingOperator,
    MalformedExpression,
    NoOperand,
    NonFiniteResult,
    TrailingOperator,
    UnbalancedParentheses,
)
from tokens import Number, Operator, OperatorKind, Parenthesis, Side

logger = logging.getLogger(__name__)


def evaluate_tokens(tokens):
    """Validate and evaluate a token list, returning a float"""
    tokens = list(tokens)
    _check_balance(tokens)
    if not any(isinstance(t, Number) for t in tokens):
        raise NoOperand()
    _check_structure(tokens)

    value, end = _evaluate_group(tokens, 0)
    if end != len(tokens):
        # A stray ')' cannot get here once the balance check passed
        raise MalformedExpression()
    if not math.isfinite(value):
        raise NonFiniteResult()
    logger.debug("Evaluated %d tokens to %r", len(tokens), value)
    return value


def _check_balance(tokens):
    balance = 0
    for token in tokens:
        if isinstance(token, Parenthesis):
            if token.side is Side.LEFT:
                balance += 1
            else:
                if balance <= 0:
                    raise UnbalancedParentheses("Unmatched ')'")
                balance -= 1
    if balance != 0:
        raise UnbalancedParentheses("Unclosed '('")


def _check_structure(tokens):
    if isinstance(tokens[0], Operator):
        raise LeadingOperator()
    if isinstance(tokens[-1], Operator):
        raise TrailingOperator()
    for previous, current in zip(tokens, tokens[1:]):
        if isinstance(previous, Operator) and isinstance(current, Operator):
            raise MalformedExpression("Two operators in a row")


def _evaluate_group(tokens, pos):
    """Evaluate from pos up to a closing ')' or the end.

    Returns (value, position of the ')' or len(tokens)).
    """
    operands = []
    operators = []
    expect_operand = True

    while pos < len(tokens):
        token = tokens[pos]
        if isinstance(token, Number):
            if not expect_operand:
                raise MalformedExpression("Missing operator between numbers")
            operands.append(token.value)
            expect_operand = False
            pos += 1
        elif isinstance(token, Operator):
            if expect_operand:
                if not operands and not operators:
                    raise LeadingOperator()
                raise MalformedExpression("Two operators in a row")
            operators.append(token.kind)
            expect_operand = True
            pos += 1
        elif isinstance(token, Parenthesis):
            if token.side is Side.RIGHT:
                break
            if not expect_operand:
                raise MalformedExpression("Missing operator before '('")
            value, pos = _evaluate_group(tokens, pos + 1)
            if pos >= len(tokens):
                raise UnbalancedParentheses("Unclosed '('")
            operands.append(value)
            expect_operand = False
            pos += 1
        else:
            raise TypeError(f"unexpected token: {token!r}")

    if not operands and not operators:
        raise MalformedExpression("Empty parentheses")
    if expect_operand:
        raise TrailingOperator()
    return _reduce(operands, operators), pos


def _reduce(operands, operators):
    """Two-pass reduction: × ÷ left to right, then + − left to right"""
    values = [operands[0]]
    pending = []
    for kind, right in zip(operators, operands[1:]):
        if kind is OperatorKind.MULTIPLY:
            values[-1] = values[-1] * right
        elif kind is OperatorKind.DIVIDE:
            if right == 0:
                raise DivisionByZero()
            values[-1] = values[-1] / right
        else:
            pending.append(kind)
            values.append(right)

    result = values[0]
    for kind, right in zip(pending, values[1:]):
        if kind is OperatorKind.ADD:
            result += right
        else:
            result -= right
    return result
