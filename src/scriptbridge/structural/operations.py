"""
Typed arithmetic and comparison on structural values.

Every operation expects already-converted operands (numbers for arithmetic,
strings for joining). An unknown operand yields an unknown result; a null
operand is an error.
"""

import decimal
import operator
from typing import Callable

from ..errors import FunctionArgumentError, OperationError
from .path import ROOT
from .types import Type, BOOL, NUMBER, STRING
from .values import Value, NUMBER_CONTEXT, bool_val, string_val, unknown_val


BinaryOperation = Callable[[Value, Value], Value]


def _check(value: Value, want: Type, index: int) -> None:
    if value.type != want:
        article = "an" if want.name[0] in "aeiou" else "a"
        raise FunctionArgumentError(index, f"{article} {want} is required")
    if value.is_null:
        raise FunctionArgumentError(index, "argument must not be null")


def _arithmetic(compute: Callable[[decimal.Decimal, decimal.Decimal], decimal.Decimal],
                check_divisor: bool = False) -> BinaryOperation:
    def op(a: Value, b: Value) -> Value:
        _check(a, NUMBER, 0)
        _check(b, NUMBER, 1)
        if not a.is_known or not b.is_known:
            return unknown_val(NUMBER)
        if check_divisor and b.data == 0:
            raise OperationError(ROOT, "can't divide by zero")
        try:
            result = compute(a.data, b.data)
        except decimal.DecimalException as exc:
            raise OperationError(ROOT, f"arithmetic error: {type(exc).__name__}") from exc
        return Value(NUMBER, result)
    return op


add = _arithmetic(NUMBER_CONTEXT.add)
subtract = _arithmetic(NUMBER_CONTEXT.subtract)
multiply = _arithmetic(NUMBER_CONTEXT.multiply)
divide = _arithmetic(NUMBER_CONTEXT.divide, check_divisor=True)
# remainder takes the sign of the dividend
modulo = _arithmetic(NUMBER_CONTEXT.remainder, check_divisor=True)


def negate(a: Value) -> Value:
    _check(a, NUMBER, 0)
    if not a.is_known:
        return unknown_val(NUMBER)
    return Value(NUMBER, NUMBER_CONTEXT.minus(a.data))


def _comparison(compare: Callable[[object, object], bool]) -> BinaryOperation:
    def op(a: Value, b: Value) -> Value:
        if a.type not in (NUMBER, STRING):
            raise FunctionArgumentError(0, "a number is required")
        _check(a, a.type, 0)
        _check(b, a.type, 1)
        if not a.is_known or not b.is_known:
            return unknown_val(BOOL)
        return bool_val(compare(a.data, b.data))
    return op


less_than = _comparison(operator.lt)
less_than_or_equal = _comparison(operator.le)


def join_strings(a: Value, b: Value) -> Value:
    """Concatenate two string values."""
    _check(a, STRING, 0)
    _check(b, STRING, 1)
    if not a.is_known or not b.is_known:
        return unknown_val(STRING)
    return string_val(a.data + b.data)
