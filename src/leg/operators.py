"""Binary operator dispatch over runtime value kinds."""

from __future__ import annotations

import math

from leg.ast import Operator
from leg.errors import InterpError
from leg.values import InterpValue, Number, kind_name


def apply_operation(operator: Operator, lhs: InterpValue, rhs: InterpValue) -> InterpValue:
    """Apply a binary operator; only Number x Number is defined."""
    if isinstance(lhs, Number) and isinstance(rhs, Number):
        return Number(_apply_number_number(operator, lhs.value, rhs.value))
    raise InterpError(
        f"operator '{operator.value}' not implemented for {kind_name(lhs)} and {kind_name(rhs)}"
    )


def _apply_number_number(operator: Operator, lhs: float, rhs: float) -> float:
    # IEEE 754 results (inf, nan) instead of Python's ZeroDivisionError/OverflowError
    if operator is Operator.ADD:
        return lhs + rhs
    if operator is Operator.SUB:
        return lhs - rhs
    if operator is Operator.MULT:
        return lhs * rhs
    if operator is Operator.DIV:
        if rhs == 0.0:
            if lhs == 0.0 or math.isnan(lhs):
                return math.nan
            return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
        return lhs / rhs
    if operator is Operator.POW:
        return _pow(lhs, rhs)
    if operator is Operator.MOD:
        if rhs == 0.0 or math.isinf(lhs):
            return math.nan
        return math.fmod(lhs, rhs)
    raise AssertionError(f"unhandled operator {operator!r}")


def _pow(lhs: float, rhs: float) -> float:
    try:
        return math.pow(lhs, rhs)
    except OverflowError:
        # Odd integral exponent keeps the sign of a negative base
        if lhs < 0 and rhs.is_integer() and int(rhs) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        # Negative base with fractional exponent, or 0 ** negative
        if lhs == 0.0:
            if rhs.is_integer() and int(rhs) % 2 == 1:
                return math.copysign(math.inf, lhs)
            return math.inf
        return math.nan
