"""Host built-ins — the call names the evaluator handles itself and `print`."""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable
from decimal import Decimal
from typing import TextIO

from leg.values import Boolean, Function, InterpValue, Number, String, Struct, Void

# Call names dispatched before any variable lookup
IF = "if"
WHILE = "while"
PRINT = "print"

# Every integer below this magnitude is exactly representable
_EXACT_INT_LIMIT = 2.0**53


def format_number(value: float) -> str:
    """Canonical decimal text: no fraction for integral values, no exponent."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        if value == 0.0 and math.copysign(1.0, value) < 0:
            return "-0"
        if abs(value) < _EXACT_INT_LIMIT:
            return str(int(value))
        # Shortest round-trip digits, not the exact binary value
        return str(int(Decimal(repr(value))))
    text = repr(value)
    if "e" in text:
        # Shortest round-trip digits, expanded to positional notation
        text = format(Decimal(text), "f")
    return text


def stringify(value: InterpValue) -> str:
    """Return the text `print` writes for a value."""
    if isinstance(value, Void):
        return "VOID"
    if isinstance(value, Boolean):
        return f"BOOLEAN {{{str(value.value).lower()}}}"
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, String):
        return value.value
    if isinstance(value, Function):
        return f"FUNCTION {value.index}"
    if isinstance(value, Struct):
        return f"STRUCT {value.index}"
    raise TypeError(f"not a runtime value: {value!r}")


def print_values(values: Iterable[InterpValue], *, file: TextIO | None = None) -> None:
    """Write one line per value to file (default: the current sys.stdout)."""
    out = file if file is not None else sys.stdout
    for value in values:
        out.write(stringify(value) + "\n")
