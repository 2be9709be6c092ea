"""Runtime values produced by the evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Void:
    """The absence of a value."""


@dataclass(frozen=True, slots=True)
class Number:
    value: float


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool


@dataclass(frozen=True, slots=True)
class String:
    value: str


@dataclass(frozen=True, slots=True)
class Struct:
    """Opaque handle to a declaration in the interpreter's struct table."""

    index: int


@dataclass(frozen=True, slots=True)
class Function:
    """Function declaration index plus the closure captured at declaration."""

    index: int
    closure_id: int


InterpValue = Union[Void, Number, Boolean, String, Struct, Function]

VOID = Void()


def kind_name(value: InterpValue) -> str:
    """Return the kind name used in error messages, e.g. 'Number'."""
    return type(value).__name__


def is_truthy(value: InterpValue) -> bool:
    """Only a nonzero Number is truthy."""
    return isinstance(value, Number) and value.value != 0.0
