"""AST node types for parsed Leg scripts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from leg.tokens import Span


class Operator(Enum):
    """Binary operators, valued by their source lexeme."""

    ADD = "+"
    SUB = "-"
    MULT = "*"
    DIV = "/"
    POW = "^"
    MOD = "%"

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]


# Higher binds tighter
_PRECEDENCE: dict[Operator, int] = {
    Operator.ADD: 1,
    Operator.SUB: 1,
    Operator.MULT: 2,
    Operator.DIV: 2,
    Operator.MOD: 2,
    Operator.POW: 3,
}


@dataclass(frozen=True, slots=True)
class Block:
    """Ordered statements; evaluates to the value of the last one."""

    statements: tuple[Node, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class FunctionCall:
    """name(arguments) with an optional attached block for control forms."""

    name: str
    arguments: tuple[Node, ...]
    body: Block | None
    span: Span


@dataclass(frozen=True, slots=True)
class OperatorCall:
    operator: Operator
    lhs: Node
    rhs: Node
    span: Span


@dataclass(frozen=True, slots=True)
class StringValue:
    """String literal, quotes stripped, backslash sequences kept verbatim."""

    value: str
    span: Span


@dataclass(frozen=True, slots=True)
class NumberValue:
    value: float
    span: Span


@dataclass(frozen=True, slots=True)
class Variable:
    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class Assignment:
    """name (:Type)? = expression"""

    target: Variable
    value: Node
    type_name: str | None
    span: Span


@dataclass(frozen=True, slots=True)
class Alias:
    """name (:Type)? :: static-expression"""

    target: Variable
    value: Node
    type_name: str | None
    span: Span


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    arguments: tuple[Variable, ...]
    body: Block
    span: Span


@dataclass(frozen=True, slots=True)
class StructField:
    name: str
    type_name: str
    span: Span


@dataclass(frozen=True, slots=True)
class StructDeclaration:
    """Ordered field/type pairs, declaration order preserved."""

    fields: tuple[StructField, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class NullValue:
    """Empty statement (a lone ';')."""

    span: Span


Node = Union[
    Block,
    FunctionCall,
    OperatorCall,
    StringValue,
    NumberValue,
    Variable,
    Assignment,
    Alias,
    FunctionDeclaration,
    StructDeclaration,
    NullValue,
]


@dataclass(frozen=True, slots=True)
class Ast:
    """Parsed script; the root block has no delimiters in the source."""

    root: Block
