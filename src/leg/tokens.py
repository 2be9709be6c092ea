"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Literals and names
    IDENTIFIER = auto()  # [A-Za-z_][A-Za-z0-9_]*
    NUMBER = auto()  # [0-9][0-9.]*
    STRING = auto()  # "..." including the quotes, escapes kept verbatim

    # Delimiters (single-character)
    OPEN_PAREN = auto()  # (
    CLOSE_PAREN = auto()  # )
    OPEN_BLOCK = auto()  # {
    CLOSE_BLOCK = auto()  # }
    PARAMETER_DIVIDER = auto()  # ,
    SUB_ELEMENT = auto()  # .
    END_OF_STATEMENT = auto()  # ;

    # Bindings
    STATIC_ASSIGN = auto()  # ::
    VARIABLE_ASSIGN = auto()  # = or :=
    TYPE_SYMBOL = auto()  # : directly before a type name

    OPERATOR = auto()  # + - * / % ^
    COMMENT = auto()  # // to end of line

    # Sentinel: end of input, empty text
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its exact source text."""

    type: TokenType
    text: str
    span: Span


# Single-character tokens that need no lookahead
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.OPEN_PAREN,
    ")": TokenType.CLOSE_PAREN,
    "{": TokenType.OPEN_BLOCK,
    "}": TokenType.CLOSE_BLOCK,
    ",": TokenType.PARAMETER_DIVIDER,
    ".": TokenType.SUB_ELEMENT,
    ";": TokenType.END_OF_STATEMENT,
}

# Operator characters; "/" is resolved separately because "//" opens a comment
OPERATOR_CHARS = frozenset("+-*/%^")

WHITESPACE_CHARS = frozenset(" \t\r\n")


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return "0" <= ch <= "9"


def is_letter(ch: str) -> bool:
    """Return True if ch is an ASCII letter."""
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def is_ident_start(ch: str) -> bool:
    """Return True if ch can start an identifier."""
    return is_letter(ch) or ch == "_"


def is_ident_char(ch: str) -> bool:
    """Return True if ch can continue an identifier."""
    return is_ident_start(ch) or is_digit(ch)
