"""--tokens / --debug dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from leg.ast import (
    Alias,
    Assignment,
    Ast,
    Block,
    FunctionCall,
    FunctionDeclaration,
    Node,
    NullValue,
    NumberValue,
    OperatorCall,
    StringValue,
    StructDeclaration,
    Variable,
)
from leg.builtins import format_number
from leg.tokens import Token, TokenType


def dump_tokens(tokens: list[Token], *, file: TextIO | None = None) -> None:
    """Print one line per token: position, type, and source text."""
    out = file if file is not None else sys.stderr
    for tok in tokens:
        if tok.type == TokenType.EOF:
            continue
        pos = tok.span.start
        out.write(f"{pos.line}:{pos.column} {tok.type.name} {tok.text!r}\n")


def dump_ast(ast: Ast, *, file: TextIO | None = None) -> None:
    """Print a human-readable AST tree to *file* (default: stderr)."""
    out = file if file is not None else sys.stderr
    out.write("Ast\n")
    _dump_node(ast.root, 1, out)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    pad = _indent(depth)

    if isinstance(node, Block):
        f.write(f"{pad}Block\n")
        for statement in node.statements:
            _dump_node(statement, depth + 1, f)
    elif isinstance(node, FunctionCall):
        f.write(f"{pad}FunctionCall {node.name}\n")
        for arg in node.arguments:
            _dump_node(arg, depth + 1, f)
        if node.body is not None:
            _dump_node(node.body, depth + 1, f)
    elif isinstance(node, OperatorCall):
        f.write(f"{pad}OperatorCall {node.operator.value}\n")
        _dump_node(node.lhs, depth + 1, f)
        _dump_node(node.rhs, depth + 1, f)
    elif isinstance(node, (Assignment, Alias)):
        kind = "Alias" if isinstance(node, Alias) else "Assignment"
        typed = f" :{node.type_name}" if node.type_name else ""
        f.write(f"{pad}{kind} {node.target.name}{typed}\n")
        _dump_node(node.value, depth + 1, f)
    elif isinstance(node, FunctionDeclaration):
        params = ", ".join(arg.name for arg in node.arguments)
        f.write(f"{pad}FunctionDeclaration ({params})\n")
        _dump_node(node.body, depth + 1, f)
    elif isinstance(node, StructDeclaration):
        f.write(f"{pad}StructDeclaration\n")
        for fld in node.fields:
            f.write(f"{_indent(depth + 1)}Field {fld.name} :{fld.type_name}\n")
    elif isinstance(node, Variable):
        f.write(f"{pad}Variable {node.name}\n")
    elif isinstance(node, NumberValue):
        f.write(f"{pad}NumberValue {format_number(node.value)}\n")
    elif isinstance(node, StringValue):
        f.write(f"{pad}StringValue({node.value!r})\n")
    elif isinstance(node, NullValue):
        f.write(f"{pad}NullValue\n")
