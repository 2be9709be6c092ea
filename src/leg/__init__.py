"""Leg scripting language interpreter."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from leg.values import InterpValue

__version__ = "0.1.0"


def run(
    source: str,
    *,
    max_stack_depth: int | None = None,
    out: TextIO | None = None,
) -> InterpValue:
    """Tokenize, parse, and evaluate Leg source; return the script's value."""
    from leg.eval import DEFAULT_MAX_STACK_DEPTH, evaluate
    from leg.lexer import tokenize
    from leg.parser import parse

    tokens = tokenize(source)
    ast = parse(tokens, source)
    depth = DEFAULT_MAX_STACK_DEPTH if max_stack_depth is None else max_stack_depth
    return evaluate(ast, max_stack_depth=depth, out=out)
