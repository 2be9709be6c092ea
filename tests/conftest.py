"""Shared test fixtures and helpers."""

from __future__ import annotations

import io

import pytest

from leg import run
from leg.ast import Ast, Block, Node
from leg.eval import DEFAULT_MAX_STACK_DEPTH
from leg.lexer import tokenize
from leg.parser import parse_source as _parse_source
from leg.tokens import Position, Span, Token, TokenType
from leg.values import InterpValue

# Convenience span for hand-built AST nodes
S = Span(Position(1, 1, 0), Position(1, 1, 0))


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns the Ast."""

    def _parse(source: str) -> Ast:
        return _parse_source(source)

    return _parse


@pytest.fixture
def run_source():
    """Return a helper that runs source and returns (value, printed output)."""

    def _run(
        source: str, max_stack_depth: int = DEFAULT_MAX_STACK_DEPTH
    ) -> tuple[InterpValue, str]:
        out = io.StringIO()
        value = run(source, max_stack_depth=max_stack_depth, out=out)
        return value, out.getvalue()

    return _run


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def single_statement(ast: Ast) -> Node:
    """Return the only statement of the root block."""
    root = ast.root
    assert isinstance(root, Block)
    assert len(root.statements) == 1, f"Expected 1 statement, got {len(root.statements)}"
    return root.statements[0]
