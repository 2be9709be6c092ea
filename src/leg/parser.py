"""Leg parser — converts a token stream into an AST."""

from __future__ import annotations

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
    Operator,
    OperatorCall,
    StringValue,
    StructDeclaration,
    StructField,
    Variable,
)
from leg.errors import ParsingError
from leg.lexer import tokenize
from leg.tokens import Position, Span, Token, TokenType


class Parser:
    """Recursive descent parser with precedence climbing for operators."""

    def __init__(self, tokens: list[Token], source: str = "") -> None:
        # Comments carry no meaning, so they may sit between any two tokens
        self._tokens = [t for t in tokens if t.type != TokenType.COMMENT]
        if not self._tokens or self._tokens[-1].type != TokenType.EOF:
            end = self._tokens[-1].span.end if self._tokens else Position(1, 1, 0)
            self._tokens.append(Token(TokenType.EOF, "", Span(end, end)))
        self._source = source
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # EOF

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _at_eof(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type != TokenType.EOF:
            self._pos += 1
        return tok

    def _expect(self, tt: TokenType, message: str) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._error(f"{message}, found {_describe(tok)}", tok.span)
        return self._advance()

    def _prev(self) -> Token | None:
        """The previously consumed token."""
        if self._pos > 0:
            return self._tokens[self._pos - 1]
        return None

    def _prev_end(self) -> Position:
        prev = self._prev()
        if prev is not None:
            return prev.span.end
        return self._tokens[0].span.start

    # ------------------------------------------------------------------
    # Blocks and statements
    # ------------------------------------------------------------------

    def parse(self) -> Ast:
        statements: list[Node] = []
        start = self._peek().span.start

        try:
            while not self._at_eof():
                if self._at(TokenType.CLOSE_BLOCK):
                    raise self._error("unexpected '}' outside of a block")
                statements.append(self._parse_statement())
        except RecursionError:
            raise self._error("expression nested too deeply") from None

        end = self._peek().span.end
        return Ast(Block(tuple(statements), Span(start, end)))

    def _parse_block(self) -> Block:
        start_tok = self._expect(TokenType.OPEN_BLOCK, "expected '{'")

        statements: list[Node] = []
        while not self._at(TokenType.CLOSE_BLOCK):
            if self._at_eof():
                raise self._error("unexpected end of input, expected '}'")
            statements.append(self._parse_statement())

        end_tok = self._advance()  # consume CLOSE_BLOCK
        return Block(tuple(statements), Span(start_tok.span.start, end_tok.span.end))

    def _parse_statement(self) -> Node:
        tok = self._peek()

        if tok.type == TokenType.END_OF_STATEMENT:
            self._advance()
            return NullValue(tok.span)

        if tok.type == TokenType.OPEN_BLOCK:
            node: Node = self._parse_block()
        elif tok.type == TokenType.IDENTIFIER and self._peek(1).type in _BINDING_TOKENS:
            node = self._parse_binding()
        elif tok.type in _EXPRESSION_START:
            node = self._parse_expression()
        else:
            raise self._error(f"unexpected {_describe(tok)} at start of statement", tok.span)

        self._end_statement()
        return node

    def _end_statement(self) -> None:
        """Consume the ';' terminator, optional after a closing '}'."""
        if self._at(TokenType.END_OF_STATEMENT):
            self._advance()
            return
        prev = self._prev()
        if prev is not None and prev.type == TokenType.CLOSE_BLOCK:
            return
        raise self._error(f"expected ';' after statement, found {_describe(self._peek())}")

    # ------------------------------------------------------------------
    # Bindings
    # ------------------------------------------------------------------

    def _parse_binding(self) -> Alias | Assignment:
        name_tok = self._advance()
        target = Variable(name_tok.text, name_tok.span)

        type_name: str | None = None
        if self._at(TokenType.TYPE_SYMBOL):
            self._advance()
            type_tok = self._expect(TokenType.IDENTIFIER, "expected type name after ':'")
            type_name = type_tok.text
            if not self._at(TokenType.STATIC_ASSIGN, TokenType.VARIABLE_ASSIGN):
                raise self._error(
                    f"expected '::' or '=' after type annotation, found {_describe(self._peek())}"
                )

        assign_tok = self._advance()
        if assign_tok.type == TokenType.STATIC_ASSIGN:
            value = self._parse_static_expression()
            return Alias(target, value, type_name, Span(name_tok.span.start, self._prev_end()))

        value = self._parse_expression()
        return Assignment(target, value, type_name, Span(name_tok.span.start, self._prev_end()))

    def _parse_static_expression(self) -> Node:
        if self._at(TokenType.OPEN_BLOCK):
            return self._parse_struct_declaration()
        if self._at_function_declaration():
            return self._parse_function_declaration()
        return self._parse_expression()

    def _at_function_declaration(self) -> bool:
        """Check for '( ... ) {' — a parenthesized list followed by a body."""
        if not self._at(TokenType.OPEN_PAREN):
            return False
        depth = 0
        offset = 0
        while True:
            tok = self._peek(offset)
            if tok.type == TokenType.EOF:
                return False
            if tok.type == TokenType.OPEN_PAREN:
                depth += 1
            elif tok.type == TokenType.CLOSE_PAREN:
                depth -= 1
                if depth == 0:
                    return self._peek(offset + 1).type == TokenType.OPEN_BLOCK
            offset += 1

    def _parse_function_declaration(self) -> FunctionDeclaration:
        start_tok = self._expect(TokenType.OPEN_PAREN, "expected '('")

        arguments: list[Variable] = []
        if not self._at(TokenType.CLOSE_PAREN):
            while True:
                tok = self._peek()
                if tok.type != TokenType.IDENTIFIER:
                    raise self._error(
                        f"function parameters must be identifiers, found {_describe(tok)}",
                        tok.span,
                    )
                self._advance()
                arguments.append(Variable(tok.text, tok.span))
                if not self._at(TokenType.PARAMETER_DIVIDER):
                    break
                self._advance()

        self._expect(TokenType.CLOSE_PAREN, "expected ')' after function parameters")
        body = self._parse_block()
        return FunctionDeclaration(tuple(arguments), body, Span(start_tok.span.start, body.span.end))

    def _parse_struct_declaration(self) -> StructDeclaration:
        start_tok = self._advance()  # consume OPEN_BLOCK

        fields: list[StructField] = []
        while not self._at(TokenType.CLOSE_BLOCK):
            if self._at_eof():
                raise self._error("unexpected end of input in struct declaration, expected '}'")
            name_tok = self._expect(TokenType.IDENTIFIER, "expected struct field name")
            self._expect(TokenType.TYPE_SYMBOL, "expected ':' after struct field name")
            type_tok = self._expect(TokenType.IDENTIFIER, "expected struct field type")
            fields.append(
                StructField(name_tok.text, type_tok.text, Span(name_tok.span.start, type_tok.span.end))
            )
            # Separators between fields are optional
            if self._at(TokenType.PARAMETER_DIVIDER, TokenType.END_OF_STATEMENT):
                self._advance()

        end_tok = self._advance()  # consume CLOSE_BLOCK
        return StructDeclaration(tuple(fields), Span(start_tok.span.start, end_tok.span.end))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Node:
        """Left-to-right chain; each right operand climbs higher precedences."""
        lhs = self._parse_partial()
        while self._at(TokenType.OPERATOR):
            op = self._parse_operator()
            rhs = self._parse_operand(op)
            lhs = OperatorCall(op, lhs, rhs, Span(lhs.span.start, rhs.span.end))
        return lhs

    def _parse_operand(self, op: Operator) -> Node:
        """Parse the right operand of op, folding in strictly tighter operators."""
        rhs = self._parse_partial()
        while self._at(TokenType.OPERATOR) and _operator_of(self._peek()).precedence > op.precedence:
            next_op = self._parse_operator()
            right = self._parse_operand(next_op)
            rhs = OperatorCall(next_op, rhs, right, Span(rhs.span.start, right.span.end))
        return rhs

    def _parse_operator(self) -> Operator:
        return _operator_of(self._advance())

    def _parse_partial(self) -> Node:
        tok = self._peek()

        if tok.type == TokenType.IDENTIFIER:
            if self._peek(1).type == TokenType.OPEN_PAREN:
                return self._parse_function_call()
            self._advance()
            return Variable(tok.text, tok.span)

        if tok.type == TokenType.NUMBER:
            return self._parse_number()

        if tok.type == TokenType.STRING:
            self._advance()
            return StringValue(tok.text[1:-1], tok.span)

        if tok.type == TokenType.OPEN_PAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.CLOSE_PAREN, "expected ')' to close expression")
            return expr

        raise self._error(f"expected an expression, found {_describe(tok)}", tok.span)

    def _parse_number(self) -> NumberValue:
        tok = self._advance()
        try:
            value = float(tok.text)
        except ValueError:
            raise self._error(f"malformed number literal {tok.text!r}", tok.span) from None
        return NumberValue(value, tok.span)

    def _parse_function_call(self) -> FunctionCall:
        name_tok = self._advance()
        self._advance()  # consume OPEN_PAREN

        arguments: list[Node] = []
        if not self._at(TokenType.CLOSE_PAREN):
            arguments.append(self._parse_expression())
            while self._at(TokenType.PARAMETER_DIVIDER):
                self._advance()
                arguments.append(self._parse_expression())

        self._expect(
            TokenType.CLOSE_PAREN, f"expected ',' or ')' in call to '{name_tok.text}'"
        )

        # Attached body for control forms: if (x) { ... }
        body: Block | None = None
        if self._at(TokenType.OPEN_BLOCK):
            body = self._parse_block()

        return FunctionCall(
            name_tok.text, tuple(arguments), body, Span(name_tok.span.start, self._prev_end())
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _error(self, message: str, span: Span | None = None) -> ParsingError:
        if span is None:
            span = self._peek().span
        return ParsingError(message, span, self._source)


# Module-level constants
_BINDING_TOKENS: frozenset[TokenType] = frozenset(
    {TokenType.TYPE_SYMBOL, TokenType.STATIC_ASSIGN, TokenType.VARIABLE_ASSIGN}
)
_EXPRESSION_START: frozenset[TokenType] = frozenset(
    {TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.STRING, TokenType.OPEN_PAREN}
)


def _operator_of(tok: Token) -> Operator:
    return Operator(tok.text)


def _describe(tok: Token) -> str:
    if tok.type == TokenType.EOF:
        return "end of input"
    return repr(tok.text)


def parse(tokens: list[Token], source: str = "") -> Ast:
    """Parse a token list into an Ast.

    source is only used to render error context.
    """
    return Parser(tokens, source).parse()


def parse_source(source: str) -> Ast:
    """Convenience function: tokenize and parse source text."""
    return parse(tokenize(source), source)
