"""Leg lexer — converts source text into a flat token stream."""

from __future__ import annotations

from leg.errors import TokenizationError
from leg.tokens import (
    OPERATOR_CHARS,
    SINGLE_CHAR_TOKENS,
    WHITESPACE_CHARS,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_ident_char,
    is_ident_start,
    is_letter,
)


class Lexer:
    """Tokenize Leg source text into a list of Token objects."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list, EOF last."""
        while self._pos < len(self._source):
            self._lex_next()

        eof = self._current_pos()
        self._tokens.append(Token(TokenType.EOF, "", Span(eof, eof)))
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, start: Position) -> Token:
        """Save a token whose text runs from start to the current position."""
        end = self._current_pos()
        text = self._source[start.offset : end.offset]
        tok = Token(tt, text, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _error(self, message: str, pos: Position | None = None) -> TokenizationError:
        if pos is None:
            pos = self._current_pos()
        return TokenizationError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_next(self) -> None:
        ch = self._peek()

        if ch in WHITESPACE_CHARS:
            self._advance()
            return

        if is_digit(ch):
            self._lex_number()
            return

        if is_ident_start(ch):
            self._lex_identifier()
            return

        if ch == '"':
            self._lex_string()
            return

        if ch in SINGLE_CHAR_TOKENS:
            start = self._current_pos()
            self._advance()
            self._emit(SINGLE_CHAR_TOKENS[ch], start)
            return

        if ch == "/" and self._peek(1) == "/":
            self._lex_comment()
            return

        if ch in OPERATOR_CHARS:
            start = self._current_pos()
            self._advance()
            self._emit(TokenType.OPERATOR, start)
            return

        if ch == ":":
            self._lex_colon()
            return

        if ch == "=":
            start = self._current_pos()
            self._advance()
            if self._at_end():
                raise self._error("unexpected end of input after '='", start)
            self._emit(TokenType.VARIABLE_ASSIGN, start)
            return

        raise self._error(f"unexpected character {ch!r}")

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def _lex_number(self) -> None:
        # Repeated dots are left for the parser to reject
        start = self._current_pos()
        while not self._at_end() and (is_digit(self._peek()) or self._peek() == "."):
            self._advance()
        self._emit(TokenType.NUMBER, start)

    def _lex_identifier(self) -> None:
        start = self._current_pos()
        while not self._at_end() and is_ident_char(self._peek()):
            self._advance()
        self._emit(TokenType.IDENTIFIER, start)

    def _lex_string(self) -> None:
        start = self._current_pos()
        self._advance()  # consume opening quote

        while not self._at_end():
            ch = self._advance()
            if ch == "\\":
                if self._at_end():
                    break
                self._advance()  # escaped character, whatever it is
            elif ch == '"':
                self._emit(TokenType.STRING, start)
                return

        raise self._error("unterminated string literal", start)

    def _lex_comment(self) -> None:
        start = self._current_pos()
        while not self._at_end() and self._peek() != "\n":
            self._advance()
        if self._at_end():
            raise self._error("unterminated comment (expected a newline)", start)
        self._emit(TokenType.COMMENT, start)

    def _lex_colon(self) -> None:
        start = self._current_pos()
        self._advance()  # consume ':'
        nxt = self._peek()

        if nxt == ":":
            self._advance()
            self._emit(TokenType.STATIC_ASSIGN, start)
            return

        if nxt == "=":
            self._advance()
            self._emit(TokenType.VARIABLE_ASSIGN, start)
            return

        if nxt and is_letter(nxt):
            # Only the ':' belongs to the symbol; the type name follows
            self._emit(TokenType.TYPE_SYMBOL, start)
            return

        if not nxt:
            raise self._error("unexpected end of input after ':'", start)
        raise self._error(f"expected ':', '=' or a type name after ':', found {nxt!r}", start)


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source).tokenize()
