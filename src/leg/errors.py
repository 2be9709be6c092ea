"""Error types with formatted source context."""

from __future__ import annotations

from leg.tokens import Position, Span


class LegError(Exception):
    """Base class for every error raised by the Leg pipeline."""

    message: str

    def format(self, filename: str = "input.leg", source: str | None = None) -> str:
        raise NotImplementedError


def _snippet(
    message: str,
    start: Position,
    underline_len: int | None,
    source: str,
    filename: str,
) -> str:
    """Render a rustc-style error with the offending source line and carets.

    When underline_len is None the underline runs to the end of the line.
    """
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    if underline_len is None:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * max(1, underline_len)

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


def _span_underline(span: Span) -> int | None:
    # Underline the full span when on one line, otherwise to end of line
    if span.end.line == span.start.line:
        return max(1, span.end.column - span.start.column)
    return None


class TokenizationError(LegError):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.leg", source: str | None = None) -> str:
        text = self.source if source is None else source
        return _snippet(self.message, self.position, 1, text, filename)


class ParsingError(LegError):
    """Raised on the first parse error, with the offending token's span."""

    def __init__(self, message: str, span: Span, source: str = "") -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.leg", source: str | None = None) -> str:
        text = self.source if source is None else source
        return _snippet(self.message, self.span.start, _span_underline(self.span), text, filename)


class InterpError(LegError):
    """Raised on evaluation errors.

    The span is the node being evaluated when the error surfaced, if any. The
    call stack lists the user functions active at that point, outermost first.
    """

    def __init__(
        self,
        message: str,
        span: Span | None = None,
        call_stack: list[str] | None = None,
    ) -> None:
        self.message = message
        self.span = span
        self.call_stack = call_stack or []
        super().__init__(self.message)

    def format(self, filename: str = "input.leg", source: str | None = None) -> str:
        if self.span is None or source is None:
            result = f"error: {self.message}"
        else:
            result = _snippet(
                self.message, self.span.start, _span_underline(self.span), source, filename
            )
        if self.call_stack:
            chain = " -> ".join(f"{name}()" for name in self.call_stack)
            result += f"\n  in call chain: {chain}"
        return result
