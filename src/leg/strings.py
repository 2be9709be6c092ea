"""Backslash escape resolution for string literal values."""

from __future__ import annotations

# Escapes that stand for a different character; any other \c yields c itself
_SIMPLE_ESCAPES: dict[str, str] = {"n": "\n", "t": "\t"}


def resolve_escapes(content: str) -> str:
    """Resolve backslash sequences in string literal content.

    The lexer lets a backslash escape any following character, so the same
    rule applies here: ``\\n`` and ``\\t`` become newline and tab, and every
    other ``\\c`` becomes ``c`` (``\\"`` -> ``"``, ``\\\\`` -> ``\\``). A
    trailing lone backslash is kept.
    """
    if "\\" not in content:
        return content

    chars: list[str] = []
    i = 0
    while i < len(content):
        ch = content[i]
        if ch == "\\" and i + 1 < len(content):
            nxt = content[i + 1]
            chars.append(_SIMPLE_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        chars.append(ch)
        i += 1
    return "".join(chars)
