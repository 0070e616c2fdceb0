"""Variable expansion and quote removal for word tokens."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .environment import Environment
from .tokens import QUOTES, Token, TokenType


def _is_name_start(char: str) -> bool:
    return char.isascii() and (char.isalpha() or char == "_")


def _is_name_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def _expand_dollar(content: str, index: int, env: Environment, exit_code: int) -> tuple[str, int]:
    """Expand what follows a ``$`` at *index*; return the text and the next index."""
    following = content[index:index + 1]
    if following == "?":
        return str(exit_code), index + 1
    if not following or not _is_name_start(following):
        return "$", index
    end = index
    while end < len(content) and _is_name_char(content[end]):
        end += 1
    return env.value_of(content[index:end]), end


def expand_word(content: str, env: Environment, exit_code: int) -> str:
    """Expand variables in *content* and drop the quotes that delimit its parts.

    ``$`` is left alone inside single quotes; a quote of the other kind
    inside a quoted part is kept as a literal character.
    """
    pieces: list[str] = []
    open_quote: str | None = None
    index = 0
    while index < len(content):
        char = content[index]
        if char in QUOTES and open_quote in (None, char):
            open_quote = None if open_quote else char
            index += 1
        elif char == "$" and open_quote != "'":
            piece, index = _expand_dollar(content, index + 1, env, exit_code)
            pieces.append(piece)
        else:
            pieces.append(char)
            index += 1
    return "".join(pieces)


def expand_tokens(tokens: Iterable[Token], env: Environment, exit_code: int) -> list[Token]:
    """Return the tokens with every word expanded.

    A word that expands to nothing and had no quotes is dropped.
    """
    result: list[Token] = []
    for token in tokens:
        if token.kind is not TokenType.WORD:
            result.append(token)
            continue
        has_quotes = any(char in QUOTES for char in token.content)
        content = expand_word(token.content, env, exit_code)
        if not content and not has_quotes:
            continue
        result.append(replace(token, content=content, has_quotes=has_quotes))
    return result