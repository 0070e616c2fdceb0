"""Splitting a command line into words and operators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .textutil import is_space

QUOTES = "'\""
_OPERATOR_CHARS = "|<>"


class TokenType(Enum):
    """The kinds of token a command line is made of."""

    WORD = auto()
    PIPE = auto()
    REDIR_IN = auto()
    REDIR_OUT = auto()
    HERE_DOC = auto()
    APPEND = auto()


@dataclass
class Token:
    """One lexical unit: its raw text, its kind and whether it held quotes."""

    content: str
    kind: TokenType
    has_quotes: bool = False


_DOUBLE_OPERATORS = {"<": TokenType.HERE_DOC, ">": TokenType.APPEND}
_SINGLE_OPERATORS = {
    "<": TokenType.REDIR_IN,
    ">": TokenType.REDIR_OUT,
    "|": TokenType.PIPE,
}


def has_unclosed_quotes(text: str) -> bool:
    """Return True if a single or double quote in *text* is never closed."""
    open_quote: str | None = None
    for char in text:
        if open_quote is None:
            if char in QUOTES:
                open_quote = char
        elif char == open_quote:
            open_quote = None
    return open_quote is not None


def _lex_operator(text: str, start: int, tokens: list[Token]) -> int:
    """Add the operator at *start* and return the index after it."""
    char = text[start]
    if text[start + 1:start + 2] == char:
        # A doubled pipe is consumed without producing a token.
        kind = _DOUBLE_OPERATORS.get(char)
        if kind is not None:
            tokens.append(Token(char * 2, kind))
        return start + 2
    tokens.append(Token(char, _SINGLE_OPERATORS[char]))
    return start + 1


def _lex_word(text: str, start: int, tokens: list[Token]) -> int:
    """Add the word beginning at *start* and return the index after it."""
    end = start
    length = len(text)
    while end < length and not is_space(text[end]) and text[end] not in _OPERATOR_CHARS:
        char = text[end]
        if char in QUOTES:
            closing = text.find(char, end + 1)
            end = length if closing == -1 else closing + 1
        else:
            end += 1
    tokens.append(Token(text[start:end], TokenType.WORD))
    return end


def lex(text: str) -> list[Token]:
    """Split *text* into tokens; quoted parts stay inside their word, quotes included."""
    tokens: list[Token] = []
    index = 0
    while index < len(text):
        char = text[index]
        if is_space(char):
            index += 1
        elif char in _OPERATOR_CHARS:
            index = _lex_operator(text, index, tokens)
        else:
            index = _lex_word(text, index, tokens)
    return tokens


def token_type_name(kind: object) -> str:
    """Return the display name of a token kind, or ``UNKNOWN``."""
    if isinstance(kind, TokenType):
        return kind.name
    return "UNKNOWN"