"""Text handling for here-document bodies and delimiters."""

from __future__ import annotations

from .environment import Environment
from .tokens import QUOTES


def _is_name_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def expand_heredoc_line(line: str, env: Environment, exit_code: int) -> str:
    """Expand ``$NAME`` and ``$?`` in one here-document line.

    Quotes have no special meaning here.  A ``$`` at the very end of the
    line is kept; a ``$`` followed by no name is dropped.
    """
    pieces: list[str] = []
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char != "$" or index + 1 >= length:
            pieces.append(char)
            index += 1
            continue
        index += 1
        if line[index] == "?":
            pieces.append(str(exit_code))
            index += 1
            continue
        end = index
        while end < length and _is_name_char(line[end]):
            end += 1
        if end > index:
            pieces.append(env.value_of(line[index:end]))
        index = end
    return "".join(pieces)


def remove_quotes(text: str) -> str:
    """Strip quote pairs from *text*; an unclosed quote runs to the end."""
    pieces: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char in QUOTES:
            closing = text.find(char, index + 1)
            end = length if closing == -1 else closing
            pieces.append(text[index + 1:end])
            index = end + 1
        else:
            pieces.append(char)
            index += 1
    return "".join(pieces)