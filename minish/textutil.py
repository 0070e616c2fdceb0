"""Small text helpers with the character rules the shell relies on."""

from __future__ import annotations

import re

_C_SPACE = frozenset(" \t\n\v\f\r")
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def is_space(char: str) -> bool:
    """Return True for a single space, tab, newline, vertical tab, form feed or CR."""
    return len(char) == 1 and char in _C_SPACE


def is_whitespace_only(text: str | None) -> bool:
    """Return True when *text* is missing, empty or made only of whitespace."""
    if text is None:
        return True
    return all(is_space(char) for char in text)


def c_strcmp(left: str, right: str) -> int:
    """Compare two strings the way ``strcmp`` does.

    The result is the difference of the first differing character codes,
    with the end of a string counting as code zero.
    """
    for a, b in zip(left, right):
        if a != b:
            return ord(a) - ord(b)
    if len(left) == len(right):
        return 0
    if len(left) > len(right):
        return ord(left[len(right)])
    return -ord(right[len(left)])


def c_atoi(text: str) -> int:
    """Parse a leading integer like ``atoi``: skip whitespace, optional sign, digits.

    Returns 0 when no digits follow.
    """
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    return int(match.group(1))