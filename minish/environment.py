"""The shell's ordered environment table."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator

from .textutil import c_atoi


def is_valid_identifier(name: str | None) -> bool:
    """Return True if *name* is a valid shell variable name."""
    if not name:
        return False
    first = name[0]
    if not (_is_ascii_alpha(first) or first == "_"):
        return False
    return all(_is_ascii_alpha(c) or c.isascii() and c.isdigit() or c == "_" for c in name[1:])


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


class Environment:
    """Variables in insertion order; a variable may exist without a value."""

    def __init__(self) -> None:
        self._vars: dict[str, str | None] = {}

    @classmethod
    def from_envp(cls, envp: Iterable[str], cwd: str | None = None) -> "Environment":
        """Build from ``KEY=VALUE`` strings and bump SHLVL.

        With no entries at all, a minimal table holding PWD (from *cwd*, or the
        current directory when *cwd* is None) is created instead.
        """
        env = cls()
        entries = list(envp) if envp is not None else []
        if entries:
            for entry in entries:
                key, sep, value = entry.partition("=")
                if key not in env._vars:
                    env._vars[key] = value if sep else None
        else:
            if cwd is None:
                try:
                    cwd = os.getcwd()
                except OSError:
                    cwd = None
            if cwd is not None:
                env._vars["PWD"] = cwd
        env.update_shell_level()
        return env

    def get(self, key: str) -> str | None:
        """Return the value of *key*, or None if it is missing or has no value."""
        return self._vars.get(key)

    def value_of(self, key: str) -> str:
        """Return the value of *key* for expansion: empty when missing or valueless."""
        return self._vars.get(key) or ""

    def set(self, key: str, value: str | None) -> None:
        """Set *key*; a None value adds the name but never clears an existing value."""
        if value is None:
            self._vars.setdefault(key, None)
        else:
            self._vars[key] = value

    def unset(self, key: str) -> None:
        """Remove *key* if present."""
        self._vars.pop(key, None)

    def update_shell_level(self) -> None:
        """Increment SHLVL, creating it as ``1`` when absent or valueless."""
        current = self._vars.get("SHLVL", None)
        if current is not None:
            self._vars["SHLVL"] = str(c_atoi(current) + 1)
        else:
            self._vars["SHLVL"] = "1"

    def to_envp(self) -> list[str]:
        """Return ``KEY=VALUE`` strings for a child process; valueless names are left out."""
        return [f"{key}={value}" for key, value in self._vars.items() if value is not None]

    def items(self) -> list[tuple[str, str | None]]:
        """Return (key, value) pairs in order, valueless names included."""
        return list(self._vars.items())

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __len__(self) -> int:
        return len(self._vars)