"""State shared by every stage of one shell session."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .environment import Environment


@dataclass
class ShellState:
    """The environment, last exit status and per-line flags of a session."""

    env: Environment = field(default_factory=Environment)
    exit_code: int = 0
    heredoc_interrupted: bool = False
    tokens: list[Any] = field(default_factory=list)

    @classmethod
    def from_envp(cls, envp: Iterable[str], cwd: str | None = None) -> "ShellState":
        """Start a session from ``KEY=VALUE`` strings."""
        return cls(env=Environment.from_envp(envp, cwd))