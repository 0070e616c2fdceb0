"""The command table built from tokens, and its diagnostic printout."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .tokens import TokenType, token_type_name

_REDIRECTION_KINDS = frozenset(
    {TokenType.REDIR_IN, TokenType.REDIR_OUT, TokenType.APPEND, TokenType.HERE_DOC}
)


@dataclass
class Redirection:
    """One redirection of a command.

    For a here-document *filename* is the delimiter, and the collected
    body is kept in *heredoc_content*.
    """

    filename: str
    kind: TokenType
    is_quoted: bool = False
    heredoc_content: str | None = None


@dataclass
class Command:
    """One simple command of a pipeline: its arguments and redirections."""

    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    def add_arg(self, arg: str) -> None:
        """Append an argument."""
        self.args.append(arg)


def is_redirection(kind: TokenType) -> bool:
    """Return True if *kind* is one of the redirection operators."""
    return kind in _REDIRECTION_KINDS


def syntax_error_message(token_content: str) -> str:
    """Return the message reported for an unexpected token."""
    return f"minishell: syntax error near unexpected token `{token_content}'"


def format_command_table(commands: Iterable[Command]) -> str:
    """Render the command table for debugging, one line per item."""
    lines = ["--- Command Table ---"]
    for number, command in enumerate(commands, start=1):
        lines.append(f"Command #{number}:")
        lines.extend(
            f"  Redir: type {token_type_name(redir.kind)}, file [{redir.filename}]"
            for redir in command.redirections
        )
        lines.extend(f"  Arg {index}: [{arg}]" for index, arg in enumerate(command.args))
    lines.append("---------------------")
    return "\n".join(lines) + "\n"