"""Error reporting in the shell's ``minishell: cmd: msg`` style."""

from __future__ import annotations

import sys

PREFIX = "minishell: "


def format_error(cmd: str, msg: str | None) -> str:
    """Build the error line for *cmd*; the message part is left off when *msg* is None."""
    if msg is None:
        return f"{PREFIX}{cmd}"
    return f"{PREFIX}{cmd}: {msg}"


def exec_error(cmd: str, msg: str | None) -> None:
    """Write the error line for *cmd* to standard error."""
    sys.stderr.write(format_error(cmd, msg) + "\n")
    sys.stderr.flush()