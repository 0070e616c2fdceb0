"""Locating the program a command name refers to."""

from __future__ import annotations

import os

from .environment import Environment


def find_command_path(cmd: str | None, env: Environment) -> str | None:
    """Return the path of the program *cmd* names, or None if there is none.

    A name holding ``/`` is used as it is when it exists. Otherwise every
    non-empty directory of PATH is tried in order, and the first existing
    entry wins.
    """
    if not cmd:
        return None
    if "/" in cmd:
        return cmd if os.access(cmd, os.F_OK) else None
    path_var = env.get("PATH")
    if path_var is None:
        return None
    for directory in path_var.split(":"):
        if not directory:
            continue
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.F_OK):
            return candidate
    return None