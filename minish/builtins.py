"""The commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from .environment import Environment, is_valid_identifier
from .errors import exec_error
from .state import ShellState
from .textutil import is_space

_LONG_MAX = "9223372036854775807"
_LONG_MIN_MAGNITUDE = "9223372036854775808"
_SORTED_ENV_LIMIT = 1024


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with *code*."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def _out(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _err(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def _os_error_line(name: str, exc: OSError) -> str:
    reason = os.strerror(exc.errno) if exc.errno else str(exc)
    return f"{name}: {reason}\n"


def builtin_echo(args: Sequence[str]) -> int:
    """Print the arguments separated by spaces; a leading ``-n`` drops the newline."""
    words = list(args[1:])
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    _out(" ".join(words) + ("\n" if newline else ""))
    return 0


def builtin_pwd() -> int:
    """Print the current directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        _err(_os_error_line("pwd", exc))
        return 1
    _out(cwd + "\n")
    return 0


def builtin_env(env: Environment) -> int:
    """Print every variable that has a value as ``KEY=VALUE``."""
    _out("".join(f"{key}={value}\n" for key, value in env.items() if value is not None))
    return 0


def _previous_directory(env: Environment) -> str:
    if "PWD" in env:
        return env.get("PWD") or ""
    try:
        return os.getcwd()
    except OSError:
        return ""


def _cd_target(args: Sequence[str], env: Environment) -> str | None:
    if len(args) < 2:
        home = env.get("HOME")
        if home is None:
            _err("minishell: cd: HOME not set\n")
        return home
    if args[1] == "-":
        oldpwd = env.get("OLDPWD")
        if oldpwd is None:
            _err("minishell: cd: OLDPWD not set\n")
        return oldpwd
    return args[1]


def builtin_cd(args: Sequence[str], env: Environment) -> int:
    """Change directory to the argument, to HOME, or with ``-`` to OLDPWD."""
    if len(args) > 2:
        _err("minishell: cd: too many arguments\n")
        return 1
    old_pwd = _previous_directory(env)
    target = _cd_target(args, env)
    if target is None:
        return 1
    try:
        os.chdir(target)
    except OSError as exc:
        _err("minishell: cd: " + _os_error_line(target, exc))
        return 1
    if len(args) > 1 and args[1] == "-":
        _out(target + "\n")
    env.set("OLDPWD", old_pwd)
    try:
        env.set("PWD", os.getcwd())
    except OSError:
        pass
    return 0


def is_numeric_argument(text: str | None) -> bool:
    """Return True for an optional sign followed by one or more ASCII digits."""
    if not text:
        return False
    digits = text[1:] if text[0] in "+-" else text
    return bool(digits) and all(c in "0123456789" for c in digits)


def exceeds_long_limits(text: str) -> bool:
    """Return True if the signed decimal *text* lies outside a 64-bit signed range."""
    negative = text[:1] == "-"
    digits = text[1:] if text[:1] in "+-" else text
    if len(digits) != len(_LONG_MAX):
        return len(digits) > len(_LONG_MAX)
    limit = _LONG_MIN_MAGNITUDE if negative else _LONG_MAX
    return digits > limit


def _parse_long(text: str) -> int:
    stripped = text.lstrip(" \t\n\v\f\r")
    sign = 1
    if stripped[:1] in ("+", "-"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if char not in "0123456789":
            break
        digits += char
    return sign * int(digits) if digits else 0


def builtin_exit(args: Sequence[str], state: ShellState) -> int:
    """Leave the shell by raising :class:`ShellExit`.

    With more than one argument nothing is left: the status becomes 1
    and 1 is returned.
    """
    code = state.exit_code
    if len(args) > 1:
        arg = args[1]
        if not is_numeric_argument(arg) or exceeds_long_limits(arg):
            _out("exit\n")
            exec_error("exit", "numeric argument required")
            raise ShellExit(2)
        if len(args) > 2:
            exec_error("exit", "too many arguments")
            state.exit_code = 1
            return 1
        code = _parse_long(arg)
    _out("exit\n")
    raise ShellExit(code % 256)


def normalize_whitespace(text: str) -> str:
    """Trim *text* and collapse each run of whitespace into one space."""
    words: list[str] = []
    current: list[str] = []
    for char in text:
        if is_space(char):
            if current:
                words.append("".join(current))
                current = []
        else:
            current.append(char)
    if current:
        words.append("".join(current))
    return " ".join(words)


def split_assignment(arg: str) -> tuple[str, str | None]:
    """Split ``KEY=VALUE`` into key and normalised value; without ``=`` the value is None.

    Raises ValueError when the key before ``=`` is empty.
    """
    key, sep, value = arg.partition("=")
    if not sep:
        return arg, None
    if not key:
        raise ValueError(f"empty name in {arg!r}")
    return key, normalize_whitespace(value)


def _export_error(arg: str) -> None:
    _err(f"minishell: export: `{arg}': not a valid identifier\n")


def _export_one(arg: str, env: Environment) -> int:
    if not arg:
        return 1
    try:
        key, value = split_assignment(arg)
    except ValueError:
        _export_error(arg)
        return 1
    if not is_valid_identifier(key):
        _export_error(arg)
        return 1
    env.set(key, value)
    return 0


def format_sorted_env(env: Environment) -> str:
    """Render the variables as ``declare -x`` lines in byte order of their names."""
    entries = env.items()[:_SORTED_ENV_LIMIT]
    lines = []
    for key, value in sorted(entries, key=lambda item: item[0]):
        line = f"declare -x {key}"
        if value is not None:
            line += f'="{value}"'
        lines.append(line + "\n")
    return "".join(lines)


def builtin_export(args: Sequence[str], env: Environment) -> int:
    """Set variables from ``KEY[=VALUE]`` arguments, or list them when none are given."""
    if not args:
        return 1
    if len(args) == 1:
        _out(format_sorted_env(env))
        return 0
    status = 0
    for arg in args[1:]:
        if _export_one(arg, env) != 0:
            status = 1
    return status


def builtin_unset(args: Sequence[str], env: Environment) -> int:
    """Remove each named variable; invalid names are reported and make the status 1."""
    if not args:
        return 1
    status = 0
    for name in args[1:]:
        if not is_valid_identifier(name):
            _err(f"minishell: unset: `{name}': not a valid identifier\n")
            status = 1
        else:
            env.unset(name)
    return status


def run_simple_builtin(args: Sequence[str], state: ShellState) -> int | None:
    """Run ``echo``, ``pwd`` or ``env``; return its status, or None if *args* is none of them."""
    if not args:
        return None
    name = args[0]
    if name == "echo":
        return builtin_echo(args)
    if name == "pwd":
        return builtin_pwd()
    if name == "env":
        return builtin_env(state.env)
    return None


def run_complex_builtin(args: Sequence[str], state: ShellState) -> bool:
    """Run ``cd``, ``export``, ``unset`` or ``exit`` in this process, storing the status.

    Returns False when *args* names none of them.
    """
    if not args:
        return False
    name = args[0]
    if name == "cd":
        state.exit_code = builtin_cd(args, state.env)
    elif name == "export":
        state.exit_code = builtin_export(args, state.env)
    elif name == "unset":
        state.exit_code = builtin_unset(args, state.env)
    elif name == "exit":
        builtin_exit(args, state)
    else:
        return False
    return True


def run_any_builtin(args: Sequence[str], state: ShellState) -> int | None:
    """Run any builtin and return its status, or None if *args* names no builtin."""
    status = run_simple_builtin(args, state)
    if status is not None:
        return status
    if not args:
        return None
    name = args[0]
    if name == "cd":
        return builtin_cd(args, state.env)
    if name == "export":
        return builtin_export(args, state.env)
    if name == "unset":
        return builtin_unset(args, state.env)
    if name == "exit":
        builtin_exit(args, state)
        return state.exit_code
    return None