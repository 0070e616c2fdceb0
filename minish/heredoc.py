"""Reading here-document bodies before a command line runs."""

from __future__ import annotations

import signal
import sys
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager

from .commands import Command, Redirection
from .heredoc_text import expand_heredoc_line, remove_quotes
from .signals import setup_interactive_signals
from .state import ShellState
from .tokens import TokenType

PROMPT = "> "
INTERRUPTED_STATUS = 130

ReadLine = Callable[[str], "str | None"]


class HeredocInterrupted(Exception):
    """Ctrl-C was pressed while a here-document was being read."""


def has_heredocs(commands: Iterable[Command]) -> bool:
    """Return True if any command has a here-document."""
    return any(
        redir.kind is TokenType.HERE_DOC
        for command in commands
        for redir in command.redirections
    )


def _read_from_terminal(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


@contextmanager
def _reading_signals() -> Iterator[None]:
    """Let Ctrl-C interrupt the reading and ignore Ctrl-\\ meanwhile."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous_int = signal.signal(signal.SIGINT, signal.default_int_handler)
    previous_quit = signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    try:
        yield
    finally:
        if previous_int is not None:
            signal.signal(signal.SIGINT, previous_int)
        if previous_quit is not None:
            signal.signal(signal.SIGQUIT, previous_quit)


def collect_heredoc(
    redirection: Redirection,
    state: ShellState,
    read_line: ReadLine | None = None,
) -> str:
    """Read lines until the delimiter or end of input and store them as the body.

    Lines are expanded unless the delimiter was quoted. *read_line* gets the
    prompt and returns a line, or None at end of input. Raises
    HeredocInterrupted on Ctrl-C, after setting the status to 130.
    """
    reader = read_line or _read_from_terminal
    delimiter = remove_quotes(redirection.filename)
    lines: list[str] = []
    with _reading_signals():
        try:
            while True:
                line = reader(PROMPT)
                if line is None or line == delimiter:
                    break
                if redirection.is_quoted:
                    lines.append(line)
                else:
                    lines.append(expand_heredoc_line(line, state.env, state.exit_code))
        except KeyboardInterrupt:
            sys.stdout.write("\n")
            sys.stdout.flush()
            state.exit_code = INTERRUPTED_STATUS
            state.heredoc_interrupted = True
            raise HeredocInterrupted(delimiter) from None
    content = "".join(f"{line}\n" for line in lines)
    redirection.heredoc_content = content
    return content


def handle_heredocs(
    commands: Iterable[Command],
    state: ShellState,
    read_line: ReadLine | None = None,
) -> None:
    """Collect every here-document in order, then restore the prompt's signals.

    Stops at the first interrupted one and re-raises HeredocInterrupted.
    """
    try:
        for command in commands:
            for redir in command.redirections:
                if redir.kind is TokenType.HERE_DOC:
                    collect_heredoc(redir, state, read_line)
    finally:
        setup_interactive_signals()