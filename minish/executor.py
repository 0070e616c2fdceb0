"""Running a parsed command line: builtins in the shell, programs as child processes."""

from __future__ import annotations

import copy
import io
import itertools
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager, redirect_stdout
from dataclasses import dataclass
from typing import IO, Any, BinaryIO, Protocol

from .builtins import ShellExit, run_any_builtin, run_complex_builtin
from .commands import Command
from .environment import Environment
from .errors import exec_error, format_error
from .heredoc import HeredocInterrupted, handle_heredocs, has_heredocs
from .pathsearch import find_command_path
from .redirect import OpenedStreams, RedirectionError, open_redirections
from .signals import setup_exec_signals, setup_interactive_signals
from .state import ShellState
from .textutil import is_whitespace_only
from .tokens import TokenType

_ENCODING = "utf-8"
_ENCODING_ERRORS = "surrogateescape"

NOT_FOUND_STATUS = 127
CANNOT_EXECUTE_STATUS = 126


class _Child(Protocol):
    def wait(self) -> int: ...


@dataclass
class _Finished:
    """A stage that completed without starting a program."""

    returncode: int

    def wait(self) -> int:
        return self.returncode


def path_error_message(cmd: str) -> str:
    """Return the error line for a command whose program could not be found."""
    if "/" in cmd:
        return format_error(cmd, "No such file or directory")
    return format_error(cmd, "command not found")


def exit_code_from_returncode(returncode: int) -> int:
    """Turn a child's return code into a shell status; a signal *n* gives 128 + n."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def _stderr(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def _reason(exc: OSError) -> str:
    return os.strerror(exc.errno) if exc.errno else str(exc)


def _record_status(returncode: int, state: ShellState) -> None:
    if returncode == -signal.SIGINT:
        _stderr("\n")
    elif returncode == -signal.SIGQUIT:
        _stderr("Quit (core dumped)\n")
    state.exit_code = exit_code_from_returncode(returncode)


def _report_redirection(exc: RedirectionError) -> None:
    _stderr(f"{exc.filename}: {exc.reason}\n")


def _install(setup: Callable[[], None]) -> None:
    if threading.current_thread() is threading.main_thread():
        setup()


def _skip_blank(args: Sequence[str]) -> list[str]:
    return list(itertools.dropwhile(is_whitespace_only, args))


def _heredoc_input(command: Command) -> bytes | None:
    content = None
    for redir in command.redirections:
        if redir.kind is TokenType.HERE_DOC and redir.heredoc_content is not None:
            content = redir.heredoc_content
    return None if content is None else content.encode(_ENCODING, _ENCODING_ERRORS)


def _child_state(state: ShellState) -> ShellState:
    """A copy of the session, so a stage cannot change the shell's own state."""
    return ShellState(
        env=copy.deepcopy(state.env),
        exit_code=state.exit_code,
        heredoc_interrupted=state.heredoc_interrupted,
    )


def _child_environment(env: Environment) -> dict[str, str]:
    return {key: value for key, value in env.items() if value is not None}


def _start_thread(target: Callable[..., None], *args: Any) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def _write_fd(fd: int, data: bytes) -> None:
    view = memoryview(data)
    try:
        while view:
            written = os.write(fd, view)
            view = view[written:]
    except OSError:
        pass
    finally:
        os.close(fd)


def _feed_pipe(stream: IO[bytes], data: bytes) -> None:
    try:
        stream.write(data)
    except OSError:
        pass
    finally:
        try:
            stream.close()
        except OSError:
            pass


@contextmanager
def _preserved_cwd() -> Iterator[None]:
    try:
        saved: str | None = os.getcwd()
    except OSError:
        saved = None
    try:
        yield
    finally:
        if saved is not None:
            try:
                os.chdir(saved)
            except OSError:
                pass


@contextmanager
def _builtin_output(
    stream: BinaryIO | None,
    fd: int | None,
    threads: list[threading.Thread],
) -> Iterator[None]:
    """Send what a builtin prints to *stream* or to the pipe *fd*, if either is given."""
    if stream is None and fd is None:
        yield
        return
    buffer = io.StringIO()
    try:
        with redirect_stdout(buffer):
            yield
    finally:
        data = buffer.getvalue().encode(_ENCODING, _ENCODING_ERRORS)
        if data:
            if stream is not None:
                stream.write(data)
                stream.flush()
            elif fd is not None:
                threads.append(_start_thread(_write_fd, os.dup(fd), data))


def _spawn(
    args: Sequence[str],
    env: Environment,
    stdin: int | BinaryIO | bytes | None,
    stdout: int | BinaryIO | None,
    threads: list[threading.Thread],
) -> _Child:
    path = find_command_path(args[0], env)
    if path is None:
        _stderr(path_error_message(args[0]) + "\n")
        return _Finished(NOT_FOUND_STATUS)
    if os.path.isdir(path):
        exec_error(path, "Is a directory")
        return _Finished(CANNOT_EXECUTE_STATUS)
    if not os.access(path, os.X_OK):
        exec_error(path, "Permission denied")
        return _Finished(CANNOT_EXECUTE_STATUS)
    feed = stdin if isinstance(stdin, bytes) else None
    stdin_arg = subprocess.PIPE if feed is not None else stdin
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        process = subprocess.Popen(
            list(args),
            executable=path,
            stdin=stdin_arg,
            stdout=stdout,
            env=_child_environment(env),
        )
    except OSError as exc:
        exec_error(path, _reason(exc))
        return _Finished(CANNOT_EXECUTE_STATUS)
    if feed is not None and process.stdin is not None:
        threads.append(_start_thread(_feed_pipe, process.stdin, feed))
    return process


def _run_command(
    command: Command,
    args: list[str],
    streams: OpenedStreams,
    state: ShellState,
    stdin_fd: int | None,
    stdout_fd: int | None,
    threads: list[threading.Thread],
) -> _Child:
    """Run one command as a child would: a builtin here, anything else as a program."""
    if not args:
        return _Finished(0)
    with _preserved_cwd(), _builtin_output(streams.stdout, stdout_fd, threads):
        try:
            status = run_any_builtin(args, state)
        except ShellExit as exc:
            status = exc.code
    if status is not None:
        return _Finished(status)
    heredoc = _heredoc_input(command)
    source: int | BinaryIO | bytes | None
    if streams.stdin is not None:
        source = streams.stdin
    elif heredoc is not None:
        source = heredoc
    else:
        source = stdin_fd
    target = streams.stdout if streams.stdout is not None else stdout_fd
    return _spawn(args, state.env, source, target, threads)


def _start_stage(
    command: Command,
    state: ShellState,
    stdin_fd: int | None,
    stdout_fd: int | None,
    threads: list[threading.Thread],
) -> _Child:
    try:
        streams = open_redirections(command.redirections)
    except RedirectionError as exc:
        _report_redirection(exc)
        return _Finished(1)
    with streams:
        return _run_command(
            command,
            _skip_blank(command.args),
            streams,
            _child_state(state),
            stdin_fd,
            stdout_fd,
            threads,
        )


def _execute_simple(command: Command, state: ShellState) -> None:
    try:
        streams = open_redirections(command.redirections)
    except RedirectionError as exc:
        _report_redirection(exc)
        state.exit_code = 1
        return
    threads: list[threading.Thread] = []
    with streams:
        args = _skip_blank(command.args)
        with _builtin_output(streams.stdout, None, threads):
            handled = run_complex_builtin(args, state)
        if handled:
            return
        _install(setup_exec_signals)
        try:
            child = _run_command(
                command, args, streams, _child_state(state), None, None, threads
            )
            returncode = child.wait()
        finally:
            _install(setup_interactive_signals)
    for thread in threads:
        thread.join()
    _record_status(returncode, state)


def execute_pipeline(commands: Iterable[Command], state: ShellState) -> int:
    """Run *commands* connected by pipes; the last one's status becomes the shell's.

    Builtins run on a copy of the state, so they do not change the shell.
    Returns 1 if the pipes could not be set up, otherwise 0.
    """
    commands = list(commands)
    threads: list[threading.Thread] = []
    children: list[_Child] = []
    stdin_fd: int | None = None
    status = 0
    try:
        for position, command in enumerate(commands):
            write_fd: int | None = None
            next_read: int | None = None
            if position < len(commands) - 1:
                try:
                    next_read, write_fd = os.pipe()
                except OSError as exc:
                    exec_error("pipe", _reason(exc))
                    status = 1
                    break
            try:
                children.append(_start_stage(command, state, stdin_fd, write_fd, threads))
            finally:
                if stdin_fd is not None:
                    os.close(stdin_fd)
                if write_fd is not None:
                    os.close(write_fd)
                stdin_fd = next_read
    finally:
        if stdin_fd is not None:
            os.close(stdin_fd)
    returncodes = [child.wait() for child in children]
    for thread in threads:
        thread.join()
    if status == 0 and returncodes:
        _record_status(returncodes[-1], state)
    return status


def execute(commands: Iterable[Command], state: ShellState) -> None:
    """Collect here-documents, then run one command or a pipeline.

    ``exit`` run on its own raises ShellExit.
    """
    commands = list(commands)
    if not commands:
        return
    if has_heredocs(commands):
        try:
            handle_heredocs(commands, state)
        except HeredocInterrupted:
            return
    first = commands[0]
    if not first.args:
        return
    if len(commands) == 1:
        _execute_simple(first, state)
        return
    second = commands[1]
    if second.args and second.args[0] == "exit":
        state.exit_code = NOT_FOUND_STATUS
        return
    execute_pipeline(commands, state)