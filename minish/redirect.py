"""Opening the files named by a command's redirections."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO

from .commands import Redirection
from .tokens import TokenType

_FILE_MODE = 0o644


class RedirectionError(Exception):
    """A redirection's file could not be opened."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason


@dataclass
class OpenedStreams:
    """The files a command reads from and writes to; None means unchanged."""

    stdin: BinaryIO | None = None
    stdout: BinaryIO | None = None

    def _replace_stdin(self, stream: BinaryIO) -> None:
        previous, self.stdin = self.stdin, stream
        if previous is not None:
            previous.close()

    def _replace_stdout(self, stream: BinaryIO) -> None:
        previous, self.stdout = self.stdout, stream
        if previous is not None:
            previous.close()

    def close(self) -> None:
        """Close every opened file."""
        for stream in (self.stdin, self.stdout):
            if stream is not None and not stream.closed:
                stream.close()

    def __enter__(self) -> "OpenedStreams":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _reason(exc: OSError) -> str:
    return os.strerror(exc.errno) if exc.errno else str(exc)


def _open(filename: str, flags: int, mode: str) -> BinaryIO:
    try:
        fd = os.open(filename, flags, _FILE_MODE)
    except OSError as exc:
        raise RedirectionError(filename, _reason(exc)) from exc
    return os.fdopen(fd, mode)


def open_redirections(redirections: Iterable[Redirection]) -> OpenedStreams:
    """Open the files of *redirections* in order; a later one replaces an earlier one.

    Here-documents are left to the caller. On the first file that cannot be
    opened, everything opened so far is closed and RedirectionError is raised.
    """
    streams = OpenedStreams()
    try:
        for redir in redirections:
            if redir.kind is TokenType.REDIR_IN:
                streams._replace_stdin(_open(redir.filename, os.O_RDONLY, "rb"))
            elif redir.kind is TokenType.REDIR_OUT:
                flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
                streams._replace_stdout(_open(redir.filename, flags, "wb"))
            elif redir.kind is TokenType.APPEND:
                flags = os.O_WRONLY | os.O_CREAT | os.O_APPEND
                streams._replace_stdout(_open(redir.filename, flags, "ab"))
    except RedirectionError:
        streams.close()
        raise
    return streams