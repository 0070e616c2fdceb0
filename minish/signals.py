"""Signal handling for the prompt, the waiting shell and started programs."""

from __future__ import annotations

import signal
import sys
from types import FrameType

_ctrl_c_received = False


def _write_newline() -> None:
    sys.stdout.write("\n")
    sys.stdout.flush()


def _interactive_sigint_handler(signum: int, frame: FrameType | None) -> None:
    global _ctrl_c_received
    _write_newline()
    _ctrl_c_received = True


def _exec_signal_handler(signum: int, frame: FrameType | None) -> None:
    _write_newline()


def _take_ctrl_c() -> bool:
    """Return whether Ctrl-C arrived at the prompt since the last call, and clear it."""
    global _ctrl_c_received
    received, _ctrl_c_received = _ctrl_c_received, False
    return received


def setup_interactive_signals() -> None:
    """At the prompt: Ctrl-C prints a newline and is remembered; Ctrl-\\ is ignored."""
    signal.signal(signal.SIGINT, _interactive_sigint_handler)
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)


def setup_exec_signals() -> None:
    """While a program runs: both Ctrl-C and Ctrl-\\ only print a newline."""
    signal.signal(signal.SIGINT, _exec_signal_handler)
    signal.signal(signal.SIGQUIT, _exec_signal_handler)


def setup_child_signals() -> None:
    """Give both signals their default action, so they end a started program."""
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)