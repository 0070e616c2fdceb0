import signal

import pytest

from minish.commands import Command, Redirection
from minish.heredoc import (
    HeredocInterrupted,
    collect_heredoc,
    handle_heredocs,
    has_heredocs,
)
from minish.signals import setup_interactive_signals
from minish.state import ShellState
from minish.tokens import TokenType


@pytest.fixture(autouse=True)
def restore_signals():
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGQUIT)}
    yield
    for sig, handler in saved.items():
        if handler is not None:
            signal.signal(sig, handler)


def _reader(lines):
    it = iter(lines)
    prompts = []

    def read_line(prompt):
        prompts.append(prompt)
        return next(it, None)

    read_line.prompts = prompts
    return read_line


def _state():
    state = ShellState()
    state.env.set("HOME", "/home/x")
    return state


def _heredoc(delimiter, quoted=False):
    return Redirection(delimiter, TokenType.HERE_DOC, is_quoted=quoted)


def test_has_heredocs_detects_any_command():
    plain = Command(["cat"], [Redirection("f", TokenType.REDIR_IN)])
    with_doc = Command(["cat"], [_heredoc("EOF")])
    assert has_heredocs([plain, with_doc]) is True
    assert has_heredocs([plain]) is False
    assert has_heredocs([]) is False


def test_collect_expands_and_stops_at_delimiter():
    redir = _heredoc("EOF")
    read_line = _reader(["a $HOME", "b", "EOF", "never"])
    content = collect_heredoc(redir, _state(), read_line)
    assert content == "a /home/x\nb\n"
    assert redir.heredoc_content == content
    assert read_line.prompts == ["> "] * 3


def test_quoted_delimiter_keeps_text_literal():
    redir = _heredoc("'EOF'", quoted=True)
    content = collect_heredoc(redir, _state(), _reader(["a $HOME", "EOF"]))
    assert content == "a $HOME\n"


def test_exit_status_is_expanded():
    state = _state()
    state.exit_code = 7
    content = collect_heredoc(_heredoc("END"), state, _reader(["$?", "END"]))
    assert content == "7\n"


def test_end_of_input_finishes_body():
    content = collect_heredoc(_heredoc("EOF"), _state(), _reader(["only"]))
    assert content == "only\n"


def test_immediate_delimiter_gives_empty_body():
    redir = _heredoc("EOF")
    assert collect_heredoc(redir, _state(), _reader(["EOF"])) == ""
    assert redir.heredoc_content == ""


def test_interrupt_sets_status_and_raises(capsys):
    def read_line(prompt):
        raise KeyboardInterrupt

    state = _state()
    redir = _heredoc("EOF")
    with pytest.raises(HeredocInterrupted):
        collect_heredoc(redir, state, read_line)
    assert state.exit_code == 130
    assert state.heredoc_interrupted is True
    assert redir.heredoc_content is None
    assert capsys.readouterr().out == "\n"


def test_collect_restores_previous_handler():
    setup_interactive_signals()
    before = signal.getsignal(signal.SIGINT)
    content = collect_heredoc(_heredoc("EOF"), _state(), _reader(["x", "EOF"]))
    assert content == "x\n"
    assert signal.getsignal(signal.SIGINT) == before


def test_sigint_raises_keyboard_interrupt_while_reading():
    seen = []

    def read_line(prompt):
        seen.append(signal.getsignal(signal.SIGINT))
        return None

    content = collect_heredoc(_heredoc("EOF"), _state(), read_line)
    assert content == ""
    assert seen == [signal.default_int_handler]


def test_handle_heredocs_collects_all_in_order():
    first = _heredoc("A")
    second = _heredoc("B")
    commands = [
        Command(["cat"], [first]),
        Command(["wc"], [Redirection("f", TokenType.REDIR_OUT), second]),
    ]
    handle_heredocs(commands, _state(), _reader(["one", "A", "two", "B"]))
    assert first.heredoc_content == "one\n"
    assert second.heredoc_content == "two\n"


def test_handle_heredocs_restores_prompt_signals():
    setup_interactive_signals()
    interactive = signal.getsignal(signal.SIGINT)
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    redir = _heredoc("EOF")
    handle_heredocs([Command(["cat"], [redir])], _state(), _reader(["body", "EOF"]))
    assert redir.heredoc_content == "body\n"
    assert signal.getsignal(signal.SIGINT) == interactive


def test_handle_heredocs_stops_at_interrupt(capsys):
    calls = []

    def read_line(prompt):
        calls.append(prompt)
        raise KeyboardInterrupt

    setup_interactive_signals()
    interactive = signal.getsignal(signal.SIGINT)
    second = _heredoc("B")
    commands = [Command(["cat"], [_heredoc("A")]), Command(["cat"], [second])]
    state = _state()
    with pytest.raises(HeredocInterrupted):
        handle_heredocs(commands, state, read_line)
    assert len(calls) == 1
    assert second.heredoc_content is None
    assert state.heredoc_interrupted is True
    assert signal.getsignal(signal.SIGINT) == interactive