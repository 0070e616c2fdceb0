import pytest

from minish.commands import (
    Command,
    Redirection,
    format_command_table,
    is_redirection,
    syntax_error_message,
)
from minish.tokens import TokenType


def test_add_arg_keeps_order():
    command = Command()
    for arg in ["ls", "-l", "dir"]:
        command.add_arg(arg)
    assert command.args == ["ls", "-l", "dir"]


def test_commands_do_not_share_lists():
    first, second = Command(), Command()
    first.add_arg("x")
    assert second.args == []
    assert second.redirections == []


def test_redirection_defaults():
    redir = Redirection("out.txt", TokenType.REDIR_OUT)
    assert redir.is_quoted is False
    assert redir.heredoc_content is None


@pytest.mark.parametrize(
    "kind, expected",
    [
        (TokenType.REDIR_IN, True),
        (TokenType.REDIR_OUT, True),
        (TokenType.APPEND, True),
        (TokenType.HERE_DOC, True),
        (TokenType.WORD, False),
        (TokenType.PIPE, False),
    ],
)
def test_is_redirection(kind, expected):
    assert is_redirection(kind) is expected


def test_syntax_error_message():
    assert syntax_error_message("|") == "minishell: syntax error near unexpected token `|'"


def test_empty_table():
    assert format_command_table([]) == "--- Command Table ---\n---------------------\n"


def test_table_lists_redirections_then_args():
    command = Command(
        args=["echo", "hi"],
        redirections=[Redirection("out.txt", TokenType.REDIR_OUT)],
    )
    lines = format_command_table([command]).splitlines()
    assert lines[1] == "Command #1:"
    assert lines[2] == "  Redir: type REDIR_OUT, file [out.txt]"
    assert lines[3] == "  Arg 0: [echo]"
    assert lines[4] == "  Arg 1: [hi]"


def test_table_numbers_commands():
    text = format_command_table([Command(["a"]), Command(["b"]), Command(["c"])])
    headers = [line for line in text.splitlines() if line.startswith("Command #")]
    assert headers == ["Command #1:", "Command #2:", "Command #3:"]