import pytest

from minish.environment import Environment
from minish.heredoc_text import expand_heredoc_line, remove_quotes

USER = "alice"


@pytest.fixture
def env():
    environment = Environment()
    environment.set("USER", USER)
    environment.set("EMPTY", None)
    return environment


def test_variable_in_line(env):
    assert expand_heredoc_line("hello $USER", env, 0) == "hello " + USER


def test_exit_code(env):
    assert expand_heredoc_line("$?", env, 7) == str(7)


def test_repeated_exit_code(env):
    assert expand_heredoc_line("$?$?", env, 3) == str(3) * 2


def test_missing_and_valueless_are_empty(env):
    assert expand_heredoc_line("$MISSING!", env, 0) == "!"
    assert expand_heredoc_line("[$EMPTY]", env, 0) == "[]"


def test_trailing_dollar_kept(env):
    assert expand_heredoc_line("cost $", env, 0) == "cost $"


def test_dollar_without_name_dropped(env):
    assert expand_heredoc_line("$ x", env, 0) == " x"


def test_quotes_do_not_block_expansion(env):
    assert expand_heredoc_line("'$USER'", env, 0) == "'" + USER + "'"


def test_line_without_dollar_unchanged(env):
    line = "just 'some' \"text\""
    assert expand_heredoc_line(line, env, 0) == line


@pytest.mark.parametrize(
    "text, expected",
    [
        ("'EOF'", "EOF"),
        ('"E"OF', "EOF"),
        ("E'O", "EO"),
        ("plain", "plain"),
        ("\"it's\"", "it's"),
        ("", ""),
    ],
)
def test_remove_quotes(text, expected):
    assert remove_quotes(text) == expected


@pytest.mark.parametrize("text", ["abc", "a b c", "$VAR", "x-y_z"])
def test_remove_quotes_without_quotes_is_identity(text):
    assert remove_quotes(text) == text


@pytest.mark.parametrize("text", ["'a'", "\"b'c\"", "x'y'z"])
def test_remove_quotes_never_lengthens(text):
    assert len(remove_quotes(text)) < len(text)