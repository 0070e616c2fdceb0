import pytest

from minish.tokens import (
    Token,
    TokenType,
    has_unclosed_quotes,
    lex,
    token_type_name,
)


def contents(tokens):
    return [token.content for token in tokens]


def kinds(tokens):
    return [token.kind for token in tokens]


def test_simple_words():
    tokens = lex("echo hello")
    assert contents(tokens) == ["echo", "hello"]
    assert kinds(tokens) == [TokenType.WORD, TokenType.WORD]


def test_redirections():
    tokens = lex("cat < in > out")
    assert kinds(tokens) == [
        TokenType.WORD,
        TokenType.REDIR_IN,
        TokenType.WORD,
        TokenType.REDIR_OUT,
        TokenType.WORD,
    ]
    assert contents(tokens) == ["cat", "<", "in", ">", "out"]


def test_double_operators():
    tokens = lex("cat << EOF >> log")
    assert contents(tokens) == ["cat", "<<", "EOF", ">>", "log"]
    assert kinds(tokens)[1] is TokenType.HERE_DOC
    assert kinds(tokens)[3] is TokenType.APPEND


def test_pipe_without_spaces():
    tokens = lex("a|b")
    assert contents(tokens) == ["a", "|", "b"]
    assert tokens[1].kind is TokenType.PIPE


def test_doubled_pipe_produces_no_token():
    assert contents(lex("a || b")) == ["a", "b"]


def test_quotes_stay_in_word():
    tokens = lex("echo 'a b' \"c|d\"")
    assert contents(tokens) == ["echo", "'a b'", '"c|d"']
    assert all(token.kind is TokenType.WORD for token in tokens)


def test_unclosed_quote_runs_to_end():
    assert contents(lex("echo 'abc def")) == ["echo", "'abc def"]


def test_whitespace_only_input():
    assert lex(" \t\n ") == []


def test_new_tokens_have_no_quote_flag():
    assert [token.has_quotes for token in lex("echo 'x'")] == [False, False]


@pytest.mark.parametrize("words", [["ls", "-la"], ["a", "b", "c"], ["x"]])
def test_plain_words_round_trip(words):
    assert contents(lex("  ".join(words))) == words


@pytest.mark.parametrize(
    "text, expected",
    [
        ("echo 'hi'", False),
        ('echo "hi', True),
        ("echo 'it\"s'", False),
        ("echo \"it's", True),
        ("plain", False),
        ("'", True),
    ],
)
def test_has_unclosed_quotes(text, expected):
    assert has_unclosed_quotes(text) is expected


@pytest.mark.parametrize(
    "kind, name",
    [
        (TokenType.WORD, "WORD"),
        (TokenType.PIPE, "PIPE"),
        (TokenType.REDIR_IN, "REDIR_IN"),
        (TokenType.REDIR_OUT, "REDIR_OUT"),
        (TokenType.HERE_DOC, "HERE_DOC"),
        (TokenType.APPEND, "APPEND"),
    ],
)
def test_token_type_name(kind, name):
    assert token_type_name(kind) == name


def test_token_type_name_unknown():
    assert token_type_name("bogus") == "UNKNOWN"


def test_token_equality():
    assert Token("a", TokenType.WORD) == lex("a")[0]