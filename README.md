# minish

`minish` is a library of the stages of a small POSIX-style shell. Each stage
is a plain Python function or class, so you can use the stages on their own
or chain them together.

## What is in it

- **`minish.tokens`**: `lex(text)` splits a command line into `Token`
  objects. Each token is a word, `|`, `<`, `>`, `<<` or `>>`, and its kind
  is a `TokenType`. A quoted part stays inside its word with the quotes
  kept. `has_unclosed_quotes(text)` reports a quote that is never closed.
  `token_type_name(kind)` returns the display name of a kind.
- **`minish.expander`**: `expand_word(content, env, exit_code)` expands
  `$NAME` and `$?` and removes the quotes that delimit parts of the word.
  Text inside single quotes is not expanded. A `$` that is not followed by
  a name is kept as it is. `expand_tokens(tokens, env, exit_code)` expands
  every word token and drops any unquoted word that expands to nothing.
- **`minish.environment`**: `Environment` is an ordered set of variables,
  and a variable may exist without a value. `Environment.from_envp(envp,
  cwd)` builds the set from `KEY=VALUE` strings and increments `SHLVL`.
  With an empty list it holds only `PWD`. Its methods are `get`,
  `value_of`, `set`, `unset`, `items` and `to_envp`.
  `is_valid_identifier(name)` checks whether a string is a valid variable
  name.
- **`minish.state`**: `ShellState` holds the environment, the last exit
  status and the here-document interrupt flag.
- **`minish.commands`**: `Command` holds the arguments and the list of
  `Redirection` objects for one stage of a pipeline. The module also has
  `is_redirection`, `syntax_error_message` and `format_command_table`,
  which renders a command list as a debug listing.
- **`minish.builtins`**: the builtins are `builtin_echo`, `builtin_pwd`,
  `builtin_env`, `builtin_cd`, `builtin_export`, `builtin_unset` and
  `builtin_exit`. `builtin_exit` raises `ShellExit` with the exit code.
  Three dispatchers select a builtin by name: `run_simple_builtin`,
  `run_complex_builtin` and `run_any_builtin`.
- **`minish.pathsearch`**: `find_command_path(cmd, env)` searches `PATH`
  for the program a name refers to.
- **`minish.redirect`**: `open_redirections(redirections)` opens the files
  for `<`, `>` and `>>`. It returns an `OpenedStreams` object and raises
  `RedirectionError` when a file cannot be opened.
- **`minish.heredoc_text`** and **`minish.heredoc`**: these modules read
  here-document bodies. `collect_heredoc` and `handle_heredocs` accept an
  optional `read_line` callable, so a body can come from any source; by
  default they read from the terminal. Each line is expanded unless the
  redirection's `is_quoted` flag is set. Ctrl-C while reading raises
  `HeredocInterrupted` and sets the status to 130.
- **`minish.signals`**: these functions install the signal handlers for
  three situations: the prompt, the wait for a running program, and a
  started program.
- **`minish.executor`**: `execute(commands, state)` collects the
  here-documents first, then runs one command or a pipeline. Builtins run
  inside the shell, and other commands run as child processes. The exit
  status is 127 for a missing command, 126 for one that cannot be run, and
  128 plus the signal number for a command killed by a signal. Builtins
  inside a pipeline run on a copy of the state. `exit` run on its own
  raises `ShellExit`.

## A quick look

```python
import os

from minish.commands import Command
from minish.environment import Environment, is_valid_identifier
from minish.executor import execute
from minish.expander import expand_tokens, expand_word
from minish.state import ShellState
from minish.tokens import has_unclosed_quotes, lex

env = Environment.from_envp(["HOME=/home/alice", "SHLVL=1"], "/tmp")

tokens = lex('echo "$HOME" | cat > out.txt')
words = expand_tokens(tokens, env, 0)

expand_word("'$HOME'", env, 0)     # "$HOME": single quotes keep it literal
has_unclosed_quotes("echo 'oops")  # True
is_valid_identifier("1abc")        # False

state = ShellState.from_envp(f"{k}={v}" for k, v in os.environ.items())
execute([Command(["echo", "hello"]), Command(["tr", "a-z", "A-Z"])], state)
state.exit_code                    # status of the last stage
```

## What it does not do

- **No token-to-command step.** The package does not turn a list of tokens
  into `Command` objects. You must build the `Command` and `Redirection`
  objects yourself. `is_redirection` and `syntax_error_message` are there
  to help with that step.
- **No interactive shell.** The package has no prompt loop and installs no
  command to start one.
- **No line editing or history.**

## Running the tests

Install the `test` extra, which provides pytest, and run `pytest`.