"""Building blocks of a small POSIX-style shell: lexer, expander, builtins, redirections and pipelines."""

__version__ = "0.1.0"