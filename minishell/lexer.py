"""Splitting a command line into tokens and gluing adjacent pieces into words."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

from minishell.environment import Environment
from minishell.expansion import expand_variables

_SPACE = " \t\n\v\f\r"
_OPERATOR_CHARS = "<>|"
_WORD = re.compile(r"[^ \t\n\v\f\r'\"<>|]+")

UNCLOSED_QUOTE = "minishell: syntax error: unclosed quote\n"


class TokenType(Enum):
    """Kinds of token produced by the lexer."""

    WORD = "word"
    PIPE = "pipe"
    R_INPUT = "<"
    R_OUTPUT = ">"
    R_APPEND = ">>"
    HERE_DOC = "<<"
    D_QUOTE = "double-quoted"
    S_QUOTE = "single-quoted"
    EXPAND = "expand"


_REDIRECTIONS = frozenset(
    {TokenType.R_INPUT, TokenType.R_OUTPUT, TokenType.R_APPEND, TokenType.HERE_DOC}
)
_ARGUMENTS = frozenset(
    {TokenType.WORD, TokenType.EXPAND, TokenType.S_QUOTE, TokenType.D_QUOTE}
)


class LexError(Exception):
    """A command line that cannot be split into tokens."""


@dataclass
class Token:
    """One lexical token of a command line."""

    type: TokenType
    content: str
    should_expand: bool = False
    has_space_before: bool = False
    was_merged: bool = False

    def is_argument(self) -> bool:
        """True for tokens that become command arguments."""
        return self.type in _ARGUMENTS

    def is_redirection(self) -> bool:
        """True for ``<``, ``>``, ``>>`` and ``<<``."""
        return self.type in _REDIRECTIONS

    def is_operator(self) -> bool:
        """True for redirections and pipes."""
        return self.type is TokenType.PIPE or self.type in _REDIRECTIONS


def _is_operator_char(char: str) -> bool:
    return char != "" and char in _OPERATOR_CHARS


def _syntax_error(token: str) -> LexError:
    return LexError(f"minishell: syntax error near unexpected token `{token}'\n")


def _scan_operator(line: str, pos: int, spaced: bool) -> tuple[Token, int]:
    char = line[pos]
    following = line[pos + 1 : pos + 2]
    after = line[pos + 2 : pos + 3]
    if char == "|":
        if _is_operator_char(following):
            raise _syntax_error(following)
        return Token(TokenType.PIPE, "|", False, spaced), pos + 1
    if following == char:
        if _is_operator_char(after):
            raise _syntax_error(after)
        kind = TokenType.R_APPEND if char == ">" else TokenType.HERE_DOC
        return Token(kind, char * 2, False, spaced), pos + 2
    kind = TokenType.R_OUTPUT if char == ">" else TokenType.R_INPUT
    return Token(kind, char, False, spaced), pos + 1


def _scan_quoted(line: str, pos: int, spaced: bool) -> tuple[Token, int]:
    quote = line[pos]
    end = line.find(quote, pos + 1)
    if end < 0:
        raise LexError(UNCLOSED_QUOTE)
    content = line[pos + 1 : end]
    if quote == "'":
        return Token(TokenType.S_QUOTE, content, False, spaced), end + 1
    return Token(TokenType.D_QUOTE, content, True, spaced), end + 1


def _scan_one(line: str, pos: int, spaced: bool) -> tuple[Token, int]:
    char = line[pos]
    if char in _OPERATOR_CHARS:
        return _scan_operator(line, pos, spaced)
    if char in "'\"":
        return _scan_quoted(line, pos, spaced)
    match = _WORD.match(line, pos)
    assert match is not None
    return Token(TokenType.WORD, match.group(), True, spaced), match.end()


def scan(line: str) -> list[Token]:
    """Split ``line`` into raw tokens without expanding or merging them.

    Raises LexError for an unclosed quote or an operator directly followed
    by another operator where that is not allowed.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(line)
    while pos < length:
        start = pos
        while pos < length and line[pos] in _SPACE:
            pos += 1
        if pos >= length:
            break
        token, pos = _scan_one(line, pos, pos > start)
        tokens.append(token)
    return tokens


def _expanded(token: Token, env: Environment | None, exit_status: int) -> str:
    if not token.should_expand:
        return token.content
    return expand_variables(token.content, env, exit_status)


def merge_tokens(
    tokens: Iterable[Token], env: Environment | None, exit_status: int = 0
) -> list[Token]:
    """Expand variables and join pieces written without space between them.

    Operators are never joined. A joined token becomes a WORD marked as
    merged. The given tokens are left unchanged.
    """
    merged: list[Token] = []
    for token in tokens:
        if token.is_operator():
            merged.append(replace(token))
            continue
        content = _expanded(token, env, exit_status)
        previous = merged[-1] if merged else None
        if (
            previous is not None
            and not previous.is_operator()
            and not token.has_space_before
        ):
            merged[-1] = replace(
                previous,
                type=TokenType.WORD,
                content=previous.content + content,
                should_expand=False,
                was_merged=True,
            )
        else:
            merged.append(replace(token, content=content, should_expand=False))
    return merged


def tokenize(
    line: str, env: Environment | None, exit_status: int = 0
) -> list[Token]:
    """Scan ``line`` and return its expanded, merged tokens."""
    return merge_tokens(scan(line), env, exit_status)