"""Expansion of ``$NAME`` and ``$?`` references inside a piece of text."""

from __future__ import annotations

from minishell.environment import Environment


def _is_ascii_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def is_name_start(char: str) -> bool:
    """Return True if ``char`` may begin a variable name after ``$``."""
    return len(char) == 1 and (_is_ascii_alpha(char) or char == "_")


def is_name_char(char: str) -> bool:
    """Return True if ``char`` may continue a variable name.

    Digits, letters and underscores qualify, and so do dots and spaces.
    """
    return len(char) == 1 and (
        _is_ascii_alpha(char) or "0" <= char <= "9" or char in "_. "
    )


def read_variable_name(text: str) -> str:
    """Read the variable name at the start of ``text`` (the part after ``$``)."""
    if not text or not is_name_start(text[0]):
        return ""
    end = 1
    while end < len(text) and is_name_char(text[end]):
        end += 1
    return text[:end]


def _lookup(env: Environment | None, name: str) -> str:
    if env is None:
        return ""
    value = env.get(name)
    return value if value is not None else ""


def expand_variables(text: str, env: Environment | None, exit_status: int) -> str:
    """Replace ``$?`` with the exit status and ``$NAME`` with its value.

    Unknown names and names without a value expand to nothing. A ``$`` that
    is not followed by ``?`` or a name start is kept as it is.
    """
    parts: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char != "$":
            parts.append(char)
            pos += 1
            continue
        following = text[pos + 1 : pos + 2]
        if following == "?":
            parts.append(str(exit_status))
            pos += 2
        elif following and is_name_start(following):
            name = read_variable_name(text[pos + 1 :])
            parts.append(_lookup(env, name))
            pos += 1 + len(name)
        else:
            parts.append("$")
            pos += 1
    return "".join(parts)