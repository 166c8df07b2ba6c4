"""Commands the shell runs itself: echo, cd, pwd, export, unset, env and exit."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from enum import Enum
from typing import TextIO

from minishell.environment import Environment, is_valid_identifier


class BuiltinKind(Enum):
    """The built-in commands; NONE stands for an empty command name."""

    NONE = 0
    ECHO = 1
    CD = 2
    PWD = 3
    EXPORT = 4
    UNSET = 5
    ENV = 6
    EXIT = 7


_BY_NAME = {
    "echo": BuiltinKind.ECHO,
    "cd": BuiltinKind.CD,
    "pwd": BuiltinKind.PWD,
    "export": BuiltinKind.EXPORT,
    "unset": BuiltinKind.UNSET,
    "env": BuiltinKind.ENV,
    "exit": BuiltinKind.EXIT,
}


class ShellExit(Exception):
    """Raised by ``exit``: the shell should terminate with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def _stream(stream: TextIO | None, default: TextIO) -> TextIO:
    return default if stream is None else stream


def builtin_kind(args: Sequence[str]) -> BuiltinKind | None:
    """The built-in named by ``args[0]``, or None if it is not one."""
    if not args:
        return None
    name = args[0]
    if name == "":
        return BuiltinKind.NONE
    return _BY_NAME.get(name)


def is_echo_n_option(arg: str | None) -> bool:
    """True for ``-n``, ``-nn`` and so on."""
    if not arg or arg[0] != "-" or len(arg) == 1:
        return False
    return all(char == "n" for char in arg[1:])


def echo(args: Sequence[str], stdout: TextIO | None = None) -> int:
    """Print the arguments separated by spaces, with a newline unless ``-n``."""
    out = _stream(stdout, sys.stdout)
    words = list(args[1:])
    newline = True
    while words and is_echo_n_option(words[0]):
        newline = False
        words.pop(0)
    out.write(" ".join(words))
    if newline:
        out.write("\n")
    return 0


def pwd(stdout: TextIO | None = None, stderr: TextIO | None = None) -> int:
    """Print the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError:
        _stream(stderr, sys.stderr).write(
            "minishell: pwd: error retrieving current directory\n"
        )
        return 1
    _stream(stdout, sys.stdout).write(cwd + "\n")
    return 0


def _change_directory(
    path: str, env: Environment, old_pwd: str, err: TextIO
) -> int:
    try:
        os.chdir(path)
    except OSError as exc:
        reason = exc.strerror or (os.strerror(exc.errno) if exc.errno else str(exc))
        err.write(f"minishell: cd: {path}: {reason}\n")
        return 1
    try:
        new_pwd: str | None = os.getcwd()
    except OSError:
        new_pwd = None
    if old_pwd:
        env.set("OLDPWD", old_pwd, True)
    if new_pwd is not None:
        env.set("PWD", new_pwd, True)
    return 0


def cd(
    args: Sequence[str],
    env: Environment,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Change directory to the argument, to HOME, or to OLDPWD for ``-``."""
    out = _stream(stdout, sys.stdout)
    err = _stream(stderr, sys.stderr)
    if len(args) > 2:
        err.write("minishell: cd: too many arguments\n")
        return 1
    try:
        old_pwd = os.getcwd()
    except OSError:
        old_pwd = ""
    if len(args) < 2:
        home = env.get("HOME")
        if home is None:
            err.write("minishell: cd: HOME not set\n")
            return 1
        return _change_directory(home, env, old_pwd, err)
    if args[1] == "-":
        previous = env.get("OLDPWD")
        if previous is None:
            err.write("minishell: cd: OLDPWD not set\n")
            return 1
        out.write(previous + "\n")
        return _change_directory(previous, env, old_pwd, err)
    return _change_directory(args[1], env, old_pwd, err)


def export(
    args: Sequence[str],
    env: Environment,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Mark variables as exported, optionally assigning ``NAME=VALUE``.

    With no arguments, list the exported variables in sorted order.
    """
    if len(args) < 2:
        _stream(stdout, sys.stdout).write(env.format_export())
        return 0
    err = _stream(stderr, sys.stderr)
    status = 0
    for arg in args[1:]:
        name, sep, value = arg.partition("=")
        if not is_valid_identifier(name):
            err.write(f"minishell: export: '{arg}': not a valid identifier\n")
            status = 1
            continue
        env.set(name, value if sep else None, True)
    return status


def unset(
    args: Sequence[str], env: Environment, stderr: TextIO | None = None
) -> int:
    """Remove the named variables."""
    err = _stream(stderr, sys.stderr)
    status = 0
    for name in args[1:]:
        if not is_valid_identifier(name):
            err.write(f"minishell: unset: '{name}': not a valid identifier\n")
            status = 1
        else:
            env.unset(name)
    return status


def env_command(
    args: Sequence[str],
    env: Environment,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Print exported variables that have a value; arguments are refused."""
    if len(args) > 1:
        _stream(stderr, sys.stderr).write(
            f"env: '{args[1]}' : No such file or directory\n"
        )
        return 127
    out = _stream(stdout, sys.stdout)
    for entry in env.to_envp():
        out.write(entry + "\n")
    return 0


def is_numeric(text: str) -> bool:
    """True for an optional sign followed by at least one digit and nothing else."""
    digits = text[1:] if text[:1] in ("+", "-") else text
    return bool(digits) and all("0" <= char <= "9" for char in digits)


def parse_exit_code(text: str) -> int:
    """The signed number at the start of ``text``."""
    sign = 1
    rest = text
    if rest[:1] == "-":
        sign = -1
        rest = rest[1:]
    elif rest[:1] == "+":
        rest = rest[1:]
    value = 0
    for char in rest:
        if not "0" <= char <= "9":
            break
        value = value * 10 + (ord(char) - ord("0"))
    return sign * value


def exit_command(
    args: Sequence[str], last_status: int, stderr: TextIO | None = None
) -> int:
    """Raise ShellExit with the requested status.

    Returns 1 without exiting when given more than one argument.
    """
    err = _stream(stderr, sys.stderr)
    err.write("exit\n")
    if len(args) < 2:
        raise ShellExit(last_status & 0xFF)
    if len(args) > 2:
        err.write("minishell: exit: too many arguments\n")
        return 1
    if not is_numeric(args[1]):
        err.write(f"minishell: exit {args[1]}: numeric argument required\n")
        raise ShellExit(2)
    raise ShellExit(parse_exit_code(args[1]) & 0xFF)


def run_builtin(
    kind: BuiltinKind,
    args: Sequence[str],
    env: Environment,
    last_status: int,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run a built-in and return its exit status."""
    if kind is BuiltinKind.NONE:
        _stream(stderr, sys.stderr).write("Command '' not found\n")
        return 127
    if kind is BuiltinKind.ECHO:
        return echo(args, stdout)
    if kind is BuiltinKind.CD:
        return cd(args, env, stdout, stderr)
    if kind is BuiltinKind.PWD:
        return pwd(stdout, stderr)
    if kind is BuiltinKind.EXPORT:
        return export(args, env, stdout, stderr)
    if kind is BuiltinKind.UNSET:
        return unset(args, env, stderr)
    if kind is BuiltinKind.ENV:
        return env_command(args, env, stdout, stderr)
    return exit_command(args, last_status, stderr)