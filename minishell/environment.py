"""Shell variables: an ordered table of name/value pairs with export flags."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

_SHLVL = "SHLVL"
_SHLVL_LIMIT = 1000


def _is_ascii_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_name_char(char: str) -> bool:
    return _is_ascii_alpha(char) or "0" <= char <= "9" or char in "_. "


def is_valid_identifier(name: str | None) -> bool:
    """Return True if ``name`` may be used as a variable name by export/unset."""
    if not name:
        return False
    first, rest = name[0], name[1:]
    if not (_is_ascii_alpha(first) or first in "_. "):
        return False
    return all(_is_name_char(char) for char in rest)


def escape_value(value: str) -> str:
    """Quote a value the way ``export`` lists it, escaping backslashes and quotes."""
    escaped = "".join("\\" + char if char in '\\"' else char for char in value)
    return f'"{escaped}"'


def _atoi(text: str) -> int:
    """Leading-integer conversion: skips whitespace, reads a sign and digits."""
    stripped = text.lstrip(" \t\n\v\f\r")
    sign = 1
    if stripped[:1] in ("+", "-"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if not "0" <= char <= "9":
            break
        digits += char
    return sign * int(digits) if digits else 0


@dataclass
class EnvVar:
    """One shell variable; ``value`` is None for a name declared without a value."""

    key: str
    value: str | None = None
    exported: bool = False


class Environment:
    """Shell variables kept in insertion order."""

    def __init__(self) -> None:
        self._vars: dict[str, EnvVar] = {}

    @classmethod
    def from_envp(cls, envp: Iterable[str] | None) -> Environment:
        """Build from ``KEY=VALUE`` strings; an empty list gives a minimal environment."""
        env = cls()
        entries = list(envp) if envp is not None else []
        if not entries:
            try:
                cwd = os.getcwd()
            except OSError:
                return env
            env.set("PWD", cwd, True)
            env.set(_SHLVL, "1", True)
            env.set("_", "/usr/bin/env", True)
            return env
        for entry in entries:
            key, sep, value = entry.partition("=")
            env._vars.pop(key, None)
            env._vars[key] = EnvVar(key, value if sep else None, True)
        return env

    def find(self, key: str) -> EnvVar | None:
        return self._vars.get(key)

    def get(self, key: str) -> str | None:
        var = self._vars.get(key)
        return var.value if var is not None else None

    def set(self, key: str, value: str | None, exported: bool) -> None:
        """Create or update a variable; a None value keeps an existing value."""
        existing = self._vars.get(key)
        if existing is not None:
            if value is not None:
                existing.value = value
            existing.exported = exported
            return
        self._vars[key] = EnvVar(key, value, exported)

    def unset(self, key: str) -> bool:
        """Remove a variable; return whether it existed."""
        return self._vars.pop(key, None) is not None

    def __iter__(self) -> Iterator[EnvVar]:
        return iter(list(self._vars.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def to_envp(self) -> list[str]:
        """Exported variables that have a value, as ``KEY=VALUE`` strings."""
        return [
            f"{var.key}={var.value}"
            for var in self._vars.values()
            if var.exported and var.value is not None
        ]

    def format_env(self) -> str:
        """Exported variables, one ``KEY=VALUE`` per line, in insertion order."""
        return "".join(
            f"{var.key}={var.value or ''}\n"
            for var in self._vars.values()
            if var.exported
        )

    def format_export(self) -> str:
        """Exported variables sorted by name, in ``declare -x`` form."""
        exported = sorted(
            (var for var in self._vars.values() if var.exported),
            key=lambda var: var.key.encode(),
        )
        lines = []
        for var in exported:
            line = f"declare -x {var.key}"
            if var.value is not None:
                line += "=" + escape_value(var.value)
            lines.append(line + "\n")
        return "".join(lines)

    def next_shlvl(self) -> int:
        """The nesting level a new shell should record, or 0 if SHLVL has no value."""
        current = self.get(_SHLVL)
        if current is None:
            return 0
        level = 1 + _atoi(current)
        if level <= 0 or level >= _SHLVL_LIMIT:
            return 1
        return level

    def update_shlvl(self) -> int:
        """Raise SHLVL by one level; return the new level, or 0 if nothing changed."""
        level = self.next_shlvl()
        if level == 0:
            return 0
        self._vars[_SHLVL].value = str(level)
        return level