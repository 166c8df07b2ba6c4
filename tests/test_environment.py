import os

import pytest

from minishell.environment import (
    EnvVar,
    Environment,
    escape_value,
    is_valid_identifier,
)


def test_from_envp_parses_entries_in_order():
    env = Environment.from_envp(["A=1", "B=x=y", "C"])
    assert [v.key for v in env] == ["A", "B", "C"]
    assert env.get("B") == "x=y"
    assert env.get("C") is None
    assert all(v.exported for v in env)


def test_from_envp_duplicate_moves_to_end():
    env = Environment.from_envp(["A=1", "B=2", "A=3"])
    assert [v.key for v in env] == ["B", "A"]
    assert env.get("A") == "3"
    assert len(env) == 2


def test_from_envp_empty_builds_minimum(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment.from_envp([])
    assert [v.key for v in env] == ["PWD", "SHLVL", "_"]
    assert env.get("PWD") == os.getcwd()
    assert env.get("SHLVL") == "1"
    assert env.get("_") == "/usr/bin/env"


def test_from_envp_without_cwd_is_empty(monkeypatch):
    def fail():
        raise FileNotFoundError

    monkeypatch.setattr(os, "getcwd", fail)
    env = Environment.from_envp(None)
    assert len(env) == 0


def test_set_new_and_update_keeps_position():
    env = Environment()
    env.set("A", "1", False)
    env.set("B", "2", True)
    env.set("A", "9", True)
    assert [v.key for v in env] == ["A", "B"]
    assert env.find("A") == EnvVar("A", "9", True)


def test_set_none_keeps_existing_value():
    env = Environment()
    env.set("A", "1", False)
    env.set("A", None, True)
    assert env.find("A") == EnvVar("A", "1", True)


def test_unset():
    env = Environment.from_envp(["A=1", "B=2"])
    assert env.unset("A") is True
    assert env.unset("A") is False
    assert "A" not in env
    assert "B" in env
    assert env.find("A") is None


def test_to_envp_skips_unexported_and_valueless():
    env = Environment.from_envp(["A=1", "B"])
    env.set("C", "3", False)
    assert env.to_envp() == ["A=1"]


def test_format_env_includes_valueless_exported():
    env = Environment.from_envp(["A=1", "B"])
    env.set("C", "3", False)
    assert env.format_env() == "A=1\nB=\n"


def test_format_export_sorted_and_escaped():
    env = Environment.from_envp(['Z=a"b', "A", "M=x\\y"])
    env.set("HIDDEN", "v", False)
    assert env.format_export() == (
        "declare -x A\n"
        'declare -x M="x\\\\y"\n'
        'declare -x Z="a\\"b"\n'
    )


def test_format_export_empty():
    env = Environment()
    env.set("A", "1", False)
    assert env.format_export() == ""


def test_escape_value():
    assert escape_value('a"b\\c') == '"a\\"b\\\\c"'
    assert escape_value("") == '""'


@pytest.mark.parametrize("name", ["PATH", "_x", "a1", ".a", "a.b", "a b"])
def test_valid_identifiers(name):
    assert is_valid_identifier(name) is True


@pytest.mark.parametrize("name", ["", None, "1a", "a-b", "=a", "a=b"])
def test_invalid_identifiers(name):
    assert is_valid_identifier(name) is False


def test_next_shlvl_missing_is_zero():
    env = Environment.from_envp(["A=1", "SHLVL"])
    assert env.next_shlvl() == 0
    assert env.update_shlvl() == 0
    assert env.get("SHLVL") is None


@pytest.mark.parametrize("value", ["999", "-1", "abc"])
def test_next_shlvl_out_of_range_resets_to_one(value):
    env = Environment.from_envp([f"SHLVL={value}"])
    assert env.next_shlvl() == 1


def test_update_shlvl_increments_and_stores():
    env = Environment.from_envp(["SHLVL=1"])
    level = env.update_shlvl()
    assert env.get("SHLVL") == str(level)
    assert level == 2
    again = env.update_shlvl()
    assert again == level + 1
    assert env.get("SHLVL") == str(again)