import pytest

from minishell.environment import Environment
from minishell.expansion import (
    expand_variables,
    is_name_char,
    is_name_start,
    read_variable_name,
)


@pytest.fixture
def env():
    environment = Environment()
    environment.set("HOME", "/home/user", True)
    environment.set("LOCAL", "inside", False)
    environment.set("EMPTY", None, True)
    return environment


@pytest.mark.parametrize("char", ["a", "Z", "_"])
def test_name_start_accepts(char):
    assert is_name_start(char) is True


@pytest.mark.parametrize("char", ["1", ".", " ", "$", "?", "", "-"])
def test_name_start_rejects(char):
    assert is_name_start(char) is False


@pytest.mark.parametrize("char", ["a", "Z", "_", "0", "9", ".", " "])
def test_name_char_accepts(char):
    assert is_name_char(char) is True


@pytest.mark.parametrize("char", ["/", "$", "-", "'", "\"", ""])
def test_name_char_rejects(char):
    assert is_name_char(char) is False


def test_read_variable_name_stops_at_slash():
    assert read_variable_name("HOME/bin") == "HOME"


def test_read_variable_name_digit_start_is_empty():
    assert read_variable_name("9abc") == ""


def test_read_variable_name_includes_dots_and_spaces():
    assert read_variable_name("A.B C-D") == "A.B C"


def test_read_variable_name_empty_text():
    assert read_variable_name("") == ""


def test_expand_known_variable(env):
    assert expand_variables("$HOME", env, 0) == "/home/user"


def test_expand_inside_text(env):
    assert expand_variables("cd $HOME/bin", env, 0) == "cd /home/user/bin"


def test_expand_exit_status(env):
    assert expand_variables("$?", env, 42) == "42"


def test_expand_exit_status_followed_by_text(env):
    assert expand_variables("code=$?!", env, 7) == "code=7!"


def test_unknown_variable_expands_to_nothing(env):
    assert expand_variables("a$MISSING/b", env, 0) == "a/b"


def test_variable_without_value_expands_to_nothing(env):
    assert expand_variables("[$EMPTY]", env, 0) == "[]"


def test_unexported_variable_is_expanded(env):
    assert expand_variables("$LOCAL", env, 0) == "inside"


@pytest.mark.parametrize("text", ["$", "$$", "a$1", "$-x", "cost $5"])
def test_dollar_without_name_is_kept(env, text):
    assert expand_variables(text, env, 0) == text


def test_name_swallows_dot(env):
    assert expand_variables("x$HOME.y", env, 0) == "x"


def test_quote_stops_name(env):
    assert expand_variables("$HOME'", env, 0) == "/home/user'"


def test_no_environment_expands_names_to_nothing():
    assert expand_variables("a$HOME-b", None, 3) == "a-b"


def test_text_without_dollar_is_unchanged(env):
    text = "plain text with 'quotes' and \"more\""
    assert expand_variables(text, env, 0) == text


def test_empty_text(env):
    assert expand_variables("", env, 1) == ""