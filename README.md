# minishell

Building blocks of a small POSIX-style shell: a table of shell variables,
`$NAME` / `$?` expansion, a tokenizer for command lines with quotes and
operators, and the built-in commands `echo`, `cd`, `pwd`, `export`, `unset`,
`env` and `exit`.

## Installing

```
pip install .
```

## Modules

### `minishell.environment`

`Environment` keeps shell variables (`EnvVar` entries with `key`, `value` and
`exported`) in insertion order.

```python
from minishell.environment import Environment

env = Environment.from_envp(["HOME=/tmp", "PATH=/usr/bin:/bin", "SHLVL=1"])
env.set("GREETING", "hi", True)
env.get("HOME")          # "/tmp"
env.to_envp()            # exported variables with a value, as "KEY=VALUE"
env.format_export()      # sorted 'declare -x KEY="VALUE"' lines
env.update_shlvl()       # SHLVL becomes "2"; returns 2
```

`Environment.from_envp` with an empty list builds a minimal environment of
`PWD`, `SHLVL=1` and `_`. `is_valid_identifier` checks a name for `export` and
`unset`; `escape_value` quotes a value the way `export` lists it.

### `minishell.expansion`

`expand_variables(text, env, exit_status)` replaces `$?` with the exit status
and `$NAME` with the variable's value; unknown names expand to nothing, and a
`$` not followed by `?` or a name start stays as it is.

### `minishell.lexer`

`scan(line)` splits a line into `Token`s of type `TokenType` (words,
single- and double-quoted pieces, `|`, `<`, `>`, `>>`, `<<`).
`merge_tokens` expands variables (not inside single quotes) and joins pieces
written with no space between them; `tokenize(line, env, exit_status)` does
both:

```python
from minishell.lexer import tokenize

[t.content for t in tokenize("echo a\"$HOME\"'x' | wc", env, 0)]
# ["echo", "a/tmpx", "|", "wc"]
```

An unclosed quote, or an operator directly followed by one it cannot be
combined with (such as `||` or `>>>`), raises `LexError`.

### `minishell.builtin_commands`

`builtin_kind(args)` names the builtin for an argument list (or `None`), and
`run_builtin(kind, args, env, last_status, stdout, stderr)` runs it and
returns its status. Each builtin is also available on its own: `echo`
(with `-n`), `cd` (including `cd` alone for `HOME` and `cd -` for `OLDPWD`),
`pwd`, `export`, `unset`, `env_command` and `exit_command`. `exit_command`
raises `ShellExit` carrying the status the shell should end with.

## What this package does not do

There is no interactive prompt and no `minishell` command. The package does
not group tokens into commands, does not read here-documents, open
redirection files, look up programs on `PATH` or run pipelines of external
programs. It provides the variable table, expansion, tokenizing and builtins
that such a shell is made from.

## Running the tests

```
pip install .[test]
pytest
```