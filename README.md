# minishell

A small interactive command shell. It reads a line and expands variables.
It then splits the line into a pipeline and runs each command. A command
runs either as a builtin or as an external program.

## Installing

```
pip install .
```

## Running

```
minishell
```

The shell takes no arguments. If you give it any, it prints
`This program does not accept any input` and exits with status 0.

The prompt shows the current directory after a `~`. If your `$HOME` appears
in that path, the prompt leaves that part out. If the current directory
cannot be read, the prompt is `minishell > `.

To leave the shell, press Ctrl-D at the prompt or run `exit`. On Ctrl-D the
shell prints `exit`. Ctrl-C at the prompt starts a fresh prompt. The next
line then sees `$?` as 130.

## What it understands

- **Pipes**: `ls -l | grep py | wc -l`. The status of the line is the status
  of the last command.
- **Input redirection**: `< file` reads standard input from a file.
- **Here-documents**: `<< END` reads lines at a `> ` prompt until a line
  that starts with `END`. Those lines become standard input. End of input
  also stops reading, with a warning. The lines go to a temporary file named
  `.tmpheredoc<N>` in the current directory. The file is removed once the
  line has run.
- **Output redirection**: `> file` truncates the file and `>> file` appends
  to it. New files are created with mode `0600`. When a command has several
  redirections of one kind, the last one wins.
- **Quotes**: single and double quotes group words, so `|` and spaces inside
  them are not separators. `$NAME` is not expanded inside single quotes. The
  quotes are removed before the command runs. An unmatched quote is dropped.
- **Variables**: `$NAME` expands from the shell's environment. An unknown
  name expands to nothing. `$?` gives the exit status of the last command.

Operators must be separate words: write `> out.txt`, not `>out.txt`.

### Errors and exit statuses

These are parse errors:

- a `|` at the start of a line;
- a `|` right after another `|`, even with blanks between them;
- a redirection operator with no word after it.

After a parse error the status is 1 and nothing runs.

When a command cannot be found, the shell prints
`minishell: command not found: <name>` and the status is 127. A command name
is used as a path if that file exists. Otherwise the shell looks for it in
each directory of `$PATH`.

## Builtins

| Command            | Effect                                                                      |
|--------------------|-----------------------------------------------------------------------------|
| `echo [-n] ...`    | print the arguments separated by spaces; `-n` as the first argument leaves out the newline |
| `cd [dir\|-]`       | change directory; no argument goes to `$HOME`, `-` goes to `$OLDPWD` and prints it; updates `OLDPWD` and `PWD` |
| `pwd`              | print the working directory                                                 |
| `env`              | print the environment; fails when given arguments                           |
| `export N=V ...`   | set variables; with no arguments it acts like `env`; stops with status 1 at the first word that is not a valid `NAME=value` |
| `unset N ...`      | remove variables; a name holding `=` or `/` is an error                     |
| `exit [code]`      | leave the shell with `code` modulo 256; more than one argument is an error  |

`cd`, `export`, `unset` and `exit` run in the shell itself when they are the
only command on the line, and then their effects last. A builtin that is
part of a larger pipeline works on a copy of the shell's state. Its changes
are dropped when it finishes.

## Using it from Python

`minishell.shell.run_line` parses and runs one line against a
`minishell.state.ShellState` and returns the new exit status:

```python
from minishell.shell import run_line
from minishell.state import ShellState

state = ShellState(envp=["HOME=/home/user", "PATH=/usr/bin:/bin"])
run_line("echo hello | tr a-z A-Z", state)   # prints HELLO, returns 0

lines = iter(["first", "second", "END"])
run_line("cat << END", state, reader=lambda prompt: next(lines, None))
```

The `reader` argument supplies here-document lines. It is a callable that
takes the prompt and returns a line, or `None` at end of input. When no
reader is given, the lines are read with `input()`. If the line runs `exit`
on its own, `run_line` raises `minishell.builtins.ShellExit`, whose `status`
holds the exit code.

The parsing steps can also be used on their own:

- `minishell.parser.parse_input(line, state, reader)` returns a `Pipeline`
  of `Command` objects. Each command has `args`. It also has `stdin` and
  `stdout` lists of `(operator, target)` pairs. `Pipeline.discard()` removes
  the here-document files made for it. Malformed lines raise
  `minishell.state.ParseError`.
- `minishell.expand.expand_variables(text, state)` expands `$NAME` and `$?`.
- `minishell.splitting.split_outside_quotes(line, sep)` splits on a
  character outside quotes. `minishell.splitting.remove_quotes(words)`
  strips the quotes from each word.
- `minishell.syntax.check_syntax(line)` raises `ParseError` for misplaced
  pipes.
- `minishell.executor.execute(pipeline, state)` runs a parsed pipeline.
  `minishell.builtins.run_builtin(state, args, out)` runs a builtin and
  writes its output to `out`.

## What it does not do

The shell has none of the following:

- `;`, `&&` or `||`
- background jobs or job control
- globbing or wildcards
- subshells
- `<`, `>` or `|` written without spaces around them
- a history file

Variables are not expanded inside here-documents.

## Tests

```
pip install ".[test]"
pytest
```