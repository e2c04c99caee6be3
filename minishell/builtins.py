"""Commands the shell runs itself: cd, echo, pwd, env, exit, unset, export."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import TextIO

from .state import ShellState, find_env_index, report_error

BUILTIN_NAMES = ("cd", "echo", "pwd", "exit", "unset", "env", "export")
NOFORK_NAMES = ("exit", "cd", "export", "unset")

_ATOI_BLANKS = "\t\n\v\f\r "
_BAD_IDENTIFIER_CHARS = frozenset("|<>[]'\" ,.:/{}+^%#@!~-?&*")


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status & 0xFF


def parse_int(text: str) -> int:
    """Read a leading decimal integer the way ``atoi`` does.

    Leading blanks and one sign are accepted; reading stops at the first
    non-digit. The result wraps to a 32-bit signed integer.
    """
    rest = text.lstrip(_ATOI_BLANKS)
    sign = 1
    if rest[:1] == "-":
        sign = -1
        rest = rest[1:]
    elif rest[:1] == "+":
        rest = rest[1:]
    digits = []
    for ch in rest:
        if not ("0" <= ch <= "9"):
            break
        digits.append(ch)
    value = sign * int("".join(digits) or "0")
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= (1 << 31) else value


def is_builtin(name: str) -> bool:
    """Return True if ``name`` is exactly the name of a builtin."""
    return name in BUILTIN_NAMES


def is_nofork_builtin(args: list[str]) -> bool:
    """Return True if the command must run in the shell process itself."""
    if not args:
        return False
    return args[0].startswith(NOFORK_NAMES)


def _out(out: TextIO | None) -> TextIO:
    return out if out is not None else sys.stdout


def echo_builtin(args: list[str], out: TextIO | None = None) -> int:
    """Print the arguments separated by spaces; ``-n`` drops the newline."""
    stream = _out(out)
    no_newline = len(args) > 1 and args[1] == "-n"
    words = args[2:] if no_newline else args[1:]
    stream.write(" ".join(words))
    if not no_newline:
        stream.write("\n")
    return 0


def env_builtin(args: list[str], state: ShellState, out: TextIO | None = None) -> int:
    """Print every environment entry; fail if given any argument."""
    if len(args) > 1:
        return 1
    stream = _out(out)
    for entry in state.envp:
        stream.write(entry + "\n")
    return 0


def pwd_builtin(args: list[str], out: TextIO | None = None) -> int:
    """Print the current working directory."""
    if len(args) > 1:
        report_error("pwd: too many arguments")
        return 1
    try:
        cwd = os.getcwd()
    except OSError:
        return 1
    _out(out).write(cwd + "\n")
    return 0


def exit_builtin(args: list[str], state: ShellState) -> int:
    """Raise ShellExit with the status given, or return 1 on too many arguments."""
    if len(args) > 2:
        report_error("exit: too many arguments")
        return 1
    status = parse_int(args[1]) if len(args) > 1 else 0
    raise ShellExit(status)


def _check_export_word(word: str) -> bool:
    """Return True if ``word`` is an assignment that export may apply."""
    name, has_eq, _ = word.partition("=")
    if word[:1].isdigit():
        report_error("not an identifier: ", word)
        return False
    if has_eq and not name:
        report_error("invalid export input: ", word)
        return False
    if any(ch in _BAD_IDENTIFIER_CHARS for ch in name):
        report_error("not an identifier: ", word)
        return False
    return has_eq


def export_builtin(args: list[str], state: ShellState, out: TextIO | None = None) -> int:
    """Set ``NAME=value`` entries; with no arguments print the environment.

    Stops with status 1 at the first word that is not a valid assignment.
    """
    if len(args) < 2:
        return env_builtin(args, state, out)
    for word in args[1:]:
        if not _check_export_word(word):
            return 1
        index = find_env_index(state.envp, word.partition("=")[0])
        if index is None:
            state.envp.append(word)
        else:
            state.envp[index] = word
    return 0


def unset_builtin(args: list[str], state: ShellState) -> int:
    """Remove the named variables from the environment."""
    if len(args) < 2:
        return report_error("minishell: unset: not enough arguments")
    for word in args:
        if "=" in word or "/" in word:
            return report_error("unset: not a valid parameter name: ", word)
    for name in args[1:]:
        index = find_env_index(state.envp, name)
        if index is not None:
            del state.envp[index]
    return 0


def _goto_variable(state: ShellState, name: str, out: TextIO | None) -> bool:
    """Change to the directory held in ``name``; a missing variable succeeds."""
    value = state.lookup(name)
    if value is None:
        return True
    try:
        os.chdir(value)
    except OSError:
        ok = False
    else:
        ok = True
    if name == "OLDPWD":
        _out(out).write(value + "\n")
    return ok


def cd_builtin(args: list[str], state: ShellState, out: TextIO | None = None) -> int:
    """Change directory and update ``OLDPWD`` and ``PWD``.

    With no argument go to ``$HOME``; ``-`` goes to ``$OLDPWD`` and prints it.
    """
    try:
        oldpwd = os.getcwd()
    except OSError:
        oldpwd = ""
    if len(args) < 2:
        ok = _goto_variable(state, "HOME", out)
    elif args[1] == "-":
        ok = _goto_variable(state, "OLDPWD", out)
    else:
        try:
            os.chdir(args[1])
        except OSError as exc:
            report_error("minishell: ", f"{args[1]} : {exc.strerror}")
            ok = False
        else:
            ok = True
    if not ok:
        return 1
    export_builtin(["export", f"OLDPWD={oldpwd}"], state, out)
    try:
        cwd = os.getcwd()
    except OSError:
        cwd = ""
    export_builtin(["export", f"PWD={cwd}"], state, out)
    return 0


def run_builtin(state: ShellState, args: list[str], out: TextIO | None = None) -> int:
    """Run the builtin whose name ``args[0]`` starts with; 1 if there is none."""
    if not args:
        return 1
    handlers: tuple[tuple[str, Callable[[], int]], ...] = (
        ("cd", lambda: cd_builtin(args, state, out)),
        ("echo", lambda: echo_builtin(args, out)),
        ("pwd", lambda: pwd_builtin(args, out)),
        ("env", lambda: env_builtin(args, state, out)),
        ("exit", lambda: exit_builtin(args, state)),
        ("unset", lambda: unset_builtin(args, state)),
        ("export", lambda: export_builtin(args, state, out)),
    )
    for name, handler in handlers:
        if args[0].startswith(name):
            return handler()
    return 1