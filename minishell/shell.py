"""The interactive read-parse-execute loop."""

from __future__ import annotations

import os
import signal
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .builtins import ShellExit
from .executor import execute
from .heredoc import Reader
from .parser import parse_input
from .state import ParseError, ShellState, report_error

try:
    import readline
except ImportError:  # pragma: no cover - platform without readline
    readline = None  # type: ignore[assignment]

PLAIN_PROMPT = "minishell > "
NO_ARGUMENTS = "This program does not accept any input"
_COLOR_ON = "\x1b[36m"
_COLOR_OFF = "\x1b[0m"
_QUIT_MESSAGE = "quit (core dumped) (not rlly im lying)\n"
_SIGQUIT = getattr(signal, "SIGQUIT", None)


class _PendingSignal:
    """The last signal received while the shell was busy."""

    def __init__(self) -> None:
        self.signum = 0


_pending = _PendingSignal()


def _on_interrupt(signum: int, frame: Any) -> None:
    sys.stderr.write("\n")
    sys.stderr.flush()
    _pending.signum = signum


def _on_quit(signum: int, frame: Any) -> None:
    sys.stderr.write(_QUIT_MESSAGE)
    sys.stderr.flush()
    _pending.signum = signum


def _swap_handlers(handlers: dict[int, Any]) -> dict[int, Any]:
    saved: dict[int, Any] = {}
    for signum, handler in handlers.items():
        previous = signal.signal(signum, handler)
        if previous is not None:
            saved[signum] = previous
    return saved


@contextmanager
def _child_signals() -> Iterator[None]:
    """Install the handlers used while commands run, then restore the old ones."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    wanted: dict[int, Any] = {signal.SIGINT: _on_interrupt}
    if _SIGQUIT is not None:
        wanted[_SIGQUIT] = _on_quit
    saved = _swap_handlers(wanted)
    try:
        yield
    finally:
        _swap_handlers(saved)


def build_prompt(state: ShellState, cwd: str | None) -> str:
    """Return the prompt showing ``cwd`` with the home directory part cut off."""
    if cwd is None:
        return PLAIN_PROMPT
    home = state.lookup("HOME")
    cut = len(home) if home is not None and home in cwd else 0
    return f"{_COLOR_ON}~{cwd[cut:]} $ {_COLOR_OFF}"


def run_line(line: str, state: ShellState, reader: Reader | None = None) -> int:
    """Parse and run one command line; return the new exit status.

    Raises ShellExit when the line runs ``exit`` on its own.
    """
    try:
        pipeline = parse_input(line, state, reader)
    except ParseError as exc:
        if str(exc):
            report_error(str(exc))
        state.errornum = 1
        return state.errornum
    try:
        with _child_signals():
            execute(pipeline, state)
    finally:
        pipeline.discard()
    return state.errornum


def _current_dir() -> str | None:
    try:
        return os.getcwd()
    except OSError:
        return None


def main(argv: list[str] | None = None) -> int:
    """Run the interactive shell until end of input or ``exit``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        print(NO_ARGUMENTS)
        return 0
    state = ShellState(envp=[f"{k}={v}" for k, v in os.environ.items()])
    prompt_handlers: dict[int, Any] = {signal.SIGINT: signal.default_int_handler}
    if _SIGQUIT is not None:
        prompt_handlers[_SIGQUIT] = signal.SIG_IGN
    saved = _swap_handlers(prompt_handlers)
    try:
        while True:
            try:
                line = input(build_prompt(state, _current_dir()))
            except EOFError:
                print("exit")
                return 0
            except KeyboardInterrupt:
                sys.stderr.write("\n")
                _pending.signum = signal.SIGINT
                continue
            if _pending.signum:
                state.errornum = _pending.signum + 128
            _pending.signum = 0
            if readline is not None:
                readline.add_history(line)
            try:
                run_line(line, state)
            except ShellExit as exc:
                return exc.status
    finally:
        _swap_handlers(saved)


if __name__ == "__main__":
    sys.exit(main())