"""Shell state shared by the parser, builtins and executor."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field


class ParseError(Exception):
    """Raised when a command line cannot be parsed."""


def find_env_index(envp: list[str], name: str | None) -> int | None:
    """Return the index of the entry in ``envp`` whose name is exactly ``name``.

    An entry without ``=`` is named by its whole text. ``None`` is returned
    when no entry matches or ``name`` is ``None``.
    """
    if name is None:
        return None
    for index, entry in enumerate(envp):
        if entry.partition("=")[0] == name:
            return index
    return None


def report_error(message: str, subject: str | None = None) -> int:
    """Write ``message`` and an optional ``subject`` to stderr; return status 1."""
    sys.stderr.write(f"{message}{subject or ''}\n")
    sys.stderr.flush()
    return 1


@dataclass
class ShellState:
    """Environment, last exit status and parse status of a running shell."""

    envp: list[str] = field(default_factory=list)
    errornum: int = 0
    parse_ok: bool = True

    def __post_init__(self) -> None:
        self.envp = list(self.envp)

    def lookup(self, name: str) -> str | None:
        """Return the value of variable ``name``; ``?`` is the last exit status."""
        if name == "?":
            return str(self.errornum)
        index = find_env_index(self.envp, name)
        if index is None:
            return None
        return self.envp[index].partition("=")[2]