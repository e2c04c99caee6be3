"""Here-document collection into temporary files."""

from __future__ import annotations

import itertools
import os
from collections.abc import Callable

from .state import report_error

HEREDOC_PREFIX = ".tmpheredoc"
PROMPT = "> "
EOF_WARNING = "warning: delimited by eof instead of desired:"

Reader = Callable[[str], "str | None"]

_counter = itertools.count(1)


def _read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def next_heredoc_name() -> str:
    """Return a fresh file name for the next here-document."""
    return f"{HEREDOC_PREFIX}{next(_counter)}"


def read_heredoc(delimiter: str, path: str, reader: Reader | None = None) -> bool:
    """Read lines with ``reader`` into ``path`` until one starts with ``delimiter``.

    ``reader`` takes a prompt and returns a line, or ``None`` at end of input.
    End of input stops reading with a warning. Returns False when reading was
    interrupted, True otherwise.
    """
    reader = reader or _read_line
    fd = os.open(path, os.O_RDWR | os.O_TRUNC | os.O_CREAT, 0o600)
    with os.fdopen(fd, "w") as out:
        try:
            while True:
                line = reader(PROMPT)
                if not delimiter or (line is not None and line.startswith(delimiter)):
                    break
                if line is None:
                    report_error(EOF_WARNING, delimiter)
                    break
                out.write(line + "\n")
        except KeyboardInterrupt:
            return False
    return True