"""First syntax check on a raw command line."""

from __future__ import annotations

from .splitting import _find_unquoted
from .state import ParseError

PIPE_ERROR = "minishell: parse error near '|'"
_BLANKS = " \n"


def check_syntax(line: str) -> bool:
    """Return True if no pipeline segment starts with a pipe.

    Raises ParseError when the line begins with ``|`` or an unquoted ``|``
    is followed, after blanks, by another ``|``.
    """
    rest = line
    while True:
        rest = rest.lstrip(_BLANKS)
        if rest.startswith("|"):
            raise ParseError(PIPE_ERROR)
        pos = _find_unquoted(rest, "|")
        if pos is None:
            return True
        rest = rest[pos + 1:]