"""Expansion of ``$NAME`` and ``$?`` in command words."""

from __future__ import annotations

from .state import ShellState

_QUOTES = "'\""
_NAME_STOP = " $'\""


def _variable_name(text: str, start: int) -> str:
    end = start
    while end < len(text) and text[end] not in _NAME_STOP:
        end += 1
    return text[start:end]


def expand_variables(text: str, state: ShellState) -> str:
    """Replace ``$NAME`` outside single quotes with its value.

    Unknown names expand to nothing. After each substitution scanning starts
    again from the beginning, so values that hold ``$`` are expanded too.
    """
    in_single = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "'":
            in_single = not in_single
        elif (
            ch == "$"
            and not in_single
            and i + 1 < len(text)
            and text[i + 1] not in _QUOTES
        ):
            name = _variable_name(text, i + 1)
            value = state.lookup(name) or ""
            text = text[:i] + value + text[i + 1 + len(name):]
            in_single = False
            i = 0
            continue
        i += 1
    return text