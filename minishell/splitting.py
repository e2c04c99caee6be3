"""Quote-aware word splitting and quote removal."""

from __future__ import annotations

QUOTES = "'\""


def _find_unquoted(text: str, char: str, start: int = 0) -> int | None:
    """Return the index of the first ``char`` at or after ``start`` outside quotes.

    A quote with no closing partner hides the rest of the text.
    """
    i = start
    while i < len(text):
        ch = text[i]
        if ch == char:
            return i
        if ch in QUOTES:
            close = text.find(ch, i + 1)
            if close == -1:
                return None
            i = close + 1
        else:
            i += 1
    return None


def split_outside_quotes(line: str, sep: str) -> list[str]:
    """Split ``line`` on ``sep`` except inside quotes, dropping empty words."""
    words: list[str] = []
    start = 0
    while True:
        pos = _find_unquoted(line, sep, start)
        if pos is None:
            words.append(line[start:])
            break
        words.append(line[start:pos])
        start = pos + 1
    return [word for word in words if word]


def _unquote(word: str) -> str:
    parts: list[str] = []
    i = 0
    while i < len(word):
        ch = word[i]
        if ch in QUOTES:
            close = word.find(ch, i + 1)
            if close == -1:
                parts.append(word[i + 1:])
                break
            parts.append(word[i + 1:close])
            i = close + 1
        else:
            parts.append(ch)
            i += 1
    return "".join(parts)


def remove_quotes(words: list[str]) -> list[str]:
    """Strip matching quote pairs from each word.

    An unmatched quote is dropped and the rest of that word is kept as is.
    """
    return [_unquote(word) for word in words]