"""TabSeparated field escaping.

ClickHouse's TabSeparated format writes a String column with seven
characters backslash-escaped. ``decode`` reverses that, ``encode`` applies
it; ``decode(encode(x)) == x`` for every ``x``.
"""
from __future__ import annotations

from ..errors import TruncatedEscape, UnknownEscape

# escape letter -> character it stands for
_UNESCAPE = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "0": "\0",
    "\\": "\\",
}

_ESCAPE_TABLE = str.maketrans({char: "\\" + letter for letter, char in _UNESCAPE.items()})


def decode(field: str, strict: bool = False) -> str:
    """Unescape one TSV field.

    An unknown escape such as ``\\q`` yields the bare character (``q``)
    unless ``strict`` is set, in which case UnknownEscape is raised.
    A backslash with nothing after it raises TruncatedEscape.
    """
    if "\\" not in field:
        return field

    parts: list[str] = []
    start = 0
    while True:
        idx = field.find("\\", start)
        if idx == -1:
            parts.append(field[start:])
            break
        parts.append(field[start:idx])
        if idx + 1 >= len(field):
            raise TruncatedEscape(idx)
        letter = field[idx + 1]
        char = _UNESCAPE.get(letter)
        if char is None:
            if strict:
                raise UnknownEscape(letter, idx)
            char = letter
        parts.append(char)
        start = idx + 2

    return "".join(parts)


def encode(text: str) -> str:
    """Escape newline, tab, CR, backspace, form feed, NUL and backslash."""
    return text.translate(_ESCAPE_TABLE)
