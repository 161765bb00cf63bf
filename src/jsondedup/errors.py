"""Fatal per-line errors raised while decoding or parsing a row.

Every error here aborts the whole stream. They implement ``__reduce__`` so
they can be re-raised in the parent after crossing a worker-pool boundary.
"""
from __future__ import annotations


class DedupError(Exception):
    """Base class for all row failures."""


class TruncatedEscape(DedupError):
    """A field ended with a lone backslash."""

    def __init__(self, position: int) -> None:
        super().__init__(f"trailing backslash in TSV input at offset {position}")
        self.position = position

    def __reduce__(self):
        return type(self), (self.position,)


class UnknownEscape(DedupError):
    """An unrecognized escape sequence was found in strict mode."""

    def __init__(self, char: str, position: int) -> None:
        super().__init__(f"unknown TSV escape \\{char} at offset {position}")
        self.char = char
        self.position = position

    def __reduce__(self):
        return type(self), (self.char, self.position)


class ParseFailure(DedupError):
    """JSON syntax error, formatted the way ``json.JSONDecodeError`` is.

    Attributes:
        msg:    Unformatted message.
        doc:    The text being parsed.
        pos:    Character offset of the failure.
        lineno: 1-based line of ``pos``.
        colno:  1-based column of ``pos``.
    """

    def __init__(self, msg: str, doc: str, pos: int) -> None:
        lineno = doc.count("\n", 0, pos) + 1
        colno = pos - doc.rfind("\n", 0, pos)
        super().__init__(f"{msg}: line {lineno} column {colno} (char {pos})")
        self.msg = msg
        self.doc = doc
        self.pos = pos
        self.lineno = lineno
        self.colno = colno

    def __reduce__(self):
        return type(self), (self.msg, self.doc, self.pos)


class LineFailure(DedupError):
    """A row failed; carries the 1-based input line number."""

    def __init__(self, lineno: int, cause: DedupError) -> None:
        super().__init__(f"line {lineno}: {cause}")
        self.lineno = lineno
        self.cause = cause

    def __reduce__(self):
        return type(self), (self.lineno, self.cause)
