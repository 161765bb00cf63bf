"""Recursive-descent JSON parser producing a Document tree.

Unlike ``json.loads`` this keeps duplicate object keys (in source order) and
the exact text of every number literal. Integer literals that overflow int64
are turned into strings as they are built, see ``Scalar.number``.

Raw control characters inside strings are accepted, since rows arrive with
TSV escapes already decoded. Everything else follows RFC 8259 strictly.
"""
from __future__ import annotations

import re

from ..errors import ParseFailure
from .nodes import ArrayNode, Entry, Node, ObjectNode, Scalar

DEFAULT_MAX_DEPTH = 300

_WHITESPACE = " \t\n\r"
_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][-+]?[0-9]+)?")
_STRING_CHUNK_RE = re.compile(r'[^"\\]*')
_HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS = (
    ("true", lambda: Scalar.boolean(True)),
    ("false", lambda: Scalar.boolean(False)),
    ("null", Scalar.null),
)


def parse(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Node:
    """Parse one complete JSON document.

    Args:
        text:      The document, already TSV-decoded.
        max_depth: Deepest object/array nesting accepted.

    Raises:
        ParseFailure: On any syntax error, including trailing data and
            empty input. No partial tree is returned.
    """
    return _Parser(text, max_depth).parse()


class _Parser:
    def __init__(self, text: str, max_depth: int) -> None:
        self._text = text
        self._pos = 0
        self._max_depth = max_depth

    def parse(self) -> Node:
        self._skip_whitespace()
        if self._pos >= len(self._text):
            raise self._error("cannot parse empty document")
        node = self._value(0)
        self._skip_whitespace()
        if self._pos != len(self._text):
            raise self._error("unexpected trailing data")
        return node

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _error(self, msg: str, pos: int | None = None) -> ParseFailure:
        return ParseFailure(msg, self._text, self._pos if pos is None else pos)

    def _skip_whitespace(self) -> None:
        text = self._text
        pos = self._pos
        while pos < len(text) and text[pos] in _WHITESPACE:
            pos += 1
        self._pos = pos

    def _peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _expect(self, char: str) -> None:
        self._skip_whitespace()
        if self._peek() != char:
            raise self._error(self._describe(f"expected {char!r}"))
        self._pos += 1

    def _describe(self, msg: str) -> str:
        if self._pos >= len(self._text):
            return f"{msg}, got end of input"
        return f"{msg}, got {self._text[self._pos]!r}"

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _value(self, depth: int) -> Node:
        self._skip_whitespace()
        ch = self._peek()
        if ch == "{":
            return self._object(depth + 1)
        if ch == "[":
            return self._array(depth + 1)
        if ch == '"':
            return Scalar.string(self._string())
        if ch == "-" or ch.isdigit():
            return self._number()
        for word, factory in _LITERALS:
            if self._text.startswith(word, self._pos):
                self._pos += len(word)
                return factory()
        raise self._error(self._describe("expected a value"))

    def _check_depth(self, depth: int) -> None:
        if depth > self._max_depth:
            raise self._error(f"document exceeds maximum nesting depth of {self._max_depth}")

    def _object(self, depth: int) -> ObjectNode:
        self._check_depth(depth)
        self._pos += 1
        entries: list[Entry] = []
        self._skip_whitespace()
        if self._peek() == "}":
            self._pos += 1
            return ObjectNode(entries)

        while True:
            self._skip_whitespace()
            if self._peek() != '"':
                raise self._error(self._describe("expected an object key"))
            key = self._string()
            self._expect(":")
            entries.append(Entry(key, self._value(depth)))
            self._skip_whitespace()
            ch = self._peek()
            if ch == ",":
                self._pos += 1
            elif ch == "}":
                self._pos += 1
                return ObjectNode(entries)
            else:
                raise self._error(self._describe("expected ',' or '}' in object"))

    def _array(self, depth: int) -> ArrayNode:
        self._check_depth(depth)
        self._pos += 1
        items: list[Node] = []
        self._skip_whitespace()
        if self._peek() == "]":
            self._pos += 1
            return ArrayNode(items)

        while True:
            items.append(self._value(depth))
            self._skip_whitespace()
            ch = self._peek()
            if ch == ",":
                self._pos += 1
            elif ch == "]":
                self._pos += 1
                return ArrayNode(items)
            else:
                raise self._error(self._describe("expected ',' or ']' in array"))

    def _number(self) -> Scalar:
        m = _NUMBER_RE.match(self._text, self._pos)
        if m is None:
            raise self._error("invalid number")
        self._pos = m.end()
        return Scalar.number(m.group())

    def _string(self) -> str:
        """Consume a quoted string starting at the opening quote."""
        text = self._text
        start = self._pos
        self._pos += 1
        chunks: list[str] = []
        while True:
            m = _STRING_CHUNK_RE.match(text, self._pos)
            chunks.append(m.group())
            self._pos = m.end()
            if self._pos >= len(text):
                raise self._error("unterminated string", start)
            if text[self._pos] == '"':
                self._pos += 1
                return "".join(chunks)
            # backslash
            self._pos += 1
            if self._pos >= len(text):
                raise self._error("unterminated string", start)
            letter = text[self._pos]
            if letter == "u":
                chunks.append(self._unicode_escape())
                continue
            char = _SIMPLE_ESCAPES.get(letter)
            if char is None:
                raise self._error(f"invalid escape \\{letter}", self._pos - 1)
            chunks.append(char)
            self._pos += 1

    def _hex4(self) -> int:
        m = _HEX4_RE.match(self._text, self._pos)
        if m is None:
            raise self._error("invalid \\u escape", self._pos - 2)
        self._pos = m.end()
        return int(m.group(), 16)

    def _unicode_escape(self) -> str:
        # self._pos is on the "u"
        self._pos += 1
        code = self._hex4()
        if 0xDC00 <= code <= 0xDFFF:
            return "\ufffd"
        if 0xD800 <= code <= 0xDBFF:
            if self._text.startswith("\\u", self._pos):
                save = self._pos
                self._pos += 2
                low = self._hex4()
                if 0xDC00 <= low <= 0xDFFF:
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
                self._pos = save
            return "\ufffd"
        return chr(code)
