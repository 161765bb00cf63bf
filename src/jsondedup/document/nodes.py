"""Document tree: Scalar, ObjectNode and ArrayNode.

Objects keep their entries as an ordered list rather than a dict so that
duplicate keys survive parsing in source order; the dedup engine is what
makes them unique.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ScalarKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


def should_stringify_number(literal: str) -> bool:
    """True for a bare integer literal outside the signed 64-bit range.

    Literals with a fraction or exponent are never stringified, whatever
    their magnitude.
    """
    if any(c in literal for c in ".eE"):
        return False
    # JSON integers have no leading zeros, so 20+ digits always overflows.
    if len(literal.lstrip("-")) > 19:
        return True
    value = int(literal)
    return value < INT64_MIN or value > INT64_MAX


@dataclass(slots=True)
class Scalar:
    """A leaf value.

    Attributes:
        kind:  Which JSON scalar this is.
        text:  Decoded text for STRING, raw literal for NUMBER, "" otherwise.
        flag:  The value of a BOOL; False otherwise.
    """

    kind: ScalarKind
    text: str = ""
    flag: bool = False

    @classmethod
    def string(cls, text: str) -> Scalar:
        return cls(ScalarKind.STRING, text)

    @classmethod
    def number(cls, literal: str) -> Scalar:
        """Build a NUMBER, or a STRING for integers that overflow int64."""
        if should_stringify_number(literal):
            return cls(ScalarKind.STRING, literal)
        return cls(ScalarKind.NUMBER, literal)

    @classmethod
    def boolean(cls, flag: bool) -> Scalar:
        return cls(ScalarKind.BOOL, flag=flag)

    @classmethod
    def null(cls) -> Scalar:
        return cls(ScalarKind.NULL)

    @property
    def is_empty(self) -> bool:
        """Null and "" are empty; everything else counts as a real value."""
        if self.kind is ScalarKind.NULL:
            return True
        return self.kind is ScalarKind.STRING and not self.text


@dataclass(slots=True)
class Entry:
    key: str
    value: Node


@dataclass(slots=True)
class ObjectNode:
    entries: list[Entry] = field(default_factory=list)

    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]


@dataclass(slots=True)
class ArrayNode:
    items: list[Node] = field(default_factory=list)


Node = Scalar | ObjectNode | ArrayNode


def is_empty(node: Node) -> bool:
    """Objects and arrays are never empty, even with no children."""
    return isinstance(node, Scalar) and node.is_empty
