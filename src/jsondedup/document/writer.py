"""Serialize a Document tree back to compact JSON text."""
from __future__ import annotations

import json

from .nodes import ArrayNode, Node, ObjectNode, Scalar, ScalarKind


def write(node: Node) -> str:
    """Render ``node`` with no insignificant whitespace.

    Object entries are written in their current order. Strings go through
    ``json.dumps`` with ``ensure_ascii=False``: quote, backslash and control
    characters are escaped, everything else is written as-is.

    The tree is walked with an explicit stack, so nesting depth is bounded
    only by memory.
    """
    parts: list[str] = []
    # Pending work, last item first: literal text or a node still to render.
    stack: list[Node | str] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, ObjectNode):
            stack.extend(reversed(_object_parts(item)))
        elif isinstance(item, ArrayNode):
            stack.extend(reversed(_array_parts(item)))
        else:
            parts.append(_scalar_text(item))
    return "".join(parts)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _object_parts(obj: ObjectNode) -> list[Node | str]:
    pending: list[Node | str] = ["{"]
    for i, entry in enumerate(obj.entries):
        pending.append(("," if i else "") + _quote(entry.key) + ":")
        pending.append(entry.value)
    pending.append("}")
    return pending


def _array_parts(array: ArrayNode) -> list[Node | str]:
    pending: list[Node | str] = ["["]
    for i, item in enumerate(array.items):
        if i:
            pending.append(",")
        pending.append(item)
    pending.append("]")
    return pending


def _scalar_text(scalar: Scalar) -> str:
    if scalar.kind is ScalarKind.STRING:
        return _quote(scalar.text)
    if scalar.kind is ScalarKind.NUMBER:
        return scalar.text
    if scalar.kind is ScalarKind.BOOL:
        return "true" if scalar.flag else "false"
    return "null"
