"""Duplicate-key resolution over a Document tree.

For each object, bottom-up:

  1. Dotted keys ("a.b.c") are expanded into nested objects, merging into
     an object already built for the same prefix where one exists.
  2. Every value is deduplicated recursively.
  3. Duplicate keys are collapsed: the first non-empty value wins; when all
     values for a key are empty (null or ""), the last one wins.

Arrays are walked but never shortened. The engine mutates the tree in place
and has no failure mode.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..document.nodes import ArrayNode, Entry, Node, ObjectNode, is_empty


@dataclass
class DedupStats:
    """Running counters, shared across every row of a stream."""

    lines: int = 0
    objects: int = 0
    dotted_keys_expanded: int = 0
    duplicate_keys_removed: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "lines": self.lines,
            "objects": self.objects,
            "dotted_keys_expanded": self.dotted_keys_expanded,
            "duplicate_keys_removed": self.duplicate_keys_removed,
        }


def dedup(node: Node, stats: DedupStats | None = None) -> Node:
    """Deduplicate ``node`` in place and return it.

    Walks the tree with an explicit stack: dotted-key expansion can nest
    a document far deeper than the parser's depth limit allows.
    """
    # (node, children_done): an object is resolved only after its children.
    stack: list[tuple[Node, bool]] = [(node, False)]
    while stack:
        current, children_done = stack.pop()
        if isinstance(current, ArrayNode):
            stack.extend((item, False) for item in reversed(current.items))
        elif isinstance(current, ObjectNode):
            if children_done:
                current.entries = resolve_duplicates(current.entries, stats)
                continue
            if stats is not None:
                stats.objects += 1
            if not current.entries:
                continue
            current.entries = expand_dotted_entries(current.entries, stats)
            stack.append((current, True))
            stack.extend((entry.value, False) for entry in reversed(current.entries))
    return node


def expand_dotted_entries(
    entries: list[Entry], stats: DedupStats | None = None
) -> list[Entry]:
    """Rebuild ``entries`` with every dotted key turned into a nested path.

    Only this level is expanded; nested objects are handled when the
    walk reaches them. Returns ``entries`` itself when no key has a dot.
    """
    if not any("." in entry.key for entry in entries):
        return entries

    expanded: list[Entry] = []
    for entry in entries:
        if "." not in entry.key:
            expanded.append(entry)
            continue
        _insert_path(expanded, entry.key.split("."), entry.value)
        if stats is not None:
            stats.dotted_keys_expanded += 1
    return expanded


def _insert_path(entries: list[Entry], parts: list[str], value: Node) -> None:
    *parents, leaf = parts
    for segment in parents:
        target = _find_merge_target(entries, segment)
        if target is None:
            target = ObjectNode()
            entries.append(Entry(segment, target))
        entries = target.entries
    entries.append(Entry(leaf, value))


def _find_merge_target(entries: list[Entry], key: str) -> ObjectNode | None:
    # Only the most recent entry for the key is considered.
    for entry in reversed(entries):
        if entry.key == key:
            return entry.value if isinstance(entry.value, ObjectNode) else None
    return None


def resolve_duplicates(
    entries: list[Entry], stats: DedupStats | None = None
) -> list[Entry]:
    """Keep one entry per key without reordering the survivors.

    The survivor is the first entry whose value is non-empty, or the last
    entry when every value for that key is empty.
    """
    first_non_empty: dict[str, int] = {}
    last: dict[str, int] = {}
    for i, entry in enumerate(entries):
        last[entry.key] = i
        if entry.key not in first_non_empty and not is_empty(entry.value):
            first_non_empty[entry.key] = i

    if len(last) == len(entries):
        return entries

    chosen = {key: first_non_empty.get(key, idx) for key, idx in last.items()}
    survivors = [entry for i, entry in enumerate(entries) if chosen[entry.key] == i]
    if stats is not None:
        stats.duplicate_keys_removed += len(entries) - len(survivors)
    return survivors
