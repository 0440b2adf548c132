"""
Nested Path Access

Dotted-path get/set/unset over plain records built from dicts and lists,
e.g. "items.0.price.amount". Every node is classified by NodeKind and the
accessors dispatch on that tag. None of the functions raise on malformed or
partially populated records: unresolvable reads return None and unusable
writes are ignored.
"""

from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from enum import Enum
from functools import lru_cache
from typing import Any

PATH_SEPARATOR = "."

PathLike = str | Sequence[str]


class NodeKind(str, Enum):
    """Shape of a value met while walking a path."""
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    ABSENT = "absent"


def node_kind(value: Any) -> NodeKind:
    if value is None:
        return NodeKind.ABSENT
    if isinstance(value, Mapping):
        return NodeKind.MAPPING
    # str and bytes are sequences too, but never containers here
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def is_index(segment: str) -> bool:
    """True when a segment addresses a list position."""
    return segment.isascii() and segment.isdigit()


@lru_cache(maxsize=None)
def _split_path(path: str) -> tuple[str, ...]:
    return tuple(path.split(PATH_SEPARATOR))


def parse_path(path: str) -> list[str]:
    """
    Split a dotted path into segments.

    Parsing is memoized per path string for the life of the process. A new
    list is returned on every call so callers are free to mutate it.

    Example:
        >>> parse_path("price.amount")
        ['price', 'amount']
        >>> parse_path("")
        ['']
    """
    return list(_split_path(path))


def _segments(path: PathLike) -> list[str]:
    if isinstance(path, str):
        return parse_path(path)
    return list(path)


def _child(node: Any, segment: str) -> Any:
    kind = node_kind(node)
    if kind is NodeKind.MAPPING:
        return node.get(segment)
    if kind is NodeKind.SEQUENCE:
        if not is_index(segment):
            return None
        index = int(segment)
        return node[index] if index < len(node) else None
    return None


def get_value(record: Any, path: PathLike) -> Any:
    """
    Read the value at path, or None when any step does not resolve.

    Args:
        record: Root dict/list (any other value resolves to None)
        path: Dotted string or pre-split segments
    """
    node = record
    for segment in _segments(path):
        if node_kind(node) not in (NodeKind.MAPPING, NodeKind.SEQUENCE):
            return None
        node = _child(node, segment)
    return node


def _assign(container: Any, segment: str, value: Any) -> bool:
    kind = node_kind(container)
    if kind is NodeKind.MAPPING and isinstance(container, MutableMapping):
        container[segment] = value
        return True
    if kind is NodeKind.SEQUENCE and isinstance(container, MutableSequence) and is_index(segment):
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
        return True
    return False


def set_value(record: Any, path: PathLike, value: Any) -> None:
    """
    Write value at path, creating missing intermediate containers.

    A missing or non-container intermediate is replaced by a list when the
    current container is a list and the next segment is numeric, and by a
    dict otherwise. Empty trailing segments ("", ".", "a.") and segments a
    container cannot accept make the whole call a no-op.
    """
    segments = _segments(path)
    if not segments:
        return
    last = segments.pop()
    if not last:
        return

    node = record
    for position, segment in enumerate(segments):
        child = _child(node, segment)
        if node_kind(child) not in (NodeKind.MAPPING, NodeKind.SEQUENCE):
            upcoming = segments[position + 1] if position + 1 < len(segments) else last
            wants_list = node_kind(node) is NodeKind.SEQUENCE and is_index(upcoming)
            child = [] if wants_list else {}
            if not _assign(node, segment, child):
                return
        node = child

    _assign(node, last, value)


def unset_value(record: Any, path: PathLike) -> None:
    """
    Erase the value at path.

    Mapping keys are removed; list slots are reset to None so positions of
    the remaining items do not shift. Unresolvable paths are ignored.
    """
    segments = _segments(path)
    if not segments:
        return
    last = segments.pop()
    if not last:
        return

    parent = get_value(record, segments) if segments else record
    kind = node_kind(parent)
    if kind is NodeKind.MAPPING and isinstance(parent, MutableMapping):
        parent.pop(last, None)
    elif kind is NodeKind.SEQUENCE and isinstance(parent, MutableSequence) and is_index(last):
        index = int(last)
        if index < len(parent):
            parent[index] = None
