"""Dotted-path access into JSON-like trees.

Paths use dot and bracket notation: ``"a.b.0.c"``, ``"a.b[0].c"`` and
``'a["key.with.dots"]'`` address the same kind of nested fields.

- Reads of missing segments return the default (``None`` unless given).
- Writes create missing intermediates: a list when the next segment is an
  integer index, a dict otherwise. Scalars in the way are replaced.
- Unsetting a list element replaces it with ``None`` so sibling positions
  stay stable.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from functools import lru_cache
from typing import Any, Final


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

_SEGMENT = re.compile(r"""\[(?P<index>-?\d+)\]|\[(?P<q>["'])(?P<quoted>.*?)(?P=q)\]|(?P<name>[^.\[\]]+)""")


@lru_cache(maxsize=512)
def to_path(path: str) -> tuple[str, ...]:
    """Split a dotted/bracketed path into segments.

    >>> to_path('a.b[0]["c.d"]')
    ('a', 'b', '0', 'c.d')
    """
    segments = tuple(
        m.group("index") or m.group("quoted") or m.group("name") or ""
        for m in _SEGMENT.finditer(path)
    )
    return segments or (path,)


def _is_index(segment: str) -> bool:
    return segment.isdigit()


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _child(container: Any, segment: str, default: Any) -> Any:
    if isinstance(container, Mapping):
        return container.get(segment, default)
    if _is_sequence(container) and _is_index(segment):
        idx = int(segment)
        return container[idx] if idx < len(container) else default
    return default


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Value at ``path`` or ``default`` when any segment is missing."""
    current = obj
    for segment in to_path(path):
        current = _child(current, segment, MISSING)
        if current is MISSING:
            return default
    return current


def has_path(obj: Any, path: str) -> bool:
    return get_path(obj, path, MISSING) is not MISSING


def _assign(container: Any, segment: str, value: Any) -> None:
    if isinstance(container, MutableMapping):
        container[segment] = value
    elif isinstance(container, MutableSequence) and _is_index(segment):
        idx = int(segment)
        if idx >= len(container):
            container.extend([None] * (idx + 1 - len(container)))
        container[idx] = value


def set_path(obj: Any, path: str, value: Any) -> Any:
    """Write ``value`` at ``path`` inside ``obj``, creating intermediates. Returns ``obj``.

    Passing ``MISSING`` creates the intermediates but leaves the leaf unset.
    """
    segments = to_path(path)
    current = obj
    for segment, following in zip(segments, segments[1:]):
        nxt = _child(current, segment, MISSING)
        if not isinstance(nxt, (MutableMapping, MutableSequence)):
            nxt = [] if _is_index(following) else {}
            _assign(current, segment, nxt)
        current = nxt
    if value is not MISSING:
        _assign(current, segments[-1], value)
    return obj


def unset_path(obj: Any, path: str) -> bool:
    """Remove the leaf at ``path``. Returns whether something was removed."""
    *parents, leaf = to_path(path)
    current = obj
    for segment in parents:
        current = _child(current, segment, MISSING)
        if current is MISSING:
            return False
    if isinstance(current, MutableMapping) and leaf in current:
        del current[leaf]
        return True
    if isinstance(current, MutableSequence) and _is_index(leaf) and int(leaf) < len(current):
        current[int(leaf)] = None
        return True
    return False
