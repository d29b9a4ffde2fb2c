"""
Row → document assembly.

Builds one nested document per data row from the compiled header paths and
the row's raw field values. Only ``min(len(headers), len(row))`` columns take
part: a short row leaves its trailing paths unset and extra fields are
ignored.

Two strategies are available:

``grouped`` (default)
    Columns without an index segment are plain paths and are assigned right
    away as nested mappings. Indexed columns are bucketed under their base
    path (the segments before the first index) and, once every column has
    been seen, each bucket becomes one list of length ``max index + 1``.
    Missing indices are filled with ``None``, so index columns may appear in
    any order and with gaps::

        signal.0,signal.2  +  101,103   →   {"signal": [101.0, None, 103.0]}

    Segments after the index nest inside the element (``wheels[1].psi``
    makes element 1 a mapping). Arrays are attached after all plain paths,
    so an array base path replaces a plain value at the same place.

``pointer``
    Every path is applied in column order as a direct tree address.
    Intermediate nodes are created on the way, lists are padded with
    ``None`` up to the written index, and a later column overwrites an
    earlier one at the same address.

In both strategies the root is a mapping, so an index segment that
addresses the root (or any mapping) is used as the string key
``str(index)``.
"""

from __future__ import annotations

from typing import Any, Sequence

from csvreplay.configs.config import STRATEGIES, STRATEGY_GROUPED, STRATEGY_POINTER
from csvreplay.configs.exceptions import ConfigError
from csvreplay.transformers.paths import KeyPath, Segment, first_index
from csvreplay.transformers.typing_infer import infer_scalar

Document = dict[str, Any]

_Entry = tuple[KeyPath, str]


def build_document(
    headers: Sequence[KeyPath],
    row: Sequence[str],
    strategy: str = STRATEGY_GROUPED,
) -> Document:
    """
    Build the document for one row.

    Args:
        headers:  Compiled header paths, one per column.
        row:      Raw field strings of one data line.
        strategy: ``"grouped"`` or ``"pointer"``.

    Returns:
        A fresh ``dict``; the caller owns it.

    Raises:
        ConfigError: If ``strategy`` is not a known strategy name.
    """
    entries: list[_Entry] = list(zip(headers, row))

    if strategy == STRATEGY_GROUPED:
        document: Document = {}
        _fill_mapping(document, entries)
        return document

    if strategy == STRATEGY_POINTER:
        document = {}
        for path, raw in entries:
            set_by_pointer(document, path, infer_scalar(raw))
        return document

    raise ConfigError(
        f"Unknown document strategy. Valid strategies: {list(STRATEGIES)}",
        option="strategy",
        value=strategy,
    )


# ---------------------------------------------------------------------------
# Grouped-array strategy
# ---------------------------------------------------------------------------

def _fill_mapping(target: dict, entries: list[_Entry]) -> None:
    arrays: dict[KeyPath, dict[int, list[_Entry]]] = {}

    # Pass 1: plain paths go straight in, indexed paths are bucketed.
    for path, raw in entries:
        if isinstance(path[0], int):
            path = (str(path[0]),) + path[1:]
        split = first_index(path)
        if split is None:
            _assign(target, path, infer_scalar(raw))
            continue
        base, index, tail = path[:split], path[split], path[split + 1:]
        arrays.setdefault(base, {}).setdefault(index, []).append((tail, raw))

    # Pass 2: one gap-filled list per base path.
    for base, slots in arrays.items():
        _assign(target, base, _build_sequence(slots))


def _build_sequence(slots: dict[int, list[_Entry]]) -> list:
    size = max(slots) + 1
    return [_build_element(slots[i]) if i in slots else None for i in range(size)]


def _build_element(entries: list[_Entry]) -> Any:
    tail, raw = entries[-1]
    if not tail:
        return infer_scalar(raw)

    nested = [(t, r) for t, r in entries if t]
    if all(isinstance(t[0], int) for t, _ in nested):
        slots: dict[int, list[_Entry]] = {}
        for t, r in nested:
            slots.setdefault(t[0], []).append((t[1:], r))
        return _build_sequence(slots)

    element: dict = {}
    _fill_mapping(element, nested)
    return element


def _assign(target: dict, path: KeyPath, value: Any) -> None:
    """Set ``value`` at a path of names, replacing non-mapping nodes on the way."""
    node = target
    for segment in path[:-1]:
        key = str(segment)
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[str(path[-1])] = value


# ---------------------------------------------------------------------------
# Pointer-style strategy
# ---------------------------------------------------------------------------

def set_by_pointer(document: Document, path: KeyPath, value: Any) -> None:
    """
    Assign ``value`` at ``path``, creating containers as needed.

    A name segment selects a mapping key, an index segment selects a list
    slot (padding the list with ``None``). When the existing node cannot
    take the next segment it is replaced by a fresh container.
    """
    node: dict | list = document
    last = len(path) - 1
    for position, segment in enumerate(path):
        if position == last:
            _put(node, segment, value)
            return

        upcoming = path[position + 1]
        child = _get(node, segment)
        if isinstance(child, dict):
            pass
        elif isinstance(child, list) and isinstance(upcoming, int):
            pass
        else:
            child = [] if isinstance(upcoming, int) else {}
            _put(node, segment, child)
        node = child


def _get(node: dict | list, segment: Segment) -> Any:
    if isinstance(node, dict):
        return node.get(str(segment))
    if segment < len(node):
        return node[segment]
    return None


def _put(node: dict | list, segment: Segment, value: Any) -> None:
    if isinstance(node, dict):
        node[str(segment)] = value
        return
    if segment >= len(node):
        node.extend([None] * (segment + 1 - len(node)))
    node[segment] = value
