"""
Header paths: normalization and compilation.

Column headers double as a compact path language, so a CSV needs no schema
file to describe the shape of its documents::

    speed                 → ("speed",)
    position.latitude     → ("position", "latitude")
    signal[0]             → ("signal", 0)
    signal.0              → ("signal", 0)
    /signal/0             → ("signal", 0)     (pre-normalized, passed through)
    wheels[1].pressure    → ("wheels", 1, "pressure")

Normalization rewrites a raw header into the canonical ``/``-separated form:

  - ``.`` and ``[`` become ``/``
  - ``].`` collapses into a single ``/``
  - any other ``]`` is dropped
  - a header that already starts with ``/`` is left untouched

The canonical form is then split into segments. A segment made only of
ASCII digits is an array index (``int``); anything else is a field name
(``str``). Within a segment the escapes ``~1`` (``/``) and
``~0`` (``~``) are decoded.

Paths stay structured values (tuples of segments) from here on; nothing
downstream re-parses a header string.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Union

logger = logging.getLogger(__name__)

Segment = Union[str, int]
KeyPath = tuple[Segment, ...]
"""Ordered segments addressing one location in a document. Never empty."""

SEPARATOR = "/"

_INDEX_RE = re.compile(r"[0-9]+")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def normalize_keypath(raw: str) -> str:
    """
    Rewrite a dotted / bracketed header into ``/``-separated form.

    Examples::

        normalize_keypath("a.b")        # → "a/b"
        normalize_keypath("a[0].b")     # → "a/0/b"
        normalize_keypath("a[0][1]")    # → "a/0/1"
        normalize_keypath("/a/0")       # → "/a/0"  (unchanged)
    """
    if raw.startswith(SEPARATOR):
        return raw

    out: list[str] = []
    i = 0
    length = len(raw)
    while i < length:
        char = raw[i]
        if char == "]":
            if i + 1 < length and raw[i + 1] == ".":
                out.append(SEPARATOR)
                i += 1
        elif char in ".[":
            out.append(SEPARATOR)
        else:
            out.append(char)
        i += 1
    return "".join(out)


def _to_segment(piece: str) -> Segment:
    if _INDEX_RE.fullmatch(piece):
        return int(piece)
    return piece.replace("~1", "/").replace("~0", "~")


def parse_path(raw: str) -> KeyPath:
    """
    Turn one raw header field into a ``KeyPath``.

    Args:
        raw: Header text exactly as split from the header line.

    Returns:
        Tuple of segments; ``int`` for array indices, ``str`` for names.
        An empty header yields ``("",)`` so a path is never empty.
    """
    normalized = normalize_keypath(raw)
    if normalized.startswith(SEPARATOR):
        normalized = normalized[len(SEPARATOR):]
    return tuple(_to_segment(piece) for piece in normalized.split(SEPARATOR))


def format_path(path: KeyPath) -> str:
    """Render a ``KeyPath`` in its pre-normalized ``/a/0/b`` form."""
    pieces = []
    for segment in path:
        text = str(segment)
        pieces.append(text.replace("~", "~0").replace("/", "~1"))
    return SEPARATOR + SEPARATOR.join(pieces)


def first_index(path: KeyPath) -> int | None:
    """Return the position of the first index segment, or ``None`` if there is none."""
    for position, segment in enumerate(path):
        if isinstance(segment, int):
            return position
    return None


# ---------------------------------------------------------------------------
# Header compilation
# ---------------------------------------------------------------------------

def compile_headers(fields: Iterable[str]) -> tuple[KeyPath, ...]:
    """
    Compile the raw header fields into one ``KeyPath`` per column.

    Column order is preserved; row fields are matched to paths by position.
    """
    compiled = tuple(parse_path(field) for field in fields)
    logger.debug(
        "Compiled %d header(s): %s",
        len(compiled),
        ", ".join(format_path(p) for p in compiled),
    )
    return compiled
