"""
Scalar type inference for field values.

Each field is typed on its own, with no schema and no column consensus:

  1. NUMBER:  the *whole* string is a decimal floating-point literal:
               optional sign, digits with an optional fraction (or a bare
               fraction such as ``.5``), optional exponent.
               Converted to ``float``.
  2. STRING:  everything else, returned unchanged.

Whitespace is not stripped, so ``" 5"`` and ``"5 "`` stay strings, and the
empty string is never a number. ``inf``, ``nan`` and hexadecimal literals
are not numbers either; a field is numeric only if it has no residue a
reader would not recognise as decimal.
"""

from __future__ import annotations

import re

_DECIMAL_RE = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)


def is_numeric(value: str) -> bool:
    """Return True if ``value`` is entirely a decimal floating-point literal."""
    return _DECIMAL_RE.fullmatch(value) is not None


def infer_scalar(value: str) -> float | str:
    """
    Type a raw field value.

    Examples::

        infer_scalar("2.5")       # → 2.5
        infer_scalar("-0.8")      # → -0.8
        infer_scalar("101")       # → 101.0
        infer_scalar("John Doe")  # → "John Doe"
        infer_scalar("")          # → ""
    """
    if is_numeric(value):
        return float(value)
    return value
