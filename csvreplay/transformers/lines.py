"""
Line classification and field splitting.

Two pure helpers sit in front of everything else the replay does with a
line of text:

  - **Classification**: a line is a comment when its first non-space
    character is ``#``; it is blank when it is empty or holds only
    space / tab / CR / LF. Comment and blank lines are never headers and
    never data.
  - **Splitting**: a minimal CSV dialect. Commas split fields unless they
    sit inside a double-quoted region; the quote characters themselves are
    dropped. There is no quote doubling and no escape handling, and an
    unterminated quote simply runs to the end of the line.
"""

from __future__ import annotations

_BLANK_CHARS = " \t\r\n"


def is_comment_line(line: str) -> bool:
    """Return True if the first character that is not a space is ``#``."""
    stripped = line.lstrip(" ")
    return stripped.startswith("#")


def is_blank_line(line: str) -> bool:
    """Return True if the line is empty or only space/tab/CR/LF."""
    return not line.strip(_BLANK_CHARS)


def is_data_line(line: str) -> bool:
    """Return True for header and data lines (neither comment nor blank)."""
    return not (is_comment_line(line) or is_blank_line(line))


def split_fields(line: str) -> list[str]:
    """
    Split one line into raw field strings.

    Examples::

        split_fields('a,b,c')            # → ['a', 'b', 'c']
        split_fields('"Doe, John",42')   # → ['Doe, John', '42']
        split_fields('a,')               # → ['a', '']
        split_fields('')                 # → ['']

    Returns:
        At least one field; the field after the last comma is always emitted.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields
