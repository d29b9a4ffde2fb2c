"""
Abstract base class for line sources.

A line source is a rewindable cursor over the text lines of one file. The
replay controller works exclusively against ``AbstractLineSource`` so the
document pipeline does not care where lines come from.

Usage:
    with FileLineSource(path, encoding="utf-8") as source:
        line = source.readline()
        while line is not None:
            process(line)
            line = source.readline()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class AbstractLineSource(ABC):
    """
    Interface for all line sources.

    Subclasses must implement ``open``, ``readline``, ``rewind``, ``mark``,
    ``restore``, ``at_end`` and ``close``. Context manager support
    (``__enter__`` / ``__exit__``) is provided by this base class and
    delegates to ``open`` / ``close``.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @abstractmethod
    def open(self) -> None:
        """Open the source for reading. Must be called before ``readline``."""

    @abstractmethod
    def readline(self) -> str | None:
        """
        Return the next line without its terminator, or ``None`` at end of input.

        Reaching end of input sets ``at_end``.
        """

    @abstractmethod
    def rewind(self) -> None:
        """Move back to the first line and clear ``at_end``."""

    @abstractmethod
    def mark(self) -> Any:
        """Return an opaque token for the current position (including ``at_end``)."""

    @abstractmethod
    def restore(self, token: Any) -> None:
        """Return to a position previously obtained from ``mark``."""

    @property
    @abstractmethod
    def at_end(self) -> bool:
        """True once a read has reached end of input."""

    @abstractmethod
    def close(self) -> None:
        """Release any open file handles or resources."""

    # ── context manager ──────────────────────────────────────────────────

    def __enter__(self) -> "AbstractLineSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
        return None
