"""
File-backed line source implementing ``AbstractLineSource``.

Handles:
- UTF-8 with or without BOM (``utf-8-sig`` by default).
- Windows CRLF and Unix LF line endings (universal newlines).
- Seek-back so the file can be read any number of times.
- End-of-input tracking: ``at_end`` turns True on the read that hits the
  end of the file, including a final line without a terminator.
"""

from __future__ import annotations

from pathlib import Path

from csvreplay.configs.exceptions import SourceOpenError, SourceReadError
from csvreplay.sources.base import AbstractLineSource


class FileLineSource(AbstractLineSource):
    """
    Rewindable reader over the lines of a text file.

    Args:
        path: Path to the file.
        encoding: Text encoding used to open the file.
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8-sig") -> None:
        super().__init__(path)
        self.encoding = encoding
        self._file = None
        self._at_end = False

    # ── AbstractLineSource interface ─────────────────────────────────────

    def open(self) -> None:
        """
        Open the file for reading.

        Raises:
            SourceOpenError: If the file cannot be opened or the encoding is unknown.
        """
        try:
            self._file = open(self.path, encoding=self.encoding)  # noqa: WPS515
        except (OSError, LookupError) as e:
            raise SourceOpenError(
                f"Cannot open {self.path}: {e}",
                source_path=str(self.path),
            ) from e
        self._at_end = False

    def readline(self) -> str | None:
        """
        Return the next line without its terminator, or ``None`` at end of input.

        Raises:
            SourceReadError: If the line cannot be decoded in ``encoding``.
        """
        if self._file is None:
            raise RuntimeError("FileLineSource.open() must be called before readline().")

        try:
            line = self._file.readline()
        except UnicodeDecodeError as e:
            raise SourceReadError(
                f"Cannot decode {self.path} as {self.encoding}: {e}",
                source_path=str(self.path),
            ) from e
        if not line:
            self._at_end = True
            return None
        if line.endswith("\n"):
            return line[:-1]
        # Last line without a terminator still counts as the read hitting the end.
        self._at_end = True
        return line

    def rewind(self) -> None:
        if self._file is None:
            raise RuntimeError("FileLineSource.open() must be called before rewind().")
        self._file.seek(0)
        self._at_end = False

    def mark(self) -> tuple[int, bool]:
        if self._file is None:
            raise RuntimeError("FileLineSource.open() must be called before mark().")
        return self._file.tell(), self._at_end

    def restore(self, token: tuple[int, bool]) -> None:
        if self._file is None:
            raise RuntimeError("FileLineSource.open() must be called before restore().")
        position, at_end = token
        self._file.seek(position)
        self._at_end = at_end

    @property
    def at_end(self) -> bool:
        return self._at_end

    @property
    def closed(self) -> bool:
        return self._file is None

    def close(self) -> None:
        """Close the underlying file handle."""
        if self._file is not None:
            self._file.close()
            self._file = None
