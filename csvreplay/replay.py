"""
Replay controller: CSV rows in, nested documents out.

``Replay`` owns one open file for its whole lifetime and walks it one data
row at a time. Each call to ``advance`` returns the next row as a freshly
built document; an empty ``dict`` means there is no more data.

States:
  - Positioned: ready to read the next data line.
  - EndOfData:  the file is exhausted and loop mode is off. ``advance``
                keeps returning ``{}`` until ``reset`` is called.
  - Looping:    loop mode is on; reaching the end rewinds to the first
                data row transparently.

Usage::

    with Replay("drive.csv") as replay:
        replay.play(lambda doc: print(doc["speed"]))

        replay.reset()
        replay.set_loop(True)
        replay.play(handle, max_cycles=3)     # every row, three times

Not thread-safe: every read moves the shared file position, and ``play``
and ``count_rows`` temporarily reposition it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

from csvreplay.configs.config import ReplayConfig
from csvreplay.configs.exceptions import EmptySourceError
from csvreplay.sources.base import AbstractLineSource
from csvreplay.sources.line_reader import FileLineSource
from csvreplay.transformers.document_builder import Document, build_document
from csvreplay.transformers.lines import is_data_line, split_fields
from csvreplay.transformers.paths import KeyPath, compile_headers

logger = logging.getLogger(__name__)


class Replay:
    """
    Replays a CSV file as a sequence of nested documents.

    Args:
        path:   Path to the CSV file.
        config: Replay configuration; defaults to ``ReplayConfig()``.

    Raises:
        SourceOpenError:  If the file cannot be opened.
        EmptySourceError: If the file has no header line.
        SourceReadError:  If a line cannot be decoded (also from ``advance``).
        ConfigError:      If the configuration is invalid.
    """

    def __init__(self, path: Path | str, config: ReplayConfig | None = None) -> None:
        self.config = (config or ReplayConfig()).validate()
        self.path = Path(path)
        self._loop_enabled = self.config.loop
        self._source: AbstractLineSource = FileLineSource(self.path, self.config.encoding)
        self._source.open()
        try:
            self._headers = self._parse_headers()
        except BaseException:
            self._source.close()
            raise

    # ── construction helpers ─────────────────────────────────────────────

    def _next_data_line(self) -> str | None:
        line = self._source.readline()
        while line is not None and not is_data_line(line):
            line = self._source.readline()
        return line

    def _parse_headers(self) -> tuple[KeyPath, ...]:
        header_line = self._next_data_line()
        if header_line is None:
            raise EmptySourceError(
                f"CSV file is empty or has no header line: {self.path}",
                source_path=str(self.path),
            )
        self._raw_headers = tuple(split_fields(header_line))
        headers = compile_headers(self._raw_headers)
        logger.info("Opened %s with %d column(s)", self.path.name, len(headers))
        return headers

    # ── public API ───────────────────────────────────────────────────────

    @property
    def headers(self) -> tuple[KeyPath, ...]:
        """Compiled header paths, one per column, in column order."""
        return self._headers

    @property
    def raw_headers(self) -> tuple[str, ...]:
        """Header fields exactly as split from the header line."""
        return self._raw_headers

    def advance(self) -> Document:
        """
        Return the next row as a document.

        Comment and blank lines are skipped. At end of input returns ``{}``,
        unless loop mode is on, in which case the cursor is reset and the
        first data row is returned instead (still ``{}`` if the file has no
        data rows at all).
        """
        line = self._next_data_line()
        if line is None and self._loop_enabled:
            logger.debug("End of %s reached, wrapping to first row", self.path.name)
            self.reset()
            line = self._next_data_line()
        if line is None:
            return {}
        return self._build(line)

    def has_next(self) -> bool:
        """
        Return whether ``advance`` may produce another row.

        Always True in loop mode. Otherwise True until a read reaches the
        end of the file; the final ``advance`` may still return ``{}``.
        """
        if self._loop_enabled:
            return True
        return not self._source.at_end

    def reset(self) -> None:
        """Rewind to the first data row. Headers are not recompiled."""
        self._source.rewind()
        self._next_data_line()  # header
        logger.debug("Reset %s to first data row", self.path.name)

    def set_loop(self, enabled: bool) -> None:
        """Turn loop mode on or off."""
        self._loop_enabled = bool(enabled)

    def is_loop_enabled(self) -> bool:
        return self._loop_enabled

    def count_rows(self) -> int:
        """
        Count the data rows in one full pass over the file.

        The count is taken fresh on every call and the cursor position is
        restored afterwards.
        """
        token = self._source.mark()
        try:
            self.reset()
            count = 0
            while self._next_data_line() is not None:
                count += 1
        finally:
            self._source.restore(token)
        logger.debug("%s holds %d data row(s) per cycle", self.path.name, count)
        return count

    def play(self, callback: Callable[[Document], None], max_cycles: int = 0) -> int:
        """
        Feed documents to ``callback`` until the data runs out.

        Args:
            callback:   Called once per document.
            max_cycles: Only used in loop mode. ``0`` means no limit, which
                        never returns unless the callback raises. A positive
                        value rewinds to the first row and replays every row
                        exactly ``max_cycles`` times.

        Returns:
            Number of documents delivered to ``callback``.

        Raises:
            ValueError: If ``max_cycles`` is negative.
        """
        if max_cycles < 0:
            raise ValueError(f"max_cycles must be >= 0, got {max_cycles}")
        delivered = 0

        if not self._loop_enabled or max_cycles == 0:
            while self.has_next():
                document = self.advance()
                if not document:
                    break
                callback(document)
                delivered += 1
            return delivered

        rows_per_cycle = self.count_rows()
        if rows_per_cycle == 0:
            logger.info("No data rows in %s, nothing to play", self.path.name)
            return 0

        total = rows_per_cycle * max_cycles
        logger.info(
            "Playing %s: %d row(s) x %d cycle(s)",
            self.path.name, rows_per_cycle, max_cycles,
        )
        self.reset()
        while delivered < total and self.has_next():
            document = self.advance()
            if not document:
                break
            callback(document)
            delivered += 1
        return delivered

    def close(self) -> None:
        """Release the underlying file. Safe to call more than once."""
        self._source.close()

    # ── Python protocols ─────────────────────────────────────────────────

    def __iter__(self) -> Iterator[Document]:
        """Yield documents until the end-of-data sentinel (endless in loop mode)."""
        while self.has_next():
            document = self.advance()
            if not document:
                return
            yield document

    def __enter__(self) -> "Replay":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
        return None

    # ── internals ────────────────────────────────────────────────────────

    def _build(self, line: str) -> Document:
        row = split_fields(line)
        if len(row) < len(self._headers):
            logger.debug(
                "Short row in %s: %d field(s) for %d column(s)",
                self.path.name, len(row), len(self._headers),
            )
        return build_document(self._headers, row, self.config.strategy)
