"""
Replay configuration.

All tuneable options live here. Import from this module everywhere;
never hardcode the encoding or the document strategy inline.

Usage:
    from csvreplay.configs.config import ReplayConfig
    cfg = ReplayConfig()                    # defaults
    cfg = ReplayConfig(strategy="pointer")

Environment overrides (optional) can be loaded via .env / os.environ before
constructing the config object; this module does not load .env itself.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, field

from csvreplay.configs.exceptions import ConfigError

STRATEGY_GROUPED: str = "grouped"
"""Indexed columns are collected per base path and attached as whole arrays."""

STRATEGY_POINTER: str = "pointer"
"""Each column path is applied directly as a tree address, last write wins."""

STRATEGIES: tuple[str, ...] = (STRATEGY_GROUPED, STRATEGY_POINTER)

OUTPUT_FORMATS: tuple[str, ...] = ("json", "yaml")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(slots=True)
class ReplayConfig:
    """
    Runtime configuration for a ``Replay``.

    Attributes:
        encoding: Text encoding of the CSV file. ``utf-8-sig`` drops a
            leading BOM so it never ends up in the first header.
        strategy: Document building strategy, ``grouped`` or ``pointer``.
        loop: Initial loop flag. When True, ``advance`` wraps to the first
            data row instead of returning the end-of-data sentinel.
        output_format: Serialization used by the CLI ``dump`` command.
    """

    encoding: str = field(
        default_factory=lambda: os.environ.get("REPLAY_ENCODING", "utf-8-sig")
    )
    strategy: str = field(
        default_factory=lambda: os.environ.get("REPLAY_STRATEGY", STRATEGY_GROUPED)
    )
    loop: bool = field(default_factory=lambda: _env_flag("REPLAY_LOOP"))
    output_format: str = field(
        default_factory=lambda: os.environ.get("REPLAY_FORMAT", "json")
    )

    def validate(self) -> "ReplayConfig":
        """
        Check option values and return ``self``.

        Raises:
            ConfigError: If ``encoding``, ``strategy`` or ``output_format`` is unknown.
        """
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigError(
                "Unknown text encoding",
                option="encoding",
                value=self.encoding,
            ) from e
        if self.strategy not in STRATEGIES:
            raise ConfigError(
                f"Unknown document strategy. Valid strategies: {list(STRATEGIES)}",
                option="strategy",
                value=self.strategy,
            )
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unknown output format. Valid formats: {list(OUTPUT_FORMATS)}",
                option="output_format",
                value=self.output_format,
            )
        return self
