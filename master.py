"""
csv-replay: replay a CSV file as a stream of nested documents

Commands:
  dump     Print every row as a document (JSON lines or YAML).
  headers  Show how each column header compiles into a document path.
  count    Print the number of data rows in one pass over the file.

Usage examples:
  python master.py dump    --source data/drive.csv
  python master.py dump    --source data/drive.csv --format yaml
  python master.py dump    --source data/drive.csv --loop --cycles 3 --indent 2
  python master.py headers --source data/drive.csv
  python master.py count   --source data/drive.csv

Environment variables (also loaded from .env):
  REPLAY_ENCODING  File encoding (default utf-8-sig)
  REPLAY_STRATEGY  Document strategy: grouped (default) or pointer
  REPLAY_LOOP      Set to 'true' to start in loop mode
  REPLAY_FORMAT    Output format for dump: json (default) or yaml

Exit codes:
  0  Success
  1  Source error, file cannot be opened, decoded, or has no header
  2  Configuration / argument error
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import yaml
from dotenv import load_dotenv

from csvreplay.configs.config import OUTPUT_FORMATS, STRATEGIES, ReplayConfig
from csvreplay.configs.exceptions import ConfigError, ReplayError
from csvreplay.replay import Replay
from csvreplay.transformers.document_builder import Document
from csvreplay.transformers.paths import format_path

logger = logging.getLogger("csvreplay.cli")


class _LimitReached(Exception):
    """Raised from the dump callback once ``--limit`` documents were printed."""


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {raw!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        level=level,
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Config builder from env + CLI overrides
# ---------------------------------------------------------------------------

def _build_config(args: argparse.Namespace) -> ReplayConfig:
    kwargs = {}
    if getattr(args, "encoding", None):
        kwargs["encoding"] = args.encoding
    if getattr(args, "strategy", None):
        kwargs["strategy"] = args.strategy
    if getattr(args, "format", None):
        kwargs["output_format"] = args.format
    if getattr(args, "loop", False):
        kwargs["loop"] = True
    return ReplayConfig(**kwargs).validate()


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def _render(document: Document, output_format: str, indent: int | None) -> str:
    if output_format == "yaml":
        return yaml.safe_dump(
            document,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
            explicit_start=True,
        ).rstrip("\n")
    return json.dumps(document, indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------

def _cmd_dump(args: argparse.Namespace) -> int:
    config = _build_config(args)
    printed = 0

    def emit(document: Document) -> None:
        nonlocal printed
        print(_render(document, config.output_format, args.indent))
        printed += 1
        if args.limit and printed >= args.limit:
            raise _LimitReached

    with Replay(args.source, config) as replay:
        try:
            replay.play(emit, max_cycles=args.cycles)
        except _LimitReached:
            logger.debug("Stopped after %d document(s) (--limit)", printed)

    logger.info("Printed %d document(s) from %s", printed, args.source)
    return 0


def _cmd_headers(args: argparse.Namespace) -> int:
    config = _build_config(args)
    with Replay(args.source, config) as replay:
        raw, paths = replay.raw_headers, replay.headers
    width = max((len(r) for r in raw), default=0)
    for position, (label, path) in enumerate(zip(raw, paths)):
        print(f"{position:>3}  {label:<{width}}  {format_path(path)}")
    return 0


def _cmd_count(args: argparse.Namespace) -> int:
    config = _build_config(args)
    with Replay(args.source, config) as replay:
        print(replay.count_rows())
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-replay",
        description="Replay a CSV file as a stream of nested documents",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    def _add_source_args(p):
        p.add_argument("--source", required=True, help="Path to the CSV file")
        p.add_argument("--encoding", default=None, help="File encoding (overrides REPLAY_ENCODING)")

    # dump
    p_dump = sub.add_parser("dump", help="Print every row as a document")
    _add_source_args(p_dump)
    p_dump.add_argument("--format", choices=OUTPUT_FORMATS, default=None,
                        help="Output format (overrides REPLAY_FORMAT)")
    p_dump.add_argument("--indent", type=int, default=None, help="JSON indentation")
    p_dump.add_argument("--strategy", choices=STRATEGIES, default=None,
                        help="Document strategy (overrides REPLAY_STRATEGY)")
    p_dump.add_argument("--loop", action="store_true", help="Wrap around at end of file")
    p_dump.add_argument("--cycles", type=_non_negative_int, default=0,
                        help="Passes over the data in loop mode (0 = endless)")
    p_dump.add_argument("--limit", type=_non_negative_int, default=0,
                        help="Stop after this many documents (0 = no limit)")

    # headers
    p_headers = sub.add_parser("headers", help="Show compiled header paths")
    _add_source_args(p_headers)

    # count
    p_count = sub.add_parser("count", help="Count data rows per cycle")
    _add_source_args(p_count)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    handlers = {
        "dump":    _cmd_dump,
        "headers": _cmd_headers,
        "count":   _cmd_count,
    }
    try:
        exit_code = handlers[args.command](args)
    except ConfigError as e:
        print(f"✗ configuration error: {e}", file=sys.stderr)
        exit_code = 2
    except ReplayError as e:
        print(f"✗ {args.source}: {e}", file=sys.stderr)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
