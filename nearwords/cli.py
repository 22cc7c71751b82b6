from __future__ import annotations

import argparse
import logging
import sys
import time

from .config import AppConfig
from .errors import NearwordsError
from .loader import load
from .neighbors import NeighborSearch
from .shell import Shell
from .table import VectorTable

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def configure_logging(level: str) -> None:
    root = logging.getLogger("nearwords")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def _describe(table: VectorTable) -> str:
    return (
        f"vocabulary size: {table.vocab_size}\n"
        f"vector size: {table.vector_size}\n"
        f"matrix memory: {table.nbytes / 1024:,.0f} KiB"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find the nearest words in a word2vec model")
    parser.add_argument("model", help="Path to a word2vec model (.bin for binary, anything else is text)")
    parser.add_argument("neighbors", nargs="?", type=_positive_int, default=None, help="Neighbors to show (default: 40)")
    parser.add_argument("--config", "-c", help="Path to YAML/JSON config", default=None)
    parser.add_argument("--format", choices=["auto", "binary", "text"], default=None, help="Model file format")
    parser.add_argument("--output", choices=["table", "json", "markdown"], default=None, help="Result format")
    parser.add_argument("--query", "-q", action="append", default=None, help="Answer this query and exit (repeatable)")
    parser.add_argument("--info", action="store_true", help="Print table statistics and exit")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = AppConfig.load(args.config) if args.config else AppConfig()
    except (OSError, ValueError) as exc:
        print(f"Cannot read config {args.config}: {exc}", file=sys.stderr)
        return 1
    if args.format:
        cfg.loader.format = args.format
    if args.output:
        cfg.shell.output = args.output
    if args.neighbors is not None:
        cfg.search.top_k = args.neighbors
    configure_logging(args.log_level or cfg.log_level)

    t0 = time.perf_counter()
    try:
        table = load(args.model, cfg.loader)
    except NearwordsError as exc:
        print(f"Failed to load {args.model}: {exc}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - t0
    print(f"{elapsed:.3f}s to load {table.vocab_size} {table.vector_size}-dimensional word vectors")

    if args.info:
        print(_describe(table))
        return 0

    shell = Shell(NeighborSearch(table, cfg.search), cfg.shell, sys.stdin, sys.stdout)
    if args.query:
        for text in args.query:
            print(shell.respond(text))
        return 0
    shell.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
