from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TextIO

from clickstream_firehose.handler import lambda_handler
from clickstream_firehose.transformer import InvalidBatchError

EXIT_OK = 0
EXIT_INVALID_BATCH = 1


def _open_input(path: str) -> TextIO:
    if path == "-":
        return sys.stdin
    return Path(path).open(encoding="utf-8")


def _run_transform(args: argparse.Namespace) -> int:
    handle = _open_input(args.event_file)
    try:
        event = json.load(handle)
    finally:
        if handle is not sys.stdin:
            handle.close()

    try:
        response = lambda_handler(event)
    except InvalidBatchError as exc:
        print(f"invalid transformation batch: {exc}", file=sys.stderr)
        return EXIT_INVALID_BATCH

    print(json.dumps(response, indent=2))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clickstream-firehose",
        description="Clickstream Firehose record transformation tools.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    transform_parser = subparsers.add_parser(
        "transform",
        help="Run the transformation handler on a Firehose test event.",
    )
    transform_parser.add_argument("event_file", help="Event JSON file, or - for stdin.")
    transform_parser.set_defaults(func=_run_transform)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)
