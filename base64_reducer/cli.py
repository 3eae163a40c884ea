#!/usr/bin/env python3
"""
Re-encode an image (file or stdin) so that its binary size and/or its
base64 text stays under the requested limits.

usage:
    base64-reducer input.png --max-base64 32768 [-o out.txt]
    base64-reducer - --max-bytes 24576 --format jpeg --binary > out.jpg
"""

import argparse
import os
import sys
from typing import List, Optional

from base64_reducer.codec import TargetFormat
from base64_reducer.errors import OptimizationError
from base64_reducer.optimizer import (
    DEFAULT_INITIAL_QUALITY,
    DEFAULT_MIN_QUALITY,
    optimize_source,
)


def _format_arg(value: str) -> TargetFormat:
    try:
        return TargetFormat.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="base64-reducer",
        description="Optimizes an image (file or stdin) to Base64/binary with size limits.",
    )
    parser.add_argument("input", help="Input file path or '-' for stdin")
    parser.add_argument(
        "--max-base64",
        type=int,
        help="Maximum Base64 string length (e.g. 32768)",
    )
    parser.add_argument(
        "--max-bytes",
        type=int,
        help="Maximum binary size in bytes (e.g. 24576)",
    )
    parser.add_argument(
        "--format",
        type=_format_arg,
        default=TargetFormat.WEBP,
        help="Output format: jpeg or webp (default webp)",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        default=0,
        help="Max width/height in pixels (0 = no resize)",
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=DEFAULT_INITIAL_QUALITY,
        help="Initial quality (1-100). Reduced if needed",
    )
    parser.add_argument(
        "--min-quality",
        type=int,
        default=DEFAULT_MIN_QUALITY,
        help="Minimum quality to try",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--binary", action="store_true", help="Output raw binary (not Base64)"
    )
    mode.add_argument(
        "--data-uri", action="store_true", help="Output '<mime>;base64,<data>'"
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output file path (default: stdout)",
    )
    return parser


def _write_output(path: str, payload, binary: bool) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    if binary:
        with open(path, "wb") as f:
            f.write(payload)
    else:
        with open(path, "w", encoding="ascii") as f:
            f.write(payload)


def run(args: argparse.Namespace) -> int:
    if args.input == "-":
        source = sys.stdin.buffer
        input_desc = "<stdin>"
    else:
        if not os.path.isfile(args.input):
            print(f"Error: Input file not found: {args.input}", file=sys.stderr)
            return 1
        source = args.input
        input_desc = os.path.basename(args.input)

    if args.max_base64 is None and args.max_bytes is None:
        print("Error: Specify at least --max-base64 or --max-bytes.", file=sys.stderr)
        return 1

    try:
        attempt = optimize_source(
            source,
            max_base64_chars=args.max_base64,
            max_binary_bytes=args.max_bytes,
            fmt=args.format,
            max_size=args.max_size,
            initial_quality=args.quality,
            min_quality=args.min_quality,
        )
        if args.binary:
            payload = attempt.binary_data
        elif args.data_uri:
            payload = attempt.to_data_uri()
        else:
            payload = attempt.to_base64()

        if args.output:
            _write_output(args.output, payload, args.binary)
            print(f"OK '{input_desc}' -> '{args.output}'")
            if args.binary:
                print(f"* Binary size: {len(payload)} bytes")
            else:
                print(
                    f"* Base64 length: {len(payload)} chars "
                    f"(~{len(payload) * 3 // 4} B)"
                )
        elif args.binary:
            sys.stdout.buffer.write(payload)
            sys.stdout.buffer.flush()
        else:
            print(payload)
    except (OptimizationError, OSError) as exc:
        print(f"Error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
