"""
Command-line decoder.

Usage:
    cipher312 -t 1321521321353
    echo 794842328138412791 | cipher312 --graphemes
    cipher312 -i messages.txt -c v1 -o decoded.txt
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from cipher312 import __version__
from cipher312.codec._rules import (
    Codec,
    DecodeError,
    DecodeResult,
    DEFAULT_MAX_DEPTH,
    Grapheme,
    KnownValue,
    UnknownSequence,
)

logger = logging.getLogger(__name__)

CIPHER_CHOICES = ("auto", "v1", "v2")


def grapheme_to_dict(grapheme: Grapheme) -> dict:
    """Structured form of a grapheme for JSON output."""
    if isinstance(grapheme, KnownValue):
        return {"type": "codepoint", "value": grapheme.value, "source": grapheme.source}
    if isinstance(grapheme, UnknownSequence):
        return {"type": "unknown", "value": grapheme.text, "source": grapheme.source}
    return {"type": "invalid_unicode", "reason": grapheme.reason.value, "source": grapheme.source}


def decode_line(codec: Codec, line: str, cipher: str) -> DecodeResult:
    if cipher == "v1":
        return codec.decode_v1(line)
    if cipher == "v2":
        return codec.decode_v2(line)
    return codec.decode(line)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cipher312",
        description="Decode trinary ciphertext. Each non-blank input line is decoded separately.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    io_group = parser.add_mutually_exclusive_group()
    io_group.add_argument("-t", "--text", help="Direct ciphertext input")
    io_group.add_argument("-i", "--input", help="Input file path")
    parser.add_argument("-o", "--output", help="Output file path")

    parser.add_argument(
        "-c", "--cipher", choices=CIPHER_CHOICES, default="auto",
        help="Cipher version (default: auto, v2 with v1 fallback)",
    )
    parser.add_argument(
        "--graphemes", action="store_true",
        help="Print the decoded graphemes as JSON instead of text",
    )
    parser.add_argument(
        "--max-depth", type=int, default=DEFAULT_MAX_DEPTH, metavar="N",
        help=f"Deepest escape nesting to decode (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        codec = Codec(max_depth=args.max_depth)
    except ValueError as e:
        parser.error(str(e))

    # 1. READ INPUT
    if args.text is not None:
        source_text = args.text
    elif args.input:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                source_text = f.read()
        except FileNotFoundError:
            sys.exit(f"Error: File '{args.input}' not found.")
    else:
        source_text = sys.stdin.read()

    lines = [line.strip() for line in source_text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        sys.exit("Decode Error: no ciphertext given")

    # 2. DECODE
    outputs = []
    for lineno, line in enumerate(lines, start=1):
        try:
            result = decode_line(codec, line, args.cipher)
        except DecodeError as e:
            sys.exit(f"Decode Error (line {lineno}): {e}")
        logger.debug("Line %d: %d graphemes", lineno, len(result))
        if args.graphemes:
            outputs.append(json.dumps([grapheme_to_dict(g) for g in result], ensure_ascii=False))
        else:
            outputs.append(str(result))

    # 3. WRITE OUTPUT
    output = "\n".join(outputs)
    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output + "\n")
        except OSError as e:
            sys.exit(f"Error writing output: {e}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
