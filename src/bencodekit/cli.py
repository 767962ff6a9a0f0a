"""
Command-line front end for inspecting and producing Bencode.

Usage:
    bencodekit demo
    bencodekit decode file.torrent [--all] [--strict] [--max-depth N]
    bencodekit decode http://tracker.example/announce?...
    cat data.json | bencodekit encode - [--output out.bin]
"""
import argparse
import asyncio
import json
import sys
from typing import List, Optional

import aiohttp

from . import __version__
from .constants import DEFAULT_MAX_DEPTH
from .decoder import iter_decode, parse
from .encoder import encode
from .errors import BencodeError
from .fetch import fetch
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType

# Inputs exercised by the demo command: (label, raw bencode)
DEMO_INPUTS = [
    ("integer", "i3e"),
    ("negative integer", "i-7e"),
    ("invalid integer", "i07e"),
    ("string", "5:hello"),
    ("empty string", "0:"),
    ("list", "li10e4:spam3:eggse"),
    ("dictionary", "d3:cow3:moo4:spam4:eggse"),
]

HEX_PREVIEW = 32


def format_bytes(b: bytes) -> str:
    """Shows printable UTF-8 as a quoted string, anything else as hex."""
    try:
        text = b.decode()
    except UnicodeDecodeError:
        text = None

    if text is not None and text.isprintable():
        return json.dumps(text, ensure_ascii=False)

    preview = b[:HEX_PREVIEW].hex()
    suffix = "..." if len(b) > HEX_PREVIEW else ""
    return f"<{len(b)} bytes: {preview}{suffix}>"


def format_value(value: BencodeType, indent: int = 0) -> str:
    """Renders a value tree as indented text, one entry per line."""
    pad = "  " * indent

    if isinstance(value, BencodeInt):
        return str(value.value)

    if isinstance(value, BencodeString):
        return format_bytes(value.value)

    if isinstance(value, BencodeList):
        if not value.value:
            return "[]"
        lines = ["["]
        for item in value.value:
            lines.append(f"{pad}  {format_value(item, indent + 1)}")
        lines.append(f"{pad}]")
        return "\n".join(lines)

    if isinstance(value, BencodeDict):
        if not value.value:
            return "{}"
        lines = ["{"]
        for k, v in value.value.items():
            lines.append(f"{pad}  {format_bytes(k)}: {format_value(v, indent + 1)}")
        lines.append(f"{pad}}}")
        return "\n".join(lines)

    raise TypeError(f"Not a Bencode value: {type(value).__name__}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bencodekit",
        description="Decode and encode Bencode (BitTorrent) data",
    )
    parser.add_argument("--version", action="version", version=f"bencodekit {__version__}")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("demo", help="Decode a handful of sample inputs")

    dec_p = sub.add_parser("decode", help="Decode a file, stdin ('-') or http(s) URL")
    dec_p.add_argument("target", help="Path, '-' for stdin, or http(s):// URL")
    dec_p.add_argument("--all", action="store_true",
                       help="Decode every top-level value, not just the first")
    dec_p.add_argument("--strict", action="store_true",
                       help="Reject duplicate dictionary keys")
    dec_p.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                       help=f"Maximum list/dict nesting (default {DEFAULT_MAX_DEPTH})")

    enc_p = sub.add_parser("encode", help="Encode JSON as canonical Bencode")
    enc_p.add_argument("input", nargs="?", default="-",
                       help="JSON file, or '-' for stdin (default)")
    enc_p.add_argument("--output", "-o", metavar="FILE",
                       help="Write to FILE instead of stdout")

    return parser


def _cmd_demo(args: argparse.Namespace) -> None:
    print("Decoding sample bencode inputs")
    for label, raw in DEMO_INPUTS:
        try:
            value = parse(raw)
        except BencodeError as e:
            print(f"[Demo] {label} {raw!r} -> error [{type(e).__name__}]: {e}")
            continue
        print(f"[Demo] {label} {raw!r} -> {format_value(value)} ({type(value).__name__})")


def _cmd_decode(args: argparse.Namespace) -> None:
    target = args.target

    if target.startswith(("http://", "https://")):
        value = asyncio.run(fetch(target, max_depth=args.max_depth, strict=args.strict))
        print(format_value(value))
        return

    if target == "-":
        _print_values(sys.stdin.buffer, args)
        return

    with open(target, "rb") as f:
        _print_values(f, args)


def _print_values(stream, args: argparse.Namespace) -> None:
    values = iter_decode(stream, max_depth=args.max_depth, strict=args.strict)
    if not args.all:
        first = next(values, None)
        if first is None:
            raise ValueError("input is empty")
        values = [first]

    for value in values:
        print(format_value(value))
        if isinstance(value, BencodeDict) and value.duplicate_keys:
            dups = ", ".join(format_bytes(k) for k in value.duplicate_keys)
            print(f"[Decode] warning: duplicate keys {dups}", file=sys.stderr)


def _cmd_encode(args: argparse.Namespace) -> None:
    if args.input == "-":
        raw = sys.stdin.buffer.read()
    else:
        with open(args.input, "rb") as f:
            raw = f.read()

    data = encode(json.loads(raw))

    if args.output:
        with open(args.output, "wb") as f:
            f.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "demo":
            _cmd_demo(args)
        elif args.command == "decode":
            _cmd_decode(args)
        elif args.command == "encode":
            _cmd_encode(args)
    except BencodeError as e:
        print(f"bencodekit: error [{type(e).__name__}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"bencodekit: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)
    except aiohttp.ClientError as e:
        print(f"bencodekit: request failed: {e}", file=sys.stderr)
        sys.exit(2)
    except (OSError, ValueError) as e:
        print(f"bencodekit: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
