"""Command-line interface for b58codec.

Provides subcommands:
  encode - Base58-encode arguments, a file (-f) or stdin
  decode - Base58-decode arguments, a file (-f) or stdin
  help   - Show usage

Exit codes:
    0 - Success
    1 - Decode failed or input file unreadable
    2 - Invalid arguments, missing or unknown subcommand (argparse usage
        error; the help text goes to stderr)

Positional arguments are turned back into bytes with os.fsencode, so
undecodable argv bytes reach the codec unchanged.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import coloredlogs

from b58codec.base58 import Base58Error, b58decode, b58encode

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "B58CODEC_LOG_LEVEL"

EPILOG = """\
examples:
  echo 'Hello World' | b58codec encode
  b58codec encode 'Hello World'
  b58codec encode -f input.txt
  b58codec decode JxF12TrwUP45BMd
  echo 'JxF12TrwUP45BMd' | b58codec decode
"""


def _configure_logging(verbose: bool) -> None:
    """Install colored stderr logging at the requested level."""
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        level = getattr(logging, name, None)
        if not isinstance(level, int):
            level = logging.WARNING
    coloredlogs.install(level=level, stream=sys.stderr, use_chroot=False)


def _read_stdin() -> bytes:
    """Read stdin as lines and re-join them, dropping the final newline.

    A ``\\r`` before each ``\\n`` is removed too, so text piped from
    ``echo`` encodes without a trailing line break.
    """
    data = sys.stdin.buffer.read()
    lines = data.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return b"\n".join(
        line[:-1] if line.endswith(b"\r") else line for line in lines
    )


def _read_input(args) -> Optional[bytes]:
    """Collect raw input from -f, positional arguments or stdin.

    Returns None (after reporting on stderr) when the file cannot be read.
    """
    if args.file:
        path = Path(args.file).expanduser()
        try:
            data = path.read_bytes()
        except OSError as exc:
            print(f"error: cannot read {path}: {exc.strerror}", file=sys.stderr)
            return None
        logger.debug("Read %d bytes from %s", len(data), path)
        return data
    if args.data:
        return os.fsencode(" ".join(args.data))
    data = _read_stdin()
    logger.debug("Read %d bytes from stdin", len(data))
    return data


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


def cmd_encode(args) -> int:
    """Handle the 'encode' subcommand -- writes base58 text plus newline."""
    raw = _read_input(args)
    if raw is None:
        return 1
    logger.debug("Encoding %d bytes", len(raw))
    sys.stdout.write(b58encode(raw) + "\n")
    return 0


def cmd_decode(args) -> int:
    """Handle the 'decode' subcommand -- writes raw decoded bytes."""
    raw = _read_input(args)
    if raw is None:
        return 1
    encoded = raw.decode("utf-8", errors="replace").strip()
    logger.debug("Decoding %d characters", len(encoded))
    try:
        decoded = b58decode(encoded)
    except Base58Error as exc:
        print(f"error: decoding: {exc}", file=sys.stderr)
        return 1
    sys.stdout.buffer.write(decoded)
    return 0


def cmd_help(args) -> int:
    """Handle the 'help' subcommand."""
    build_parser().print_help(sys.stdout)
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    """Add the data/-f input arguments to a subparser."""
    parser.add_argument(
        "data",
        nargs="*",
        help="Input given on the command line, joined by single spaces",
    )
    # SUPPRESS keeps a -f given before the subcommand from being reset
    parser.add_argument(
        "-f",
        "--file",
        default=argparse.SUPPRESS,
        help="Read input from FILE instead of arguments or stdin",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="b58codec",
        description="Base58 encoding and decoding tool (Bitcoin alphabet)",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__import__('b58codec').__version__}",
    )
    parser.add_argument(
        "-f",
        "--file",
        default=None,
        help="Read input from FILE instead of arguments or stdin",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help=f"Enable debug logging (default level from {LOG_LEVEL_ENV})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # -- encode --
    p_enc = sub.add_parser("encode", help="Encode data as base58")
    _add_input_args(p_enc)
    p_enc.set_defaults(func=cmd_encode)

    # -- decode --
    p_dec = sub.add_parser("decode", help="Decode a base58 string")
    _add_input_args(p_dec)
    p_dec.set_defaults(func=cmd_decode)

    # -- help --
    p_help = sub.add_parser("help", help="Show this help")
    p_help.set_defaults(func=cmd_help)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)
