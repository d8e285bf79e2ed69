#!/usr/bin/env python3
"""
cli.py — Command line for saml-c14n

Commands:
  canonicalize  Print the canonical form (or its SHA-256) of an XML document
  dump          Print the parsed document tree
  kinds         List canonicalization algorithm URIs and their status
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional

from .builder import parse
from .canonical_xml import canonicalize_stream, sha256_hex
from .canonicalize import CanonicalizationKind
from .debug import dump_tree
from .errors import C14nError


def _fail_with_error(err: C14nError) -> None:
    """Print a structured error message from a ``C14nError`` and exit.

    Args:
        err: Structured canonicalization error.

    Returns:
        None: This function terminates the process.
    """
    context = f" Context: {err.context}." if err.context else ""
    print(
        f"ERROR: {err.code}. {err.message}{context} (See: {err.doc_url})",
        file=sys.stderr,
    )
    sys.exit(1)


def _open_input(path: str) -> BinaryIO:
    if path == "-":
        return sys.stdin.buffer
    return open(path, "rb")


def cmd_canonicalize(args: argparse.Namespace) -> None:
    """Handle ``saml-c14n canonicalize``.

    Args:
        args: Parsed CLI arguments with the input path, algorithm and output.

    Returns:
        None: Writes canonical bytes or their digest.
    """
    stream = _open_input(args.path)
    try:
        data = canonicalize_stream(stream, args.kind)
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()

    if args.hash:
        data = (sha256_hex(data) + "\n").encode("ascii")

    if args.output:
        Path(args.output).write_bytes(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()


def cmd_dump(args: argparse.Namespace) -> None:
    """Handle ``saml-c14n dump``."""
    stream = _open_input(args.path)
    try:
        tree = parse(stream)
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()
    print(dump_tree(tree))


def cmd_kinds(args: argparse.Namespace) -> None:
    """Handle ``saml-c14n kinds``."""
    for kind in CanonicalizationKind:
        status = "implemented" if kind.implemented else "unsupported"
        print(f"{kind.value}\t{status}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="saml-c14n", description="Canonical XML for signature verification")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline details to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    # canonicalize
    p_c14n = sub.add_parser("canonicalize", help="Print the canonical form of a document")
    p_c14n.add_argument("path", help="Path to XML document, or - for stdin")
    p_c14n.add_argument("-o", "--output", help="Write canonical bytes to this file")
    p_c14n.add_argument(
        "--kind",
        default=CanonicalizationKind.C14N.value,
        help="Canonicalization algorithm URI",
    )
    p_c14n.add_argument("--hash", action="store_true", help="Print the SHA-256 of the canonical bytes instead")

    # dump
    p_dump = sub.add_parser("dump", help="Print the parsed document tree")
    p_dump.add_argument("path", help="Path to XML document, or - for stdin")

    # kinds
    sub.add_parser("kinds", help="List canonicalization algorithms")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entrypoint.

    Parses command-line arguments, routes to a subcommand handler, and exits
    with status 1 on any canonicalization error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "canonicalize": cmd_canonicalize,
        "dump": cmd_dump,
        "kinds": cmd_kinds,
    }
    try:
        handlers[args.command](args)
    except C14nError as err:
        _fail_with_error(err)
    except OSError as err:
        print(f"ERROR: {err}.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
