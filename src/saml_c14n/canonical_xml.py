"""
canonical_xml.py — One-call canonicalization helpers

    raw bytes -> parse -> canonicalize -> serialize -> canonical bytes

The algorithm is checked before any input is read. Digests are computed over
the canonical bytes only; producing or checking a signature over them is left
to the caller.
"""

from __future__ import annotations
import hashlib
import logging
from typing import BinaryIO, Union

from .builder import parse
from .canonicalize import CanonicalizationKind, apply_filter, options_for
from .debug import log_tree
from .serializer import serialize

logger = logging.getLogger(__name__)


def canonicalize_stream(stream: BinaryIO, kind=CanonicalizationKind.C14N) -> bytes:
    """Return the canonical bytes of the document read from ``stream``."""
    options = options_for(kind)
    canonical = apply_filter(parse(stream), options)
    log_tree(canonical)
    data = serialize(canonical)
    logger.debug("canonicalized document to %d bytes", len(data))
    return data


def canonicalize_bytes(data: Union[bytes, bytearray], kind=CanonicalizationKind.C14N) -> bytes:
    """Return the canonical bytes of an in-memory document."""
    options = options_for(kind)
    return serialize(apply_filter(parse(data), options))


def sha256_hex(data: bytes) -> str:
    """Return lowercase hex SHA-256 digest."""
    return hashlib.sha256(data).hexdigest()


def canonical_hash(data: Union[bytes, bytearray], kind=CanonicalizationKind.C14N) -> str:
    """Return SHA-256 hex digest of the canonical form of ``data``."""
    return sha256_hex(canonicalize_bytes(data, kind))
