"""saml-c14n public API.

Canonical XML (C14N 1.0, without comments) for reproducing the exact bytes
covered by an XML signature, such as the one inside a SAML assertion.

Example:
    from saml_c14n import parse, canonicalize, serialize

    tree = parse(open("assertion.xml", "rb"))
    signed_bytes = serialize(canonicalize(tree))
"""

from .builder import build_tree, parse
from .canonical_xml import canonical_hash, canonicalize_bytes, canonicalize_stream, sha256_hex
from .canonicalize import (
    CanonicalizationKind,
    FilterOptions,
    apply_filter,
    canonicalize,
    options_for,
)
from .debug import dump_tree, log_tree
from .errors import (
    C14nError,
    MalformedNamespaceReferenceError,
    MismatchedTagsError,
    TokenizationError,
    UnbalancedTagsError,
    UnclosedTagsError,
    UnsupportedCanonicalizationKindError,
)
from .linefeed import LineFeedNormalizer
from .nodes import Element, Node, RootMarker
from .serializer import serialize, serialize_text, write_canonical
from .tokenizer import (
    Attr,
    Comment,
    Directive,
    EndTag,
    ProcessingInstruction,
    QName,
    StartTag,
    Text,
    tokenize,
)

__all__ = [
    "Attr",
    "C14nError",
    "CanonicalizationKind",
    "Comment",
    "Directive",
    "Element",
    "EndTag",
    "FilterOptions",
    "LineFeedNormalizer",
    "MalformedNamespaceReferenceError",
    "MismatchedTagsError",
    "Node",
    "ProcessingInstruction",
    "QName",
    "RootMarker",
    "StartTag",
    "Text",
    "TokenizationError",
    "UnbalancedTagsError",
    "UnclosedTagsError",
    "UnsupportedCanonicalizationKindError",
    "apply_filter",
    "build_tree",
    "canonical_hash",
    "canonicalize",
    "canonicalize_bytes",
    "canonicalize_stream",
    "dump_tree",
    "log_tree",
    "options_for",
    "parse",
    "serialize",
    "serialize_text",
    "sha256_hex",
    "tokenize",
    "write_canonical",
]

__version__ = "0.1.0"
