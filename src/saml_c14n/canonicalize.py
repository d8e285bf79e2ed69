"""
canonicalize.py — Canonical XML tree transform

Produces a filtered copy of a parsed document; the source tree is never
modified. Rules for the base form (Canonical XML 1.0 without comments):

- Processing instructions whose target is filtered (always ``xml``) are dropped.
- Character data directly under the document root is dropped, whitespace or
  not. Deeper text is kept as-is.
- Directives are dropped.
- Comments are dropped unless the options keep them.
- Elements are always kept. Attribute names are trimmed, then attributes are
  sorted: namespace declarations first, then by (namespace URI, local name).
- Surviving document-level items are separated by a single newline.

Only the base form is implemented. The other algorithm URIs are recognized but
rejected with ``UnsupportedCanonicalizationKindError``.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from .errors import UnsupportedCanonicalizationKindError
from .nodes import Element, Node, NodeValue, is_namespace_declaration, trim_attribute
from .tokenizer import (
    XML_PREFIX,
    Attr,
    Comment,
    Directive,
    ProcessingInstruction,
    Text,
)

logger = logging.getLogger(__name__)

DOCUMENT_SEPARATOR = "\n"


class CanonicalizationKind(str, Enum):
    C14N = "http://www.w3.org/TR/2001/REC-xml-c14n-20010315"
    C14N_WITH_COMMENTS = "http://www.w3.org/TR/2001/REC-xml-c14n-20010315#WithComments"
    EXC_C14N = "http://www.w3.org/2001/10/xml-exc-c14n#"
    EXC_C14N_WITH_COMMENTS = "http://www.w3.org/2001/10/xml-exc-c14n#WithComments"

    @classmethod
    def from_uri(cls, uri: str) -> "CanonicalizationKind":
        try:
            return cls(uri)
        except ValueError:
            raise UnsupportedCanonicalizationKindError(f"unknown algorithm {uri!r}") from None

    @property
    def implemented(self) -> bool:
        return self in _OPTIONS


@dataclass(frozen=True)
class FilterOptions:
    """What the copy pass keeps."""
    keep_comments: bool = False
    filtered_targets: FrozenSet[str] = frozenset({XML_PREFIX})

    def __post_init__(self):
        # The XML declaration never survives canonicalization.
        object.__setattr__(self, "filtered_targets", frozenset(self.filtered_targets) | {XML_PREFIX})


_OPTIONS = {
    CanonicalizationKind.C14N: FilterOptions(keep_comments=False),
}


def options_for(kind) -> FilterOptions:
    """Return the filter options for ``kind`` (an enum member or its URI)."""
    if not isinstance(kind, CanonicalizationKind):
        kind = CanonicalizationKind.from_uri(kind)
    options = _OPTIONS.get(kind)
    if options is None:
        raise UnsupportedCanonicalizationKindError(kind.value)
    return options


def attribute_sort_key(attr: Attr) -> Tuple[int, str, str]:
    """Namespace declarations first, then namespace URI, then local name."""
    return (0 if is_namespace_declaration(attr) else 1, attr.name.space, attr.name.local)


def canonical_attributes(attributes) -> List[Attr]:
    return sorted((trim_attribute(attr) for attr in attributes), key=attribute_sort_key)


def _filter(value: NodeValue, options: FilterOptions, document_level: bool) -> Optional[NodeValue]:
    """Return the payload to copy into the canonical tree, or None to drop it."""
    if isinstance(value, Element):
        return Element(value.name, canonical_attributes(value.attributes), value.end)
    if isinstance(value, Text):
        if document_level:
            return None
        return Text(value.data)
    if isinstance(value, ProcessingInstruction):
        if value.target in options.filtered_targets:
            return None
        return ProcessingInstruction(value.target, value.instruction)
    if isinstance(value, Comment):
        if options.keep_comments:
            return Comment(value.data)
        return None
    if isinstance(value, Directive):
        return None
    raise TypeError(f"unexpected node payload: {value!r}")


def apply_filter(root: Node, options: FilterOptions) -> Node:
    """Copy the document rooted at ``root`` into a new tree per ``options``.

    Document-level rules apply only to the root's direct children. The walk
    uses an explicit stack so nesting depth is not bound by the recursion limit.
    """
    if not root.is_root:
        raise TypeError("canonicalization starts at the document root")
    new_root = Node.document()

    # (source node, new parent, is a document-level child)
    pending: List[Tuple[Node, Node, bool]] = [
        (child, new_root, True) for child in reversed(root.children)
    ]
    while pending:
        node, new_parent, at_document_level = pending.pop()
        value = _filter(node.value, options, at_document_level)
        if value is None:
            logger.debug("dropped %s", type(node.value).__name__)
            continue
        copy = new_parent.add_child(value)
        pending.extend((child, copy, False) for child in reversed(node.children))

    if len(new_root.children) > 1:
        survivors, new_root.children = new_root.children, []
        for index, child in enumerate(survivors):
            if index:
                new_root.add_child(Text(DOCUMENT_SEPARATOR))
            new_root.children.append(child)

    return new_root


def canonicalize(root: Node, kind=CanonicalizationKind.C14N) -> Node:
    """Return the canonical copy of the document rooted at ``root``.

    Raises:
        UnsupportedCanonicalizationKindError: ``kind`` is not implemented.
    """
    options = options_for(kind)
    return apply_filter(root, options)
