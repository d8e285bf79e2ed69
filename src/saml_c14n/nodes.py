"""
nodes.py — Document tree model

A document is a tree of ``Node`` objects. Each node holds one payload:

    RootMarker             synthetic document root (exactly one, at the top)
    Element                element with attributes and its close-tag name
    Text / Comment / ProcessingInstruction / Directive   leaf payloads

Children are owned by their parent in document order. The parent link is a
weak reference used only to walk upward for namespace lookup.

``namespace_scope`` maps namespace URI -> the declaring attribute's name, built
from the declarations written directly on the element when the node is
created. It is read-only afterwards.
"""

from __future__ import annotations
import weakref
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Union

from .tokenizer import (
    XMLNS_PREFIX,
    Attr,
    Comment,
    Directive,
    ProcessingInstruction,
    QName,
    Text,
)

ATTRIBUTE_WHITESPACE = "\t "

_EMPTY_SCOPE: Mapping[str, QName] = MappingProxyType({})


@dataclass(frozen=True)
class RootMarker:
    """Payload of the synthetic document root."""


@dataclass
class Element:
    name: QName
    attributes: List[Attr] = field(default_factory=list)
    # Set by the tree builder once the matching end tag is seen.
    end: Optional[QName] = None


NodeValue = Union[RootMarker, Element, Text, Comment, ProcessingInstruction, Directive]


def is_namespace_declaration(attr: Attr) -> bool:
    """True for ``xmlns="..."`` and ``xmlns:prefix="..."`` attributes."""
    return attr.name.space == XMLNS_PREFIX or (
        attr.name.space == "" and attr.name.local == XMLNS_PREFIX
    )


def trim_attribute(attr: Attr) -> Attr:
    """Return ``attr`` with blanks and tabs stripped from its name parts."""
    return Attr(
        QName(
            attr.name.space.strip(ATTRIBUTE_WHITESPACE),
            attr.name.local.strip(ATTRIBUTE_WHITESPACE),
        ),
        attr.value,
    )


def _scope_from(attributes: Iterable[Attr]) -> Mapping[str, QName]:
    scope = {attr.value: attr.name for attr in attributes if is_namespace_declaration(attr)}
    if not scope:
        return _EMPTY_SCOPE
    return MappingProxyType(scope)


class Node:
    __slots__ = ("value", "children", "namespace_scope", "_parent", "__weakref__")

    def __init__(self, value: NodeValue, parent: Optional["Node"] = None):
        self.value = value
        self.children: List[Node] = []
        self._parent = weakref.ref(parent) if parent is not None else None
        if isinstance(value, Element):
            self.namespace_scope = _scope_from(value.attributes)
        else:
            self.namespace_scope = _EMPTY_SCOPE

    @classmethod
    def document(cls) -> "Node":
        """Create an empty synthetic document root."""
        return cls(RootMarker())

    @property
    def parent(self) -> Optional["Node"]:
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_root(self) -> bool:
        return isinstance(self.value, RootMarker)

    def add_child(self, value: NodeValue) -> "Node":
        """Create a node for ``value``, append it as the last child, return it."""
        if isinstance(value, RootMarker):
            raise TypeError("a document root cannot be nested inside another node")
        child = Node(value, parent=self)
        self.children.append(child)
        return child

    def ancestors(self) -> Iterable["Node"]:
        """Yield this node, then each enclosing node up to the root."""
        node: Optional[Node] = self
        while node is not None:
            yield node
            node = node.parent

    def __repr__(self) -> str:
        return f"Node({self.value!r}, children={len(self.children)})"
