"""
namespaces.py — Prefix resolution by ancestor lookup

Names in the tree carry a namespace URI, never a prefix. To print one, walk
from the node up through its ancestors and use the nearest declaration of that
URI. A default declaration (``xmlns="..."``) yields an unprefixed name.
"""

from __future__ import annotations
from typing import Optional

from .errors import MalformedNamespaceReferenceError
from .nodes import Element, Node, is_namespace_declaration
from .tokenizer import XML_NAMESPACE, XML_PREFIX, XMLNS_PREFIX, Attr, QName


def find_declaration(node: Node, uri: str) -> Optional[QName]:
    """Return the nearest declaration of ``uri`` at or above ``node``."""
    for ancestor in node.ancestors():
        declaration = ancestor.namespace_scope.get(uri)
        if declaration is not None:
            return declaration
    return None


def qualify(name: QName, node: Node) -> str:
    """Render ``name`` with the prefix bound to its URI in scope at ``node``.

    Raises:
        MalformedNamespaceReferenceError: No ancestor declares ``name.space``.
    """
    if not name.space:
        return name.local

    declaration = find_declaration(node, name.space)
    if declaration is None:
        if name.space == XML_NAMESPACE:
            return f"{XML_PREFIX}:{name.local}"
        raise MalformedNamespaceReferenceError(f"{name.local!r} in namespace {name.space!r}")

    if declaration.space == "" and declaration.local == XMLNS_PREFIX:
        return name.local
    return f"{declaration.local}:{name.local}"


def element_name(node: Node) -> str:
    element: Element = node.value
    return qualify(element.name, node)


def close_name(node: Node) -> str:
    """Resolve the close tag independently of the open tag."""
    element: Element = node.value
    return qualify(element.end or element.name, node)


def attribute_name(attr: Attr, node: Node) -> str:
    if is_namespace_declaration(attr):
        if attr.name.space:
            return f"{attr.name.space}:{attr.name.local}"
        return attr.name.local
    return qualify(attr.name, node)
