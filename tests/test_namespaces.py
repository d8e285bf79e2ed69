import pytest

from saml_c14n.builder import parse
from saml_c14n.canonical_xml import canonicalize_bytes
from saml_c14n.errors import MalformedNamespaceReferenceError
from saml_c14n.namespaces import (
    attribute_name,
    close_name,
    element_name,
    find_declaration,
    qualify,
)
from saml_c14n.nodes import Element, Node
from saml_c14n.tokenizer import XML_NAMESPACE, Attr, QName


def first_element(node):
    return next(child for child in node.children if isinstance(child.value, Element))


def test_unqualified_name_has_no_prefix():
    root = parse(b"<root/>")
    assert element_name(first_element(root)) == "root"


def test_prefix_from_own_declaration():
    root = parse(b'<a:root xmlns:a="urn:x"/>')
    assert element_name(first_element(root)) == "a:root"


def test_default_declaration_gives_unprefixed_name():
    root = parse(b'<root xmlns="urn:d"><child/></root>')
    outer = first_element(root)
    assert element_name(outer) == "root"
    assert element_name(first_element(outer)) == "child"


def test_nearest_declaration_wins():
    root = parse(
        b'<a:root xmlns:a="urn:x">'
        b'<b:child xmlns:b="urn:x"><a:leaf/></b:child>'
        b'<a:sibling/>'
        b'</a:root>'
    )
    outer = first_element(root)
    child, sibling = outer.children
    leaf = child.children[0]
    assert element_name(leaf) == "b:leaf"
    assert element_name(sibling) == "a:sibling"


def test_descendant_scopes_are_not_consulted():
    root = parse(b'<root><p:x xmlns:p="urn:p"/></root>')
    outer = first_element(root)
    assert find_declaration(outer, "urn:p") is None
    assert find_declaration(outer.children[0], "urn:p") == QName("xmlns", "p")


def test_attribute_names():
    root = parse(b'<root xmlns="urn:d" xmlns:p="urn:p" p:x="1" y="2"/>')
    node = first_element(root)
    names = [attribute_name(attr, node) for attr in node.value.attributes]
    assert names == ["xmlns", "xmlns:p", "p:x", "y"]


def test_attribute_bound_by_nearer_default_declaration_is_unprefixed():
    data = b'<a xmlns:p="urn:x"><b xmlns="urn:x" p:at="1"/></a>'
    inner = first_element(first_element(parse(data)))
    assert [attribute_name(attr, inner) for attr in inner.value.attributes] == ["xmlns", "at"]
    assert canonicalize_bytes(data) == b'<a xmlns:p="urn:x"><b xmlns="urn:x" at="1"></b></a>'


def test_xml_namespace_needs_no_declaration():
    node = Node.document().add_child(Element(QName("", "root")))
    assert qualify(QName(XML_NAMESPACE, "lang"), node) == "xml:lang"


def test_undeclared_element_namespace_is_fatal():
    root = parse(b"<p:root/>")
    with pytest.raises(MalformedNamespaceReferenceError):
        element_name(first_element(root))


def test_undeclared_attribute_namespace_is_fatal():
    node = Node.document().add_child(Element(QName("", "root"), [Attr(QName("urn:nowhere", "x"), "1")]))
    with pytest.raises(MalformedNamespaceReferenceError):
        attribute_name(node.value.attributes[0], node)


def test_close_name_resolved_from_current_scope():
    doc = Node.document()
    node = doc.add_child(Element(
        QName("urn:x", "a"),
        [Attr(QName("xmlns", "p"), "urn:x")],
        end=QName("urn:x", "a"),
    ))
    assert close_name(node) == "p:a"


def test_close_name_falls_back_to_open_name():
    doc = Node.document()
    node = doc.add_child(Element(QName("", "a")))
    assert close_name(node) == "a"
