"""
test_canonical_xml.py — End-to-end canonicalization vectors

A SAML response with formatting, comments and an XML declaration must reduce
to one exact byte sequence; the same response written with CRLF line endings,
reordered attributes and declarations must reduce to the same bytes.

Run:
  pytest tests/test_canonical_xml.py -v
"""

import hashlib
import io
import unittest

from saml_c14n import (
    CanonicalizationKind,
    UnsupportedCanonicalizationKindError,
    canonical_hash,
    canonicalize_bytes,
    canonicalize_stream,
)

SAML_RESPONSE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<!-- issued by test IdP -->\n'
    '<samlp:Response xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" ID="_r1" Version="2.0"'
    ' IssueInstant="2024-01-01T00:00:00Z" xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion">\n'
    '  <saml:Issuer>https://idp.example.com</saml:Issuer>\n'
    '  <samlp:Status><samlp:StatusCode Value="urn:oasis:names:tc:SAML:2.0:status:Success"/></samlp:Status>\n'
    '  <saml:Assertion ID="_a1" Version="2.0" IssueInstant="2024-01-01T00:00:00Z">\n'
    '    <!-- subject follows -->\n'
    '    <saml:Subject><saml:NameID Format="urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress">'
    'alice@example.com</saml:NameID></saml:Subject>\n'
    '    <saml:AttributeStatement>\n'
    '      <saml:Attribute Name="role"><saml:AttributeValue>admin &amp; owner</saml:AttributeValue></saml:Attribute>\n'
    '    </saml:AttributeStatement>\n'
    '  </saml:Assertion>\n'
    '</samlp:Response>\n'
).encode("utf-8")

# Same logical document: CRLF endings, attributes and declarations reordered,
# different comments, a self-closed element written out in full.
SAML_RESPONSE_REFORMATTED = (
    '<?xml version="1.0"?>\r\n'
    '<samlp:Response IssueInstant="2024-01-01T00:00:00Z" Version="2.0"'
    ' xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion" ID="_r1"'
    ' xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol">\r\n'
    '  <saml:Issuer>https://idp.example.com</saml:Issuer>\r\n'
    '  <samlp:Status><samlp:StatusCode Value="urn:oasis:names:tc:SAML:2.0:status:Success"></samlp:StatusCode></samlp:Status>\r\n'
    '  <saml:Assertion IssueInstant="2024-01-01T00:00:00Z" ID="_a1" Version="2.0">\r\n'
    '    <!--another comment-->\r\n'
    '    <saml:Subject><saml:NameID Format="urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress">'
    'alice@example.com</saml:NameID></saml:Subject>\r\n'
    '    <saml:AttributeStatement>\r\n'
    '      <saml:Attribute Name="role"><saml:AttributeValue>admin &#38; owner</saml:AttributeValue></saml:Attribute>\r\n'
    '    </saml:AttributeStatement>\r\n'
    '  </saml:Assertion>\r\n'
    '</samlp:Response>\r\n'
    '<!-- trailing -->\r\n'
).encode("utf-8")

SAML_EXPECTED = (
    '<samlp:Response xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion"'
    ' xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" ID="_r1"'
    ' IssueInstant="2024-01-01T00:00:00Z" Version="2.0">\n'
    '  <saml:Issuer>https://idp.example.com</saml:Issuer>\n'
    '  <samlp:Status><samlp:StatusCode Value="urn:oasis:names:tc:SAML:2.0:status:Success">'
    '</samlp:StatusCode></samlp:Status>\n'
    '  <saml:Assertion ID="_a1" IssueInstant="2024-01-01T00:00:00Z" Version="2.0">\n'
    '    \n'
    '    <saml:Subject><saml:NameID Format="urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress">'
    'alice@example.com</saml:NameID></saml:Subject>\n'
    '    <saml:AttributeStatement>\n'
    '      <saml:Attribute Name="role"><saml:AttributeValue>admin &amp; owner</saml:AttributeValue></saml:Attribute>\n'
    '    </saml:AttributeStatement>\n'
    '  </saml:Assertion>\n'
    '</samlp:Response>'
).encode("utf-8")


class TestSamlVector(unittest.TestCase):

    def test_expected_bytes(self):
        self.assertEqual(canonicalize_bytes(SAML_RESPONSE), SAML_EXPECTED)

    def test_reformatted_document_collapses_to_same_bytes(self):
        self.assertEqual(canonicalize_bytes(SAML_RESPONSE_REFORMATTED), SAML_EXPECTED)

    def test_stream_matches_bytes(self):
        self.assertEqual(canonicalize_stream(io.BytesIO(SAML_RESPONSE)), SAML_EXPECTED)

    def test_canonical_form_is_idempotent(self):
        once = canonicalize_bytes(SAML_RESPONSE)
        self.assertEqual(canonicalize_bytes(once), once)

    def test_no_trailing_newline(self):
        self.assertFalse(canonicalize_bytes(SAML_RESPONSE).endswith(b"\n"))

    def test_hash_of_canonical_bytes(self):
        expected = hashlib.sha256(SAML_EXPECTED).hexdigest()
        self.assertEqual(canonical_hash(SAML_RESPONSE), expected)
        self.assertEqual(canonical_hash(SAML_RESPONSE_REFORMATTED), expected)


class TestKindSelection(unittest.TestCase):

    def test_unsupported_kind_checked_before_reading(self):
        class Unreadable:
            def read(self, size=-1):
                raise AssertionError("input must not be read")

        with self.assertRaises(UnsupportedCanonicalizationKindError):
            canonicalize_stream(Unreadable(), CanonicalizationKind.EXC_C14N)

    def test_kind_by_uri(self):
        self.assertEqual(
            canonicalize_bytes(b"<a/>", "http://www.w3.org/TR/2001/REC-xml-c14n-20010315"),
            b"<a></a>",
        )
