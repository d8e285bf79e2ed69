"""
tokenizer.py — Structural XML events from the expat parser

The canonicalizer does not lex XML itself. This module drives the standard
library's expat parser over a binary stream and turns its callbacks into a
flat sequence of typed events:

    StartTag, EndTag, Text, Comment, ProcessingInstruction, Directive

Names are reported as namespace-qualified ``QName(space, local)`` pairs with
no prefix baked in. Namespace declarations themselves keep ``space="xmlns"``
(``xmlns:p``) or ``local="xmlns"`` (default declaration) so later stages can
recognize them.

Character data and attribute values are stored already escaped for canonical
output, so the serializer can emit them verbatim.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterator, List, Tuple, Union
from xml.parsers import expat

from .errors import TokenizationError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

XMLNS_PREFIX = "xmlns"
XML_PREFIX = "xml"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


@dataclass(frozen=True)
class QName:
    """Namespace URI plus local part; the prefix spelling is not kept."""
    space: str
    local: str


@dataclass(frozen=True)
class Attr:
    name: QName
    value: str


@dataclass(frozen=True)
class StartTag:
    name: QName
    attributes: Tuple[Attr, ...] = ()


@dataclass(frozen=True)
class EndTag:
    name: QName


@dataclass(frozen=True)
class Text:
    data: str


@dataclass(frozen=True)
class Comment:
    data: str


@dataclass(frozen=True)
class ProcessingInstruction:
    target: str
    instruction: str = ""


@dataclass(frozen=True)
class Directive:
    data: str


Event = Union[StartTag, EndTag, Text, Comment, ProcessingInstruction, Directive]


# ---------------------------------------------------------------------------
# Canonical escaping
# ---------------------------------------------------------------------------

def escape_text(data: str) -> str:
    """Escape character data for canonical output."""
    return (
        data.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\r", "&#xD;")
    )


def escape_attribute(value: str) -> str:
    """Escape an attribute value for canonical output inside double quotes."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace('"', "&quot;")
        .replace("\t", "&#x9;")
        .replace("\n", "&#xA;")
        .replace("\r", "&#xD;")
    )


# ---------------------------------------------------------------------------
# expat adapter
# ---------------------------------------------------------------------------

def _split(raw: str) -> Tuple[str, str]:
    prefix, sep, local = raw.partition(":")
    if not sep:
        return "", raw
    return prefix, local


class _ExpatAdapter:
    """Collects expat callbacks into a list of events.

    expat runs without its own namespace processing so that declaration
    attributes stay visible; prefixes are resolved here against a stack of
    prefix -> URI maps.
    """

    def __init__(self):
        p = expat.ParserCreate()
        p.ordered_attributes = True
        p.buffer_text = True

        p.StartElementHandler = self._start_element
        p.EndElementHandler = self._end_element
        p.CharacterDataHandler = self._character_data
        p.CommentHandler = self._comment
        p.ProcessingInstructionHandler = self._processing_instruction
        p.XmlDeclHandler = self._xml_decl
        p.StartDoctypeDeclHandler = self._start_doctype
        p.EndDoctypeDeclHandler = self._end_doctype

        self._parser = p
        self._in_doctype = False
        self._events: List[Event] = []
        self._text: List[str] = []
        self._scopes: List[Dict[str, str]] = [{XML_PREFIX: XML_NAMESPACE}]

    @property
    def depth(self) -> int:
        return len(self._scopes) - 1

    # -- name resolution ---------------------------------------------------

    def _element_name(self, raw: str, scope: Dict[str, str]) -> QName:
        prefix, local = _split(raw)
        if not prefix:
            return QName(scope.get("", ""), local)
        # An undeclared prefix is kept literally; it fails at serialization.
        return QName(scope.get(prefix, prefix), local)

    def _attribute_name(self, raw: str, scope: Dict[str, str]) -> QName:
        prefix, local = _split(raw)
        if not prefix:
            return QName("", local)
        if prefix == XMLNS_PREFIX:
            return QName(XMLNS_PREFIX, local)
        return QName(scope.get(prefix, prefix), local)

    # -- handlers ----------------------------------------------------------

    def _flush_text(self) -> None:
        if self._text:
            self._events.append(Text(escape_text("".join(self._text))))
            self._text = []

    def _emit(self, event: Event) -> None:
        self._flush_text()
        self._events.append(event)

    def _start_element(self, raw_name: str, raw_attrs: List[str]) -> None:
        pairs = list(zip(raw_attrs[0::2], raw_attrs[1::2]))

        scope = dict(self._scopes[-1])
        for attr_name, value in pairs:
            if attr_name == XMLNS_PREFIX:
                scope[""] = value
            elif attr_name.startswith(XMLNS_PREFIX + ":"):
                scope[attr_name[len(XMLNS_PREFIX) + 1:]] = value
        self._scopes.append(scope)

        attributes = tuple(
            Attr(self._attribute_name(attr_name, scope), escape_attribute(value))
            for attr_name, value in pairs
        )
        self._emit(StartTag(self._element_name(raw_name, scope), attributes))

    def _end_element(self, raw_name: str) -> None:
        scope = self._scopes.pop()
        self._emit(EndTag(self._element_name(raw_name, scope)))

    def _character_data(self, data: str) -> None:
        self._text.append(data)

    # Comments and PIs inside the internal subset belong to the DTD, not to
    # the document.
    def _comment(self, data: str) -> None:
        if self._in_doctype:
            return
        self._emit(Comment(data))

    def _processing_instruction(self, target: str, data: str) -> None:
        if self._in_doctype:
            return
        self._emit(ProcessingInstruction(target, data or ""))

    def _xml_decl(self, version, encoding, standalone) -> None:
        parts = []
        if version:
            parts.append(f'version="{version}"')
        if encoding:
            parts.append(f'encoding="{encoding}"')
        if standalone != -1:
            parts.append(f'standalone="{"yes" if standalone else "no"}"')
        self._emit(ProcessingInstruction(XML_PREFIX, " ".join(parts)))

    def _start_doctype(self, name, system_id, public_id, has_internal_subset) -> None:
        data = f"DOCTYPE {name}"
        if public_id:
            data += f' PUBLIC "{public_id}"'
            if system_id:
                data += f' "{system_id}"'
        elif system_id:
            data += f' SYSTEM "{system_id}"'
        self._emit(Directive(data))
        self._in_doctype = True

    def _end_doctype(self) -> None:
        self._in_doctype = False

    # -- driving -----------------------------------------------------------

    def feed(self, chunk: bytes, final: bool) -> None:
        try:
            self._parser.Parse(chunk, final)
        except expat.ExpatError as exc:
            no_elements = expat.errors.codes[expat.errors.XML_ERROR_NO_ELEMENTS]
            if final and exc.code == no_elements and self.depth > 0:
                # Input ran out with elements still open. Report a plain end of
                # stream so the tree builder classifies it as unclosed tags.
                logger.debug("input ended at depth %d", self.depth)
            else:
                raise TokenizationError(str(exc), line=exc.lineno, column=exc.offset) from exc
        if final:
            self._flush_text()

    def drain(self) -> List[Event]:
        events, self._events = self._events, []
        return events


def tokenize(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Event]:
    """Yield structural events for the XML document read from ``stream``.

    Raises:
        TokenizationError: expat rejected the input.
        OSError: Reading ``stream`` failed.
    """
    adapter = _ExpatAdapter()
    while True:
        chunk = stream.read(chunk_size)
        final = not chunk
        adapter.feed(chunk, final)
        yield from adapter.drain()
        if final:
            return
