"""
builder.py — Document tree builder

Consumes the tokenizer's event stream and assembles a ``Node`` tree under a
synthetic document root, tracking open elements on an explicit stack.

Structural failures abort the whole parse; no partial tree is returned:

    UnbalancedTagsError   end tag with no open element
    MismatchedTagsError   end tag naming a different element than the open one
    UnclosedTagsError     input ended with elements still open
"""

from __future__ import annotations
import io
import logging
from typing import BinaryIO, Iterable, List, Union

from .errors import MismatchedTagsError, UnbalancedTagsError, UnclosedTagsError
from .linefeed import LineFeedNormalizer
from .nodes import Element, Node
from .tokenizer import (
    DEFAULT_CHUNK_SIZE,
    Comment,
    Directive,
    EndTag,
    Event,
    ProcessingInstruction,
    QName,
    StartTag,
    Text,
    tokenize,
)

logger = logging.getLogger(__name__)


def _display(name: QName) -> str:
    return f"{{{name.space}}}{name.local}" if name.space else name.local


def build_tree(events: Iterable[Event]) -> Node:
    """Build a document tree from structural events.

    Args:
        events: Events in document order, as produced by ``tokenize``.

    Returns:
        Node: The synthetic document root.

    Raises:
        UnbalancedTagsError: An end tag arrived with only the root open.
        MismatchedTagsError: An end tag does not match the open element.
        UnclosedTagsError: Events ran out with elements still open.
        TokenizationError: Propagated unchanged from the event source.
    """
    root = Node.document()
    stack: List[Node] = [root]

    for event in events:
        top = stack[-1]
        if isinstance(event, StartTag):
            node = top.add_child(Element(event.name, list(event.attributes)))
            stack.append(node)
        elif isinstance(event, EndTag):
            if len(stack) <= 1:
                raise UnbalancedTagsError(f"</{_display(event.name)}> at document level")
            element = top.value
            if element.name != event.name:
                # Open and close names must agree even if the tokenizer did
                # not check them itself.
                raise MismatchedTagsError(
                    f"<{_display(element.name)}> closed by </{_display(event.name)}>"
                )
            element.end = event.name
            stack.pop()
        elif isinstance(event, (Text, Comment, ProcessingInstruction, Directive)):
            top.add_child(event)
        else:
            raise TypeError(f"unexpected tokenizer event: {event!r}")

    if len(stack) != 1:
        open_names = ", ".join(_display(node.value.name) for node in stack[1:])
        raise UnclosedTagsError(f"still open: {open_names}")

    logger.debug("built tree with %d top-level nodes", len(root.children))
    return root


def parse(
    source: Union[bytes, bytearray, BinaryIO],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Node:
    """Parse an XML document into a tree.

    ``source`` is either the raw document bytes or a readable binary stream.
    Line endings are normalized before tokenization.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    return build_tree(tokenize(LineFeedNormalizer(source), chunk_size))
